"""Shared fixtures"""

import pytest
from datetime import datetime, timedelta
from pathlib import Path
from smartledger.models import Transaction
from smartledger.utils.config_loader import load_config

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_csv_path():
    return FIXTURES / "sample_transactions.csv"


@pytest.fixture
def sample_csv_text(sample_csv_path):
    return sample_csv_path.read_text(encoding="utf-8")


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def make_transactions():
    """Build transactions from (amount, minutes_after_start) pairs"""
    def _make(rows, start=datetime(2024, 1, 1, 9, 0)):
        return [
            Transaction(
                id=f"TX{i:03d}",
                date=start + timedelta(minutes=minutes),
                description="Test Purchase",
                amount=amount,
                account="Checking-1234"
            )
            for i, (amount, minutes) in enumerate(rows)
        ]
    return _make
