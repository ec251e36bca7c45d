"""Sample transaction batch for demos and smoke runs"""

from pathlib import Path
from typing import List, Union
from smartledger.models import Transaction
from smartledger.tools.csv_parser import COLUMNS, parse_date
from smartledger.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_ROWS = [
    ('T001', '2024-01-15', 'Grocery Store Purchase', 124.56, 'Groceries', 'WholeFoods'),
    ('T002', '2024-01-15T10:30:00', 'Coffee Shop Purchase', 8.95, 'Dining', 'Starbucks'),
    ('T003', '2024-01-16', 'Gas Station Purchase', 67.89, 'Transportation', 'Shell'),
    ('T004', '2024-01-16T15:00:00', 'Restaurant Purchase', 1250.00, 'Dining', 'FineDining'),
    ('T005', '2024-01-17', 'Utility Payment', 185.43, 'Utilities', 'ElectricCo'),
    ('T006', '2024-01-17T21:30:00', 'Online Purchase', 1500.00, 'Shopping', 'Amazon'),
    ('T007', '2024-01-18', 'ATM Withdrawal', 300.00, 'Cash', 'ATM'),
    ('T008', '2024-01-18T23:00:00', 'Online Gambling', 2000.00, 'Entertainment', 'CasinoSite'),
    ('T009', '2024-01-19', 'Grocery Store Purchase', 85.32, 'Groceries', 'Kroger'),
    ('T010', '2024-01-20', 'Coffee Shop Purchase', 6.78, 'Dining', 'Dunkin'),
]
SAMPLE_ACCOUNT = 'Checking-1234'


def generate_sample_transactions() -> List[Transaction]:
    """The ten-transaction demo batch"""
    return [
        Transaction(
            id=txn_id,
            date=parse_date(date),
            description=description,
            amount=amount,
            account=SAMPLE_ACCOUNT,
            category=category,
            merchant=merchant
        )
        for txn_id, date, description, amount, category, merchant in SAMPLE_ROWS
    ]


def sample_csv() -> str:
    """Demo batch as CSV text; text fields quoted, dates as written"""
    lines = [",".join(COLUMNS)]
    for txn_id, date, description, amount, category, merchant in SAMPLE_ROWS:
        lines.append(f'{txn_id},"{date}","{description}",{amount},"{SAMPLE_ACCOUNT}","{category}","{merchant}"')
    return "\n".join(lines)


def write_sample_csv(path: Union[str, Path]) -> Path:
    """
    Write the demo batch to a CSV file

    Returns:
        Path of the written file
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(sample_csv(), encoding='utf-8')
    logger.info(f"Sample data written to {filepath}", rows=len(SAMPLE_ROWS))
    return filepath
