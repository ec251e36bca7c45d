"""Unit tests for configuration, logging and models."""

import json
import logging
import pytest
from datetime import datetime
from pydantic import ValidationError
from smartledger.constants import AnomalyType
from smartledger.models import Transaction, Anomaly, DetectionResult
from smartledger.utils.config_loader import load_config, get_rules, get_agent_profile
from smartledger.utils.errors import ConfigurationError
from smartledger.utils.logging import JSONFormatter, get_logger


def test_default_config_loads():
    config = load_config()

    assert config['version']
    assert get_rules(config, 'anomaly_detection')['max_reported'] == 10
    assert get_rules(config, 'risk_assessment')['high_count'] == 7
    assert get_rules(config, 'unknown_section') == {}


def test_config_from_env(monkeypatch, tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("version: '2'\nrules: {}\ncollaborator: {enabled: false}\nreport: {}\n", encoding="utf-8")
    monkeypatch.setenv("SMARTLEDGER_CONFIG", str(path))

    config = load_config()

    assert config['version'] == '2'
    assert config['collaborator']['enabled'] is False


def test_config_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(str(tmp_path / "missing.yaml"))


def test_config_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("rules: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_config_missing_keys(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("version: '1'\nrules: {}\n", encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(str(path))
    assert "collaborator" in str(exc_info.value)


def test_agent_profile_lookup(config):
    profile = get_agent_profile(config, "68efd2aaeed55e88460e00ea")

    assert profile['model'] == "anthropic/claude-sonnet-4.5"
    assert get_agent_profile(config, "no-such-agent") == {}


def test_json_formatter_merges_structured_payload():
    record = logging.LogRecord(
        "smartledger.test", logging.INFO, __file__, 1,
        json.dumps({"message": "Parsed 3 transactions", "skipped_rows": 1}), None, None
    )

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["logger"] == "smartledger.test"
    assert data["message"] == "Parsed 3 transactions"
    assert data["skipped_rows"] == 1


def test_json_formatter_plain_message():
    record = logging.LogRecord("smartledger.test", logging.WARNING, __file__, 1, "plain text", None, None)
    assert json.loads(JSONFormatter().format(record))["message"] == "plain text"


def test_get_logger_does_not_duplicate_handlers():
    first = get_logger("smartledger.test.handlers")
    second = get_logger("smartledger.test.handlers")
    assert first.logger is second.logger
    assert len(second.logger.handlers) == 1


def test_transaction_is_immutable():
    txn = Transaction(id="T1", date=datetime(2024, 1, 1), amount=10.0)

    assert txn.category == "Uncategorized"
    with pytest.raises(ValidationError):
        txn.amount = 20.0


def test_anomaly_confidence_bounds():
    with pytest.raises(ValidationError):
        Anomaly(id="T1_AMOUNT", transaction_id="T1", anomaly_type=AnomalyType.AMOUNT,
                confidence=1.5, description="too confident")


def test_detection_result_truncated_flag():
    assert not DetectionResult().truncated
    assert DetectionResult(anomalies=[], total_count=2).truncated


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
