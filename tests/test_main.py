"""Tests for the command-line entry point"""

import pytest
from smartledger.main import main


def test_sample_command_writes_csv(tmp_path):
    target = tmp_path / "dummy_transactions.csv"

    assert main(["sample", str(target)]) == 0

    lines = target.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "id,date,description,amount,account,category,merchant"
    assert len(lines) == 11
    assert lines[8].startswith('T008,"2024-01-18T23:00:00","Online Gambling",2000.0')


def test_analyze_offline_writes_report(tmp_path, sample_csv_path, capsys):
    out_dir = tmp_path / "reports"

    code = main(["analyze", str(sample_csv_path), "--offline", "--output", str(out_dir), "--format", "pdf"])

    assert code == 0
    reports = list(out_dir.glob("smartledger-report-pdf-*.pdf"))
    assert len(reports) == 1
    assert "Total Anomalies Found: 3" in reports[0].read_text(encoding="utf-8")

    printed = capsys.readouterr().out
    assert "Anomalies found: 3" in printed
    assert "Flagged Transactions (3)" in printed
    assert "-> Review transaction details and verify with account holder." in printed


def test_analyze_reports_errors(tmp_path, capsys):
    bad = tmp_path / "bad.csv"
    bad.write_text("id,date,description,amount\n", encoding="utf-8")

    assert main(["analyze", str(bad), "--offline", "--output", str(tmp_path)]) == 1
    assert "CSV file must have header and data rows" in capsys.readouterr().err


def test_analyze_missing_csv(tmp_path, capsys):
    assert main(["analyze", str(tmp_path / "absent.csv"), "--offline", "--output", str(tmp_path)]) == 1
    assert "CSV file not found" in capsys.readouterr().err


def test_analyze_with_missing_config(tmp_path, sample_csv_path):
    assert main(["--config", str(tmp_path / "missing.yaml"), "analyze", str(sample_csv_path), "--offline"]) == 1


def test_sample_round_trips_through_analysis(tmp_path):
    target = tmp_path / "dummy.csv"
    main(["sample", str(target)])

    assert main(["analyze", str(target), "--offline", "--output", str(tmp_path / "out")]) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
