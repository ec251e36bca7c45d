"""Unit tests for risk aggregation and fallback narratives"""

import pytest
from datetime import datetime
from smartledger.constants import AnomalyType, RiskLevel, ReportFormat
from smartledger.models import Anomaly
from smartledger.tools.risk_tools import (
    assess_risk,
    possible_cause,
    anomaly_badge,
    risk_badge,
    build_fallback_summary,
    build_fallback_report
)


@pytest.mark.parametrize("count,level", [
    (0, RiskLevel.LOW),
    (3, RiskLevel.LOW),
    (4, RiskLevel.MEDIUM),
    (7, RiskLevel.MEDIUM),
    (8, RiskLevel.HIGH),
    (40, RiskLevel.HIGH),
])
def test_risk_level_thresholds(count, level):
    assert assess_risk(count).risk_level == level


def test_patterns_isolated_up_to_five():
    assert assess_risk(5).patterns_detected == ["Isolated suspicious activity"]


def test_patterns_high_frequency_above_five():
    assert assess_risk(6).patterns_detected == [
        "High frequency of anomalies",
        "Multiple suspect transactions"
    ]


def test_risk_thresholds_from_config():
    risk = assess_risk(2, rules={'high_count': 1, 'medium_count': 0, 'high_frequency_count': 1})
    assert risk.risk_level == RiskLevel.HIGH
    assert len(risk.patterns_detected) == 2


def test_assessment_is_independent_per_call():
    first = assess_risk(6)
    first.patterns_detected.append("mutated")
    assert "mutated" not in assess_risk(6).patterns_detected


def test_possible_cause_lookup():
    assert possible_cause(AnomalyType.AMOUNT) == "Possible fraudulent transaction"
    assert possible_cause(AnomalyType.TIMING) == "Automated or bot activity"
    assert possible_cause(AnomalyType.PATTERN) == "Structured money movement"
    assert possible_cause(AnomalyType.CATEGORY) == "Review transaction details"


def test_badge_lookup_tables():
    assert anomaly_badge("Amount Anomaly") == {"color": "destructive", "icon": "trending-up"}
    assert anomaly_badge("Timing Anomaly")["icon"] == "clock"
    assert anomaly_badge("Something Else") == {"color": "default", "icon": "alert-circle"}
    assert risk_badge("High")["color"] == "destructive"
    assert risk_badge("Low")["icon"] == "check-circle"
    assert risk_badge("Extreme") == {"color": "default", "icon": "alert-circle"}


def _anomalies():
    return [
        Anomaly(id="T8_AMOUNT", transaction_id="T8", anomaly_type=AnomalyType.AMOUNT,
                confidence=0.69, description="Unusually high amount: $2,000.00"),
        Anomaly(id="T8_PATTERN", transaction_id="T8", anomaly_type=AnomalyType.PATTERN,
                confidence=0.7, description="Suspect round number amount: $2,000.00"),
    ]


def test_fallback_summary():
    anomalies = _anomalies()
    risk = assess_risk(2)

    summary = build_fallback_summary(anomalies, risk).summary

    assert summary.overview == ''
    assert summary.risk_level == RiskLevel.LOW
    assert summary.patterns_detected == ["Isolated suspicious activity"]
    assert [a.id for a in summary.anomalies] == ["T8_AMOUNT", "T8_PATTERN"]
    assert summary.anomalies[0].explanation == "Unusually high amount: $2,000.00"
    assert summary.anomalies[0].possible_causes == ["Possible fraudulent transaction"]
    assert summary.anomalies[1].possible_causes == ["Structured money movement"]
    assert summary.anomalies[1].recommendation == "Review transaction details and verify with account holder."


def test_fallback_report():
    summary = build_fallback_summary(_anomalies(), assess_risk(2))
    now = datetime(2024, 1, 21, 9, 0)

    report = build_fallback_report(summary, now=now).report

    assert report.title == "Transaction Anomaly Analysis Report"
    assert report.generated_date == "2024-01-21T09:00:00"
    assert report.format == ReportFormat.PDF
    assert report.metadata.report_id.startswith("RPT")
    assert [s.title for s in report.sections] == ["Executive Summary", "Detailed Findings", "Recommendations"]
    assert report.sections[1].anomalies == [
        "Unusually high amount: $2,000.00",
        "Suspect round number amount: $2,000.00"
    ]
    assert report.sections[2].action_items == [
        "Review flagged transactions",
        "Verify suspicious activity",
        "Implement additional monitoring"
    ]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
