"""Risk aggregation and fallback narrative builders"""

import time
from datetime import datetime
from typing import Dict, Any, List, Optional
from smartledger.constants import (
    AnomalyType,
    RiskLevel,
    ReportFormat,
    DEFAULT_HIGH_RISK_COUNT,
    DEFAULT_MEDIUM_RISK_COUNT,
    DEFAULT_HIGH_FREQUENCY_COUNT,
    HIGH_FREQUENCY_PATTERNS,
    ISOLATED_PATTERNS,
    POSSIBLE_CAUSES,
    DEFAULT_POSSIBLE_CAUSE,
    DEFAULT_RECOMMENDATION,
    ANOMALY_BADGES,
    RISK_BADGES,
    DEFAULT_BADGE,
    DEFAULT_REPORT_TITLE,
    DEFAULT_ACTION_ITEMS
)
from smartledger.models import (
    Anomaly,
    RiskAssessment,
    AnomalyExplanation,
    Summary,
    SummaryData,
    ReportSection,
    ReportMetadata,
    Report,
    ReportData
)
from smartledger.utils.logging import get_logger
from smartledger.utils.metrics import risk_assessments

logger = get_logger(__name__)


def assess_risk(anomaly_count: int, rules: Optional[Dict[str, Any]] = None) -> RiskAssessment:
    """
    Classify risk from the untruncated anomaly count

    Args:
        anomaly_count: Number of anomalies found before any display cap
        rules: Optional `rules.risk_assessment` config section

    Returns:
        RiskAssessment
    """
    rules = rules or {}
    high_count = rules.get('high_count', DEFAULT_HIGH_RISK_COUNT)
    medium_count = rules.get('medium_count', DEFAULT_MEDIUM_RISK_COUNT)
    high_frequency_count = rules.get('high_frequency_count', DEFAULT_HIGH_FREQUENCY_COUNT)

    if anomaly_count > high_count:
        level = RiskLevel.HIGH
    elif anomaly_count > medium_count:
        level = RiskLevel.MEDIUM
    else:
        level = RiskLevel.LOW

    patterns = HIGH_FREQUENCY_PATTERNS if anomaly_count > high_frequency_count else ISOLATED_PATTERNS

    risk_assessments.labels(risk_level=level.value).inc()
    logger.info(f"Risk assessed: {level.value}", anomaly_count=anomaly_count)

    return RiskAssessment(risk_level=level, patterns_detected=list(patterns), anomaly_count=anomaly_count)


def possible_cause(anomaly_type: AnomalyType) -> str:
    return POSSIBLE_CAUSES.get(anomaly_type, DEFAULT_POSSIBLE_CAUSE)


def anomaly_badge(anomaly_type: str) -> Dict[str, str]:
    """Badge (color, icon) for an anomaly type label"""
    try:
        return ANOMALY_BADGES[AnomalyType(anomaly_type)]
    except (ValueError, KeyError):
        return DEFAULT_BADGE


def risk_badge(risk_level: str) -> Dict[str, str]:
    """Badge (color, icon) for a risk level label"""
    try:
        return RISK_BADGES[RiskLevel(risk_level)]
    except (ValueError, KeyError):
        return DEFAULT_BADGE


def build_fallback_summary(anomalies: List[Anomaly], risk: RiskAssessment) -> SummaryData:
    """Deterministic summary used when the summary agent's reply is unusable"""
    return SummaryData(summary=Summary(
        overview='',
        anomalies=[
            AnomalyExplanation(
                id=a.id,
                explanation=a.description,
                possible_causes=[possible_cause(a.anomaly_type)],
                recommendation=DEFAULT_RECOMMENDATION
            )
            for a in anomalies
        ],
        patterns_detected=list(risk.patterns_detected),
        risk_level=risk.risk_level
    ))


def build_fallback_report(summary: SummaryData, now: Optional[datetime] = None) -> ReportData:
    """Deterministic report used when the report agent's reply is unusable"""
    now = now or datetime.now()
    timestamp = now.isoformat()

    return ReportData(report=Report(
        title=DEFAULT_REPORT_TITLE,
        generated_date=timestamp,
        sections=[
            ReportSection(title='Executive Summary', content=summary.summary.overview),
            ReportSection(
                title='Detailed Findings',
                anomalies=[a.explanation for a in summary.summary.anomalies]
            ),
            ReportSection(title='Recommendations', action_items=list(DEFAULT_ACTION_ITEMS))
        ],
        format=ReportFormat.PDF,
        metadata=ReportMetadata(
            report_id=f"RPT{int(time.time() * 1000)}",
            timestamp=timestamp
        )
    ))
