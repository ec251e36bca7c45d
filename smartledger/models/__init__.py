"""Data models for SmartLedger"""

from .transaction import Transaction
from .anomaly import Anomaly, EnrichedAnomaly, DetectionResult
from .risk import RiskAssessment
from .narrative import (
    AnomalyExplanation,
    Summary,
    SummaryData,
    ReportSection,
    ReportMetadata,
    Report,
    ReportData
)

__all__ = [
    "Transaction",
    "Anomaly",
    "EnrichedAnomaly",
    "DetectionResult",
    "RiskAssessment",
    "AnomalyExplanation",
    "Summary",
    "SummaryData",
    "ReportSection",
    "ReportMetadata",
    "Report",
    "ReportData"
]
