"""Constants and enums for SmartLedger"""

from enum import Enum


class AnomalyType(str, Enum):
    """Anomaly types emitted by the detector"""
    AMOUNT = "Amount Anomaly"
    TIMING = "Timing Anomaly"
    PATTERN = "Pattern Anomaly"
    CATEGORY = "Category Anomaly"  # reserved, never emitted


class RiskLevel(str, Enum):
    """Coarse risk classification"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ProcessingStep(str, Enum):
    """Pipeline steps, strictly linear"""
    UPLOAD = "upload"
    DETECTING = "detecting"
    SUMMARIZING = "summarizing"
    REPORTING = "reporting"
    COMPLETE = "complete"


class ReportFormat(str, Enum):
    """Export formats (same text, different media type)"""
    PDF = "pdf"
    TEXT = "text"


# Anomaly id suffixes, keyed by type
ANOMALY_ID_SUFFIX = {
    AnomalyType.AMOUNT: "AMOUNT",
    AnomalyType.TIMING: "TIMING",
    AnomalyType.PATTERN: "PATTERN",
    AnomalyType.CATEGORY: "CATEGORY",
}

# Default detection thresholds
DEFAULT_AMOUNT_SIGMA = 2.0
DEFAULT_AMOUNT_CONFIDENCE_SIGMA = 3.0
DEFAULT_AMOUNT_MAX_CONFIDENCE = 0.95
DEFAULT_TIMING_WINDOW_HOURS = 1.0
DEFAULT_TIMING_AMOUNT_RATIO = 0.5
DEFAULT_TIMING_CONFIDENCE = 0.8
DEFAULT_ROUND_AMOUNT_UNIT = 100
DEFAULT_PATTERN_CONFIDENCE = 0.7
MAX_REPORTED_ANOMALIES = 10

# Risk aggregation thresholds (strictly greater than)
DEFAULT_HIGH_RISK_COUNT = 7
DEFAULT_MEDIUM_RISK_COUNT = 3
DEFAULT_HIGH_FREQUENCY_COUNT = 5

HIGH_FREQUENCY_PATTERNS = ["High frequency of anomalies", "Multiple suspect transactions"]
ISOLATED_PATTERNS = ["Isolated suspicious activity"]

# Presentation lookup tables
POSSIBLE_CAUSES = {
    AnomalyType.AMOUNT: "Possible fraudulent transaction",
    AnomalyType.TIMING: "Automated or bot activity",
    AnomalyType.PATTERN: "Structured money movement",
}
DEFAULT_POSSIBLE_CAUSE = "Review transaction details"
DEFAULT_RECOMMENDATION = "Review transaction details and verify with account holder."

ANOMALY_BADGES = {
    AnomalyType.AMOUNT: {"color": "destructive", "icon": "trending-up"},
    AnomalyType.PATTERN: {"color": "warning", "icon": "alert-circle"},
    AnomalyType.TIMING: {"color": "secondary", "icon": "clock"},
    AnomalyType.CATEGORY: {"color": "default", "icon": "filter"},
}
RISK_BADGES = {
    RiskLevel.HIGH: {"color": "destructive", "icon": "alert-triangle"},
    RiskLevel.MEDIUM: {"color": "warning", "icon": "alert-circle"},
    RiskLevel.LOW: {"color": "default", "icon": "check-circle"},
}
DEFAULT_BADGE = {"color": "default", "icon": "alert-circle"}

# Report defaults
REPORT_PREAMBLE = "SmartLedger Transaction Anomaly Analysis Report"
DEFAULT_REPORT_TITLE = "Transaction Anomaly Analysis Report"
DEFAULT_ACTION_ITEMS = [
    "Review flagged transactions",
    "Verify suspicious activity",
    "Implement additional monitoring",
]
REPORT_MEDIA_TYPES = {
    ReportFormat.PDF: "application/pdf",
    ReportFormat.TEXT: "text/plain",
}
REPORT_EXTENSIONS = {
    ReportFormat.PDF: "pdf",
    ReportFormat.TEXT: "txt",
}
