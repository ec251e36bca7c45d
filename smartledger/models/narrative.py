"""Shapes expected back from the narrative collaborator"""

from pydantic import BaseModel, Field
from typing import List, Optional
from smartledger.constants import RiskLevel, ReportFormat


class AnomalyExplanation(BaseModel):
    """Per-anomaly narrative"""

    id: str = Field(..., description="Anomaly ID")
    explanation: str = Field(..., description="Why the anomaly matters")
    possible_causes: List[str] = Field(default_factory=list)
    recommendation: str = Field("", description="Suggested follow-up")


class Summary(BaseModel):
    overview: str = ""
    anomalies: List[AnomalyExplanation] = Field(default_factory=list)
    patterns_detected: List[str] = Field(default_factory=list)
    risk_level: RiskLevel


class SummaryData(BaseModel):
    """Summary agent response"""

    summary: Summary

    def explanation_for(self, anomaly_id: str) -> Optional[AnomalyExplanation]:
        return next((a for a in self.summary.anomalies if a.id == anomaly_id), None)


class ReportSection(BaseModel):
    """Report section; body is content, else anomalies, else action items"""

    title: str
    content: Optional[str] = None
    anomalies: Optional[List[str]] = None
    action_items: Optional[List[str]] = None

    @property
    def body(self) -> str:
        if self.content:
            return self.content
        if self.anomalies:
            return "\n".join(self.anomalies)
        if self.action_items:
            return "\n".join(self.action_items)
        return ""


class ReportMetadata(BaseModel):
    report_id: str
    timestamp: str


class Report(BaseModel):
    title: str
    generated_date: str
    sections: List[ReportSection] = Field(default_factory=list)
    format: ReportFormat = ReportFormat.PDF
    metadata: ReportMetadata


class ReportData(BaseModel):
    """Report agent response"""

    report: Report

    class Config:
        json_schema_extra = {
            "example": {
                "report": {
                    "title": "Transaction Anomaly Analysis Report",
                    "generated_date": "2024-01-21T09:00:00",
                    "sections": [
                        {"title": "Executive Summary", "content": "Three anomalies were found."},
                        {"title": "Recommendations", "action_items": ["Review flagged transactions"]}
                    ],
                    "format": "pdf",
                    "metadata": {"report_id": "RPT1705827600000", "timestamp": "2024-01-21T09:00:00"}
                }
            }
        }
