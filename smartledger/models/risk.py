"""Risk assessment data model"""

from pydantic import BaseModel, Field
from typing import List
from smartledger.constants import RiskLevel


class RiskAssessment(BaseModel):
    """Coarse risk classification derived from the anomaly count"""

    risk_level: RiskLevel = Field(..., description="Low, Medium or High")
    patterns_detected: List[str] = Field(default_factory=list, description="Pattern labels")
    anomaly_count: int = Field(0, ge=0, description="Untruncated anomaly count the assessment is based on")
