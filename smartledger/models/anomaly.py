"""Anomaly data models"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from smartledger.constants import AnomalyType


class Anomaly(BaseModel):
    """Anomaly flagged on a single transaction"""

    id: str = Field(..., description="Composite ID '<transaction_id>_<TYPE>'")
    transaction_id: str = Field(..., description="ID of the flagged transaction")
    anomaly_type: AnomalyType = Field(..., description="Detection rule that fired")
    confidence: float = Field(..., ge=0, le=1, description="Heuristic confidence (0-1)")
    description: str = Field(..., description="Human-readable explanation")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "T008_AMOUNT",
                "transaction_id": "T008",
                "anomaly_type": "Amount Anomaly",
                "confidence": 0.69,
                "description": "Unusually high amount: $2,000.00"
            }
        }


class EnrichedAnomaly(Anomaly):
    """Anomaly joined with its source transaction fields for presentation"""

    date: Optional[datetime]
    transaction_description: str
    amount: float
    account: str
    category: str
    merchant: str


class DetectionResult(BaseModel):
    """Detector output: capped anomaly list plus the untruncated count"""

    anomalies: List[Anomaly] = Field(default_factory=list, description="First anomalies in detection order")
    total_count: int = Field(0, ge=0, description="Anomalies found before truncation")

    @property
    def truncated(self) -> bool:
        return self.total_count > len(self.anomalies)
