"""Transaction data model"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class Transaction(BaseModel):
    """Transaction parsed from one input row"""

    id: str = Field(..., description="Transaction ID (unique within a batch, not enforced)")
    date: Optional[datetime] = Field(..., description="Transaction timestamp, None when the field could not be read")
    description: str = Field("", description="Free-text description")
    amount: float = Field(..., description="Signed amount in currency units")
    account: str = Field("Unknown", description="Account label")
    category: str = Field("Uncategorized", description="Spending category")
    merchant: str = Field("Unknown", description="Merchant name")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "T004",
                "date": "2024-01-16T15:00:00",
                "description": "Restaurant Purchase",
                "amount": 1250.00,
                "account": "Checking-1234",
                "category": "Dining",
                "merchant": "FineDining"
            }
        }
