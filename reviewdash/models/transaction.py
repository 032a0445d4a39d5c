"""Transaction data models."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Set
from pydantic import BaseModel, Field, field_validator
from reviewdash.utils.timestamp import parse_timestamp


def coerce_id(value: Any) -> Any:
    """Backends hand out ints or strings; identifiers are opaque strings client-side."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def coerce_timestamp(value: Any) -> Any:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        return parse_timestamp(value)
    return value


class NormalizedInfo(BaseModel):
    """Result of the backend's merchant normalization pass for one transaction."""
    
    merchant: str = Field(..., description="Normalized merchant name")
    category: str = Field(default="", description="Top-level category")
    sub_category: str = Field(default="", description="Sub-category")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Confidence score 0-1")
    is_subscription: bool = Field(default=False, description="Backend believes this is a subscription charge")
    flags: Set[str] = Field(default_factory=set, description="Free-form review flags")
    
    @field_validator("flags", mode="before")
    @classmethod
    def flags_default(cls, value: Any) -> Any:
        return set() if value is None else value


class Transaction(BaseModel):
    """Transaction model as returned by the merchant-analysis endpoints."""
    
    id: str = Field(..., description="Opaque identifier, unique within the dataset")
    original: Optional[str] = Field(None, description="Raw source description (present after normalization)")
    amount: Decimal = Field(..., description="Negative for spending, positive for income")
    date: Optional[datetime] = Field(None, description="When the transaction happened")
    normalized: Optional[NormalizedInfo] = None
    
    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        return coerce_id(v)
    
    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        """Accept the backend's timestamp variants (see parse_timestamp)."""
        return coerce_timestamp(v)
    
    class Config:
        json_schema_extra = {
            "example": {
                "id": "tx_101",
                "original": "NETFLIX.COM 866-579-7172 CA",
                "amount": "-15.49",
                "date": "2024-01-15T10:30:00Z",
                "normalized": {
                    "merchant": "Netflix",
                    "category": "Entertainment",
                    "sub_category": "Streaming",
                    "confidence": 0.97,
                    "is_subscription": True,
                    "flags": ["recurring"],
                },
            }
        }
