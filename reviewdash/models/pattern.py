"""Recurring-payment pattern model."""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator
from reviewdash.models.transaction import coerce_id, coerce_timestamp


class Pattern(BaseModel):
    """A recurring charge detected by the backend's pattern analyzer."""
    
    id: str = Field(..., description="Opaque identifier, unique within the pattern set")
    type: str = Field(..., description="Categorical tag, e.g. 'recurring' or 'subscription'")
    merchant: str
    amount: Decimal
    frequency: str = Field(..., description="weekly, monthly, ...")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score 0-1")
    # next_expected >= last_occurrence is the backend's business, not checked here
    next_expected: Optional[datetime] = None
    last_occurrence: Optional[datetime] = None
    occurrence_count: int = Field(default=0, ge=0, description="Number of matched transactions")
    is_active: bool = True
    
    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        return coerce_id(v)
    
    @field_validator("next_expected", "last_occurrence", mode="before")
    @classmethod
    def parse_timestamps(cls, v: Any) -> Any:
        return coerce_timestamp(v)
