"""Response envelopes and client-side view models."""
from datetime import datetime, timezone
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from reviewdash.models.transaction import Transaction
from reviewdash.models.pattern import Pattern

Tab = Literal["merchant", "pattern"]
TABS = ("merchant", "pattern")

NotificationKind = Literal["success", "error"]


class AnalyzeMerchantsResponse(BaseModel):
    """Full result set of a normalization pass."""
    
    normalized_transactions: List[Transaction] = Field(default_factory=list)


class DetectPatternsResponse(BaseModel):
    """Full result set of a pattern detection pass."""
    
    patterns: List[Pattern] = Field(default_factory=list)


class Ack(BaseModel):
    """Acknowledgement of a mutating call; the backend may add any fields."""
    
    model_config = ConfigDict(extra="allow")
    
    message: Optional[str] = None


class Notification(BaseModel):
    """The single transient message shown to the operator."""
    
    kind: NotificationKind
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
