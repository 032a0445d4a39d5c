from .transaction import Transaction, NormalizedInfo
from .pattern import Pattern
from .responses import (
    Tab,
    TABS,
    NotificationKind,
    AnalyzeMerchantsResponse,
    DetectPatternsResponse,
    Ack,
    Notification,
)

__all__ = [
    "Transaction",
    "NormalizedInfo",
    "Pattern",
    "Tab",
    "TABS",
    "NotificationKind",
    "AnalyzeMerchantsResponse",
    "DetectPatternsResponse",
    "Ack",
    "Notification",
]
