from .notifications import NotificationCenter
from .tracking import PendingSet, BusyFlags
from .loader import TabScopedLoader, ResourceState, MERCHANT, PATTERN
from .controller import DashboardController, ControlState

__all__ = [
    "NotificationCenter",
    "PendingSet",
    "BusyFlags",
    "TabScopedLoader",
    "ResourceState",
    "MERCHANT",
    "PATTERN",
    "DashboardController",
    "ControlState",
]
