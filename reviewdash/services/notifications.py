"""Single-slot transient notification with timed auto-dismiss."""
import asyncio
import logging
from typing import Callable, List, Optional
from reviewdash.models import Notification, NotificationKind

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 3000


class NotificationCenter:
    """
    Holds at most one notification; a newer one silently replaces an older one.
    
    Every notify() cancels the previous dismissal timer before scheduling its
    own, so a stale timer can never clear a later message.
    """
    
    def __init__(self, duration_ms: int = DEFAULT_DURATION_MS):
        self.duration_ms = duration_ms
        self._current: Optional[Notification] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._listeners: List[Callable[[Optional[Notification]], None]] = []
    
    @property
    def current(self) -> Optional[Notification]:
        return self._current
    
    def subscribe(self, listener: Callable[[Optional[Notification]], None]) -> None:
        """Call listener(notification_or_None) on every change."""
        self._listeners.append(listener)
    
    def _emit(self) -> None:
        for listener in self._listeners:
            listener(self._current)
    
    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
    
    def notify(self, kind: NotificationKind, message: str) -> Notification:
        """Show (kind, message) and schedule its dismissal. Needs a running loop."""
        loop = asyncio.get_running_loop()
        self._cancel_timer()
        notification = Notification(kind=kind, message=message)
        self._current = notification
        self._handle = loop.call_later(self.duration_ms / 1000, self._expire, notification)
        logger.debug("Notification shown", extra={"kind": kind, "notification": message})
        self._emit()
        return notification
    
    def success(self, message: str) -> Notification:
        return self.notify("success", message)
    
    def error(self, message: str) -> Notification:
        return self.notify("error", message)
    
    def _expire(self, notification: Notification) -> None:
        # Identity check on top of cancel(): only the timer of the shown message may clear it
        if self._current is notification:
            self._handle = None
            self._current = None
            self._emit()
    
    def clear(self) -> None:
        """Remove the current notification immediately."""
        self._cancel_timer()
        if self._current is not None:
            self._current = None
            self._emit()
