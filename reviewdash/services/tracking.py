"""Pending-set and busy-flag trackers."""
from contextlib import contextmanager
from typing import Dict, FrozenSet, Iterator, Set

UPLOADING = "uploading"
ANALYZING_MERCHANT = "analyzing_merchant"
DETECTING_PATTERNS = "detecting_patterns"
BULK_DELETING = "bulk_deleting"

BUSY_FLAGS = (UPLOADING, ANALYZING_MERCHANT, DETECTING_PATTERNS, BULK_DELETING)


class PendingSet:
    """Record ids with an in-flight mutating action."""
    
    def __init__(self):
        self._ids: Set[str] = set()
    
    def begin(self, record_id: str) -> None:
        self._ids.add(record_id)
    
    def end(self, record_id: str) -> None:
        self._ids.discard(record_id)
    
    def is_pending(self, record_id: str) -> bool:
        return record_id in self._ids
    
    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids
    
    def __len__(self) -> int:
        return len(self._ids)
    
    def snapshot(self) -> FrozenSet[str]:
        return frozenset(self._ids)
    
    @contextmanager
    def track(self, record_id: str) -> Iterator[None]:
        """begin(record_id) now, end(record_id) however the block exits."""
        self.begin(record_id)
        try:
            yield
        finally:
            self.end(record_id)


class BusyFlags:
    """One independent boolean per coarse-grained action."""
    
    def __init__(self):
        self._flags: Dict[str, bool] = {name: False for name in BUSY_FLAGS}
    
    def is_set(self, name: str) -> bool:
        return self._flags[name]
    
    @property
    def uploading(self) -> bool:
        return self._flags[UPLOADING]
    
    @property
    def analyzing_merchant(self) -> bool:
        return self._flags[ANALYZING_MERCHANT]
    
    @property
    def detecting_patterns(self) -> bool:
        return self._flags[DETECTING_PATTERNS]
    
    @property
    def bulk_deleting(self) -> bool:
        return self._flags[BULK_DELETING]
    
    def any_busy(self) -> bool:
        return any(self._flags.values())
    
    def as_dict(self) -> Dict[str, bool]:
        return dict(self._flags)
    
    @contextmanager
    def active(self, name: str) -> Iterator[None]:
        """
        Hold flag `name` for the duration of the block.
        
        The flag is cleared in `finally`, so an exception or a cancelled task
        can never leave its control disabled.
        
        Raises:
            KeyError: If name is not a known flag
        """
        if name not in self._flags:
            raise KeyError(name)
        self._flags[name] = True
        try:
            yield
        finally:
            self._flags[name] = False
