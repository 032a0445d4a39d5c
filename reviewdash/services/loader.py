"""Tab-scoped data loading with a stale-response guard."""
import logging
from typing import Dict, List, Optional, Set
from reviewdash.gateway.base import ResourceGateway
from reviewdash.models import TABS, Pattern, Tab, Transaction
from reviewdash.services.notifications import NotificationCenter

logger = logging.getLogger(__name__)

MERCHANT = "merchant"
PATTERN = "pattern"


class ResourceState:
    """One backend-managed collection as currently displayed."""
    
    def __init__(self, tab: Tab, label: str):
        self.tab = tab
        self.label = label
        self.items: list = []
        self.is_loading = False
        self.loaded = False
        self.first_fetch_issued = False
        # Bumped on every fetch issue, replace and clear; a fetch applies only
        # while the generation it was issued under is still current.
        self.generation = 0
        # generation of each in-flight fetch -> ids removed locally since it was issued
        self._removed_during: Dict[int, Set[str]] = {}
    
    def _local_write(self) -> None:
        self.generation += 1
        self.is_loading = False
    
    def fetch_started(self) -> int:
        self.generation += 1
        self._removed_during[self.generation] = set()
        return self.generation
    
    def fetch_settled(self, generation: int) -> Set[str]:
        """Forget an in-flight fetch; returns the ids removed while it was out."""
        return self._removed_during.pop(generation, set())
    
    def replace(self, items) -> None:
        self._local_write()
        self.items = list(items)
        self.loaded = True
    
    def remove(self, record_id: str) -> None:
        # in-flight fetches stay current and drop this id on arrival
        for removed in self._removed_during.values():
            removed.add(record_id)
        self.items = [item for item in self.items if item.id != record_id]
    
    def clear(self) -> None:
        self._local_write()
        self.items = []
    
    def contains(self, record_id: str) -> bool:
        return any(item.id == record_id for item in self.items)


class TabScopedLoader:
    """Fetches and holds each tab's dataset, discarding responses that arrive too late."""
    
    def __init__(
        self,
        gateway: ResourceGateway,
        notifications: NotificationCenter,
        initial_tab: Tab = MERCHANT,
    ):
        self.gateway = gateway
        self.notifications = notifications
        self.resources: Dict[str, ResourceState] = {
            MERCHANT: ResourceState(MERCHANT, "transactions"),
            PATTERN: ResourceState(PATTERN, "patterns"),
        }
        self.active_tab: Tab = self._check_tab(initial_tab)
        self._closed = False
    
    @staticmethod
    def _check_tab(tab: str) -> str:
        if tab not in TABS:
            raise ValueError(f"Unknown tab {tab!r}; expected one of {TABS}")
        return tab
    
    def state(self, tab: Tab) -> ResourceState:
        return self.resources[self._check_tab(tab)]
    
    @property
    def transactions(self) -> List[Transaction]:
        return self.resources[MERCHANT].items
    
    @property
    def patterns(self) -> List[Pattern]:
        return self.resources[PATTERN].items
    
    @property
    def is_loading(self) -> bool:
        """True only while the merchant table is waiting for its first data."""
        return self.resources[MERCHANT].is_loading
    
    @property
    def closed(self) -> bool:
        return self._closed
    
    def _is_current(self, tab: Tab, generation: int) -> bool:
        return (
            not self._closed
            and self.active_tab == tab
            and self.resources[tab].generation == generation
        )
    
    async def activate(self, tab: Tab) -> bool:
        """Make `tab` active and fetch its dataset."""
        self.active_tab = self._check_tab(tab)
        return await self.refresh(tab)
    
    async def refresh(self, tab: Optional[Tab] = None) -> bool:
        """
        Refetch a tab's dataset (the active tab by default).
        
        Returns True when the response was applied. A failure leaves the
        previous items in place; a response whose tab is no longer active, or
        which a newer fetch, analysis result or bulk clear has superseded, is
        discarded. Rows deleted locally while the fetch was out are dropped
        from the response before it is applied.
        """
        tab = self._check_tab(tab or self.active_tab)
        if self._closed:
            return False
        if tab != self.active_tab:
            logger.debug("Skipping refetch of inactive tab", extra={"tab": tab})
            return False
        
        state = self.resources[tab]
        generation = state.fetch_started()
        if not state.first_fetch_issued:
            state.first_fetch_issued = True
            state.is_loading = True
        
        fetch = self.gateway.list_transactions if tab == MERCHANT else self.gateway.list_patterns
        try:
            items = await fetch()
        except Exception as e:
            if self._is_current(tab, generation):
                logger.error("Error fetching %s: %s", state.label, e)
                self.notifications.error(f"Failed to fetch {state.label}")
            else:
                logger.debug("Ignoring failure of stale fetch", extra={"tab": tab, "error": str(e)})
            return False
        finally:
            removed = state.fetch_settled(generation)
            if state.generation == generation:
                state.is_loading = False
        
        if not self._is_current(tab, generation):
            logger.debug(
                "Discarding stale response",
                extra={"tab": tab, "generation": generation, "active_tab": self.active_tab},
            )
            return False
        
        state.items = [item for item in items if item.id not in removed]
        state.loaded = True
        return True
    
    def close(self) -> None:
        """Tear down: later settles are discarded and both collections are dropped."""
        self._closed = True
        for state in self.resources.values():
            state.clear()
