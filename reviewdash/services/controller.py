"""Dashboard controller composing the two tab workflows."""
import logging
from typing import List, Optional, Union
from pydantic import BaseModel, Field
from reviewdash.config import Settings, settings as default_settings
from reviewdash.gateway.base import ResourceGateway, UploadSource
from reviewdash.gateway.factory import get_gateway
from reviewdash.models import Notification, Pattern, Tab, Transaction
from reviewdash.services.loader import MERCHANT, PATTERN, TabScopedLoader
from reviewdash.services.notifications import NotificationCenter
from reviewdash.services.tracking import (
    ANALYZING_MERCHANT,
    BULK_DELETING,
    DETECTING_PATTERNS,
    UPLOADING,
    BusyFlags,
    PendingSet,
)

logger = logging.getLogger(__name__)


class ControlState(BaseModel):
    """Disabled-state of every control, as of one moment."""
    
    active_tab: Tab
    is_loading: bool = False
    upload_disabled: bool = False
    analyze_disabled: bool = False
    detect_disabled: bool = False
    delete_all_transactions_disabled: bool = True
    delete_all_patterns_disabled: bool = True
    pending_ids: List[str] = Field(default_factory=list, description="Rows whose delete is in flight")


class DashboardController:
    """
    Runs the operator's actions against the backend.
    
    Actions may overlap freely (upload while an analysis is settling, several
    row deletes at once); each one claims its own busy flag or pending-set
    entry and releases it however the call ends. Every action returns True on
    success and False on failure or when its control is disabled.
    """
    
    def __init__(
        self,
        gateway: ResourceGateway,
        notifications: Optional[NotificationCenter] = None,
        *,
        initial_tab: Tab = MERCHANT,
        owns_gateway: bool = False,
    ):
        self.gateway = gateway
        self.notifications = notifications or NotificationCenter(default_settings.notification_duration_ms)
        self.busy = BusyFlags()
        self.pending = PendingSet()
        self.loader = TabScopedLoader(gateway, self.notifications, initial_tab)
        self._owns_gateway = owns_gateway
    
    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "DashboardController":
        config = config or default_settings
        return cls(
            get_gateway(config=config),
            NotificationCenter(config.notification_duration_ms),
            owns_gateway=True,
        )
    
    # --- state ---
    
    @property
    def active_tab(self) -> Tab:
        return self.loader.active_tab
    
    @property
    def transactions(self) -> List[Transaction]:
        return self.loader.transactions
    
    @property
    def patterns(self) -> List[Pattern]:
        return self.loader.patterns
    
    @property
    def is_loading(self) -> bool:
        return self.loader.is_loading
    
    @property
    def notification(self) -> Optional[Notification]:
        return self.notifications.current
    
    def is_row_disabled(self, record_id: Union[str, int]) -> bool:
        return self.pending.is_pending(str(record_id))
    
    def can_delete_all(self, tab: Optional[Tab] = None) -> bool:
        state = self.loader.state(tab or self.active_tab)
        return bool(state.items) and not self.busy.bulk_deleting
    
    def controls(self) -> ControlState:
        return ControlState(
            active_tab=self.active_tab,
            is_loading=self.is_loading,
            upload_disabled=self.busy.uploading,
            analyze_disabled=self.busy.analyzing_merchant,
            detect_disabled=self.busy.detecting_patterns,
            delete_all_transactions_disabled=not self.can_delete_all(MERCHANT),
            delete_all_patterns_disabled=not self.can_delete_all(PATTERN),
            pending_ids=sorted(self.pending.snapshot()),
        )
    
    # --- lifecycle ---
    
    async def mount(self) -> bool:
        """Load the initial tab."""
        return await self.loader.activate(self.active_tab)
    
    async def select_tab(self, tab: Tab) -> bool:
        return await self.loader.activate(tab)
    
    async def close(self) -> None:
        """Unmount: drop both collections, the notification and, if owned, the gateway."""
        self.loader.close()
        self.notifications.clear()
        if self._owns_gateway:
            await self.gateway.aclose()
    
    def _fail(self, message: str, log_message: str, error: Exception) -> bool:
        logger.error(log_message, error)
        if not self.loader.closed:
            self.notifications.error(message)
        return False
    
    # --- actions ---
    
    async def upload(self, file: Optional[UploadSource], filename: Optional[str] = None) -> bool:
        """Upload a CSV, then refetch the transaction list."""
        if file is None or self.busy.uploading:
            return False
        
        with self.busy.active(UPLOADING):
            try:
                ack = await self.gateway.upload_file(file, filename)
            except Exception as e:
                return self._fail("Failed to upload file", "Error uploading file: %s", e)
        
        if self.loader.closed:
            return False
        logger.info("File uploaded", extra={"ack": ack.model_dump()})
        self.notifications.success("File uploaded successfully")
        await self.loader.refresh(MERCHANT)
        return True
    
    async def analyze_merchants(self) -> bool:
        """Run merchant normalization and show its result set as-is."""
        if self.busy.analyzing_merchant:
            return False
        
        with self.busy.active(ANALYZING_MERCHANT):
            try:
                result = await self.gateway.analyze_merchants()
            except Exception as e:
                return self._fail("Failed to analyze merchants", "Error during merchant analysis: %s", e)
        
        if self.loader.closed:
            return False
        logger.info("Merchant analysis result", extra={"count": len(result.normalized_transactions)})
        self.loader.state(MERCHANT).replace(result.normalized_transactions)
        self.notifications.success("Merchant analysis completed")
        return True
    
    async def detect_patterns(self) -> bool:
        """Run pattern detection and show its result set as-is."""
        if self.busy.detecting_patterns:
            return False
        
        with self.busy.active(DETECTING_PATTERNS):
            try:
                result = await self.gateway.detect_patterns()
            except Exception as e:
                return self._fail("Failed to detect patterns", "Error during pattern detection: %s", e)
        
        if self.loader.closed:
            return False
        logger.info("Pattern detection result", extra={"count": len(result.patterns)})
        self.loader.state(PATTERN).replace(result.patterns)
        self.notifications.success("Pattern detection completed")
        return True
    
    async def delete_transaction(self, transaction_id: Union[str, int]) -> bool:
        """Delete one transaction; a second delete of the same id while pending is ignored."""
        record_id = str(transaction_id)
        if self.pending.is_pending(record_id):
            return False
        
        with self.pending.track(record_id):
            try:
                await self.gateway.delete_transaction(record_id)
            except Exception as e:
                return self._fail("Failed to delete transaction", "Error deleting transaction: %s", e)
        
        if self.loader.closed:
            return False
        self.loader.state(MERCHANT).remove(record_id)
        self.notifications.success("Transaction deleted successfully")
        return True
    
    async def delete_all(self, tab: Optional[Tab] = None) -> bool:
        """
        Bulk-delete one tab's resource (the active tab by default).
        
        Disabled when that resource is empty or a bulk delete is running.
        """
        tab = tab or self.active_tab
        if not self.can_delete_all(tab):
            return False
        
        state = self.loader.state(tab)
        call = self.gateway.delete_all_transactions if tab == MERCHANT else self.gateway.delete_all_patterns
        with self.busy.active(BULK_DELETING):
            try:
                await call()
            except Exception as e:
                return self._fail(f"Failed to delete all {state.label}", "Error during bulk delete: %s", e)
        
        if self.loader.closed:
            return False
        state.clear()
        self.notifications.success(f"All {state.label} deleted successfully")
        return True
