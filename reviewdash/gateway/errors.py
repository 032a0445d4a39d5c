"""Gateway failure type."""
from typing import Optional

TRANSPORT = "transport"
STATUS = "status"
TIMEOUT = "timeout"
MALFORMED = "malformed"


class GatewayError(RuntimeError):
    """A backend call that did not produce a usable success payload.
    
    Attributes:
        operation: Gateway operation name, e.g. "list_transactions"
        kind: One of "transport", "status", "timeout", "malformed"
        status_code: HTTP status for "status" failures
        detail: Short diagnostic text (response snippet or transport message)
    """
    
    def __init__(
        self,
        operation: str,
        kind: str,
        status_code: Optional[int] = None,
        detail: str = "",
    ):
        self.operation = operation
        self.kind = kind
        self.status_code = status_code
        self.detail = detail
        message = f"{operation} failed ({kind}"
        if status_code is not None:
            message += f" {status_code}"
        message += ")"
        if detail:
            message += f": {detail}"
        super().__init__(message)
