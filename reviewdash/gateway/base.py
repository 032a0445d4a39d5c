"""Base resource gateway interface."""
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Sequence, Tuple, Union
from reviewdash.models import (
    Ack,
    AnalyzeMerchantsResponse,
    DetectPatternsResponse,
    Pattern,
    Transaction,
)

UploadSource = Union[str, os.PathLike, bytes, BinaryIO]

DEFAULT_UPLOAD_NAME = "transactions.csv"

# Keys under which list endpoints have been seen to wrap their arrays
TRANSACTION_LIST_KEYS = ("normalized_transactions", "transactions", "items", "data")
PATTERN_LIST_KEYS = ("patterns", "items", "data")


def unwrap_list(payload: Any, keys: Sequence[str]) -> List[Any]:
    """
    Return the record array from either a bare JSON array or a wrapping object.
    
    Raises:
        ValueError: If no array can be found
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    raise ValueError(f"Expected a list or an object with one of {list(keys)}")


def resolve_upload(file: UploadSource, filename: Optional[str] = None) -> Tuple[str, bytes]:
    """Turn a path, raw bytes or a binary file object into (filename, content)."""
    if isinstance(file, (bytes, bytearray)):
        return filename or DEFAULT_UPLOAD_NAME, bytes(file)
    if isinstance(file, (str, os.PathLike)):
        path = Path(file)
        return filename or path.name, path.read_bytes()
    if hasattr(file, "read"):
        content = file.read()
        if isinstance(content, str):
            content = content.encode("utf-8")
        name = filename or os.path.basename(getattr(file, "name", "") or "") or DEFAULT_UPLOAD_NAME
        return name, content
    raise TypeError(f"Unsupported upload source: {type(file).__name__}")


class ResourceGateway(ABC):
    """Typed request/response wrapper around the backend's resources.
    
    Every method is a single call: no retries, no client-side state.
    Failures surface as GatewayError.
    """
    
    @abstractmethod
    async def upload_file(self, file: UploadSource, filename: Optional[str] = None) -> Ack:
        """Upload a CSV of transactions for server-side ingestion."""
        pass
    
    @abstractmethod
    async def analyze_merchants(self) -> AnalyzeMerchantsResponse:
        """Run the normalization pass and return the full resulting set."""
        pass
    
    @abstractmethod
    async def list_transactions(self) -> List[Transaction]:
        pass
    
    @abstractmethod
    async def delete_transaction(self, transaction_id: str) -> Ack:
        pass
    
    @abstractmethod
    async def delete_all_transactions(self) -> Ack:
        pass
    
    @abstractmethod
    async def detect_patterns(self) -> DetectPatternsResponse:
        """Run the pattern detection pass and return the full resulting set."""
        pass
    
    @abstractmethod
    async def list_patterns(self) -> List[Pattern]:
        pass
    
    @abstractmethod
    async def delete_all_patterns(self) -> Ack:
        pass
    
    async def aclose(self) -> None:
        """Release transport resources, if any."""
        return None
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
