"""HTTP resource gateway backed by httpx."""
import logging
from typing import Any, List, Optional
from urllib.parse import quote
import httpx
from pydantic import TypeAdapter, ValidationError
from reviewdash.gateway.base import (
    PATTERN_LIST_KEYS,
    TRANSACTION_LIST_KEYS,
    ResourceGateway,
    UploadSource,
    resolve_upload,
    unwrap_list,
)
from reviewdash.gateway.errors import MALFORMED, STATUS, TIMEOUT, TRANSPORT, GatewayError
from reviewdash.models import (
    Ack,
    AnalyzeMerchantsResponse,
    DetectPatternsResponse,
    Pattern,
    Transaction,
)

logger = logging.getLogger(__name__)

_transactions_adapter = TypeAdapter(List[Transaction])
_patterns_adapter = TypeAdapter(List[Pattern])

_JSON_HEADERS = {"Content-Type": "application/json"}


class HttpResourceGateway(ResourceGateway):
    """Talks to the transaction-classification backend over HTTP."""
    
    def __init__(
        self,
        base_url: str,
        *,
        upload_path: str = "/transaction-upload/upload",
        merchant_path: str = "/transfer-normalizer/analyze",
        transaction_path: str = "/transfer-normalizer/transactions/{id}",
        pattern_path: str = "/pattern-analyzer/analyze",
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the gateway.
        
        Args:
            base_url: Backend root, e.g. "http://localhost:8000"
            upload_path, merchant_path, pattern_path: Endpoint paths
            transaction_path: Per-transaction path with an "{id}" placeholder
            timeout: Per-request timeout in seconds; None disables it
            transport: Optional httpx transport (tests mount an ASGI app here)
            client: Pre-built client; the gateway will not close it
        """
        self.base_url = base_url.rstrip("/")
        self.upload_path = upload_path
        self.merchant_path = merchant_path
        self.transaction_path = transaction_path
        self.pattern_path = pattern_path
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )
    
    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
    
    async def _request(self, operation: str, method: str, path: str, **kwargs) -> httpx.Response:
        logger.debug("Gateway request", extra={"operation": operation, "method": method, "path": path})
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise GatewayError(operation, TIMEOUT, detail=str(e) or type(e).__name__) from e
        except httpx.TransportError as e:
            raise GatewayError(operation, TRANSPORT, detail=str(e) or type(e).__name__) from e
        
        if not response.is_success:
            raise GatewayError(operation, STATUS, status_code=response.status_code, detail=response.text[:200])
        return response
    
    @staticmethod
    def _json(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(operation, MALFORMED, detail=f"Response is not JSON: {e}") from e
    
    @staticmethod
    def _ack(response: httpx.Response) -> Ack:
        # Success is decided by the status code; the body is informational.
        if not response.content:
            return Ack()
        try:
            data = response.json()
        except ValueError:
            return Ack(message=response.text)
        if isinstance(data, dict):
            try:
                return Ack.model_validate(data)
            except ValidationError:
                return Ack(message=str(data.get("message")))
        return Ack()
    
    def _transactions(self, operation: str, payload: Any) -> List[Transaction]:
        try:
            return _transactions_adapter.validate_python(unwrap_list(payload, TRANSACTION_LIST_KEYS))
        except (ValueError, ValidationError) as e:
            raise GatewayError(operation, MALFORMED, detail=str(e)[:200]) from e
    
    def _patterns(self, operation: str, payload: Any) -> List[Pattern]:
        try:
            return _patterns_adapter.validate_python(unwrap_list(payload, PATTERN_LIST_KEYS))
        except (ValueError, ValidationError) as e:
            raise GatewayError(operation, MALFORMED, detail=str(e)[:200]) from e
    
    async def upload_file(self, file: UploadSource, filename: Optional[str] = None) -> Ack:
        name, content = resolve_upload(file, filename)
        response = await self._request(
            "upload_file",
            "POST",
            self.upload_path,
            files={"file": (name, content, "text/csv")},
        )
        return self._ack(response)
    
    async def analyze_merchants(self) -> AnalyzeMerchantsResponse:
        response = await self._request("analyze_merchants", "POST", self.merchant_path, headers=_JSON_HEADERS)
        payload = self._json("analyze_merchants", response)
        return AnalyzeMerchantsResponse(normalized_transactions=self._transactions("analyze_merchants", payload))
    
    async def list_transactions(self) -> List[Transaction]:
        response = await self._request("list_transactions", "GET", self.merchant_path)
        return self._transactions("list_transactions", self._json("list_transactions", response))
    
    async def delete_transaction(self, transaction_id: str) -> Ack:
        path = self.transaction_path.format(id=quote(str(transaction_id), safe=""))
        response = await self._request("delete_transaction", "DELETE", path)
        return self._ack(response)
    
    async def delete_all_transactions(self) -> Ack:
        response = await self._request("delete_all_transactions", "DELETE", self.merchant_path)
        return self._ack(response)
    
    async def detect_patterns(self) -> DetectPatternsResponse:
        response = await self._request("detect_patterns", "POST", self.pattern_path, headers=_JSON_HEADERS)
        payload = self._json("detect_patterns", response)
        return DetectPatternsResponse(patterns=self._patterns("detect_patterns", payload))
    
    async def list_patterns(self) -> List[Pattern]:
        response = await self._request("list_patterns", "GET", self.pattern_path)
        return self._patterns("list_patterns", self._json("list_patterns", response))
    
    async def delete_all_patterns(self) -> Ack:
        response = await self._request("delete_all_patterns", "DELETE", self.pattern_path)
        return self._ack(response)
