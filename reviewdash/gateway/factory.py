"""Factory for creating resource gateways."""
from typing import Optional
from reviewdash.config import Settings, settings as default_settings
from reviewdash.gateway.base import ResourceGateway
from reviewdash.gateway.http_gateway import HttpResourceGateway
from reviewdash.gateway.memory_gateway import InMemoryGateway


def get_gateway(
    backend_url: Optional[str] = None,
    config: Optional[Settings] = None,
    **kwargs,
) -> ResourceGateway:
    """
    Create the gateway matching a backend URL.
    
    Args:
        backend_url: "mock:" (seeded) or "mock:empty" for the in-memory backend,
            anything else is treated as an HTTP base URL. Defaults to settings.
        config: Settings providing endpoint paths and timeout
        **kwargs: Passed through to the gateway constructor
    
    Returns:
        ResourceGateway instance
    """
    config = config or default_settings
    backend_url = backend_url or config.backend_url
    
    if backend_url.startswith("mock:"):
        kwargs.setdefault("seed", backend_url != "mock:empty")
        return InMemoryGateway(**kwargs)
    
    kwargs.setdefault("upload_path", config.upload_path)
    kwargs.setdefault("merchant_path", config.merchant_path)
    kwargs.setdefault("transaction_path", config.transaction_path)
    kwargs.setdefault("pattern_path", config.pattern_path)
    kwargs.setdefault("timeout", config.request_timeout)
    return HttpResourceGateway(backend_url, **kwargs)
