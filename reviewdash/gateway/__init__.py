from .errors import GatewayError
from .base import ResourceGateway, UploadSource
from .http_gateway import HttpResourceGateway
from .memory_gateway import InMemoryGateway
from .factory import get_gateway

__all__ = [
    "GatewayError",
    "ResourceGateway",
    "UploadSource",
    "HttpResourceGateway",
    "InMemoryGateway",
    "get_gateway",
]
