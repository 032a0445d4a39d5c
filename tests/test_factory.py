"""Tests for gateway selection and settings."""
import pytest

from reviewdash.config import Settings
from reviewdash.gateway.factory import get_gateway
from reviewdash.gateway.http_gateway import HttpResourceGateway
from reviewdash.gateway.memory_gateway import InMemoryGateway
from reviewdash.services.controller import DashboardController


@pytest.mark.asyncio
async def test_mock_urls_select_in_memory_gateway():
    seeded = get_gateway("mock:")
    empty = get_gateway("mock:empty")
    
    assert isinstance(seeded, InMemoryGateway)
    assert await seeded.list_transactions()
    assert await empty.list_transactions() == []


@pytest.mark.asyncio
async def test_http_gateway_takes_paths_from_settings():
    config = Settings(
        backend_url="http://backend:9000/",
        merchant_path="/merchants",
        request_timeout=5.0,
    )
    
    gateway = get_gateway(config=config)
    
    assert isinstance(gateway, HttpResourceGateway)
    assert gateway.base_url == "http://backend:9000"
    assert gateway.merchant_path == "/merchants"
    assert gateway.upload_path == "/transaction-upload/upload"
    await gateway.aclose()


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("BACKEND_URL", "mock:")
    monkeypatch.setenv("NOTIFICATION_DURATION_MS", "1500")
    
    config = Settings()
    
    assert config.backend_url == "mock:"
    assert config.notification_duration_ms == 1500


@pytest.mark.asyncio
async def test_controller_from_settings_owns_its_gateway():
    controller = DashboardController.from_settings(Settings(backend_url="mock:", notification_duration_ms=1234))
    
    assert isinstance(controller.gateway, InMemoryGateway)
    assert controller.notifications.duration_ms == 1234
    assert await controller.mount() is True
    await controller.close()


def test_timeout_can_be_disabled_from_environment(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT", "none")
    assert Settings().request_timeout is None
    
    monkeypatch.setenv("REQUEST_TIMEOUT", "12.5")
    assert Settings().request_timeout == 12.5
