"""Tests for the dashboard's table and banner formatting and its button handlers."""
import pytest

from reviewdash import ui
from reviewdash.models import Notification, Transaction
from reviewdash.services.controller import DashboardController
from reviewdash.services.notifications import NotificationCenter
from reviewdash.ui import (
    PATTERN_HEADERS,
    TRANSACTION_HEADERS,
    notification_markdown,
    pattern_rows,
    transaction_rows,
)


def test_transaction_rows(make_transaction):
    rows = transaction_rows([make_transaction("t1")])
    
    assert len(rows[0]) == len(TRANSACTION_HEADERS)
    assert rows[0][0] == "t1"
    assert rows[0][2] == "-15.49"
    assert rows[0][3] == "2024-01-15"
    assert rows[0][7] == "90%"
    assert rows[0][8] == "Yes"


def test_unnormalized_transaction_row():
    row = transaction_rows([Transaction(id="raw", amount="3")])[0]
    assert row[1] == "—"
    assert row[4] == "—"
    assert row[9] == ""


def test_pattern_rows(make_pattern):
    row = pattern_rows([make_pattern("p1")])[0]
    assert len(row) == len(PATTERN_HEADERS)
    assert row[4] == "monthly"
    assert row[8] == 3


def test_notification_markdown():
    assert notification_markdown(None) == ""
    assert "Failed to upload file" in notification_markdown(Notification(kind="error", message="Failed to upload file"))


async def _drain(handler):
    return [view async for view in handler()]


@pytest.mark.asyncio
async def test_delete_all_buttons_target_their_own_tab(monkeypatch, gateway, make_transaction, make_pattern):
    controller = DashboardController(gateway, NotificationCenter(duration_ms=60_000))
    monkeypatch.setattr(ui, "_controller", controller)
    gateway.transactions = [make_transaction("1")]
    gateway.patterns = [make_pattern("p1")]
    await controller.select_tab("pattern")
    await controller.select_tab("merchant")
    
    await _drain(ui.on_delete_all_patterns)
    assert controller.patterns == []
    assert [t.id for t in controller.transactions] == ["1"]
    
    await controller.select_tab("pattern")
    await _drain(ui.on_delete_all_transactions)
    assert controller.transactions == []
    assert gateway.operations().count("delete_all_patterns") == 1
    assert gateway.operations().count("delete_all_transactions") == 1
