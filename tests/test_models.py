"""Tests for data models and timestamp parsing."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from reviewdash.models import Notification, Pattern, Transaction
from reviewdash.utils.timestamp import parse_timestamp


def test_transaction_coerces_backend_values():
    tx = Transaction.model_validate({
        "id": 42,
        "amount": "-12.30",
        "date": "2024-01-15T10:30:00Z",
        "normalized": {"merchant": "Uber", "flags": None},
    })
    
    assert tx.id == "42"
    assert tx.amount == Decimal("-12.30")
    assert tx.date == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert tx.original is None
    assert tx.normalized.flags == set()
    assert tx.normalized.confidence == 0.0


def test_transaction_date_is_optional():
    tx = Transaction.model_validate({"id": "a", "amount": 5, "date": ""})
    assert tx.date is None
    assert tx.normalized is None


def test_confidence_must_be_in_unit_interval():
    with pytest.raises(ValidationError):
        Transaction.model_validate({
            "id": "a",
            "amount": "1",
            "normalized": {"merchant": "X", "confidence": 1.2},
        })


def test_pattern_validation():
    pattern = Pattern.model_validate({
        "id": 7,
        "type": "recurring",
        "merchant": "Gym",
        "amount": "29.99",
        "frequency": "monthly",
        "confidence": 0.8,
        "last_occurrence": "2024-02-01 09:00:00",
        "occurrence_count": 4,
    })
    assert pattern.id == "7"
    assert pattern.is_active is True
    assert pattern.next_expected is None
    assert pattern.last_occurrence.tzinfo is not None
    
    with pytest.raises(ValidationError):
        Pattern.model_validate({
            "id": 1, "type": "recurring", "merchant": "Gym", "amount": 1,
            "frequency": "weekly", "confidence": 0.5, "occurrence_count": -1,
        })


def test_notification_kind_is_restricted():
    assert Notification(kind="error", message="boom").created_at.tzinfo is not None
    with pytest.raises(ValidationError):
        Notification(kind="warning", message="nope")


@pytest.mark.parametrize("raw", [
    "2024-01-02T09:10:00Z",
    "2024-01-02T09:10:00+00:00",
    "2024-01-02T09:10:00",
    "2024-01-02 09:10:00",
])
def test_parse_timestamp_formats(raw):
    assert parse_timestamp(raw) == datetime(2024, 1, 2, 9, 10, tzinfo=timezone.utc)


def test_parse_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_timestamp("")
    with pytest.raises(ValueError):
        parse_timestamp("next tuesday")
