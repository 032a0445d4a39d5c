"""Tests for the log formatter and settings-driven log levels."""
import logging

import pytest

from reviewdash.config import Settings
from reviewdash.utils.log_format import LOG_FORMAT, ExtraFormatter, configure_logging, resolve_level


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("reviewdash.test", logging.INFO, __file__, 1, "Merchant analysis result", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_levels():
    names = ("", "httpx", "httpcore")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_extra_fields_are_appended_as_json():
    line = ExtraFormatter(LOG_FORMAT).format(_record(tab="merchant", count=2))
    assert line.endswith('Merchant analysis result | {"count": 2, "tab": "merchant"}')
    assert "| INFO | reviewdash.test |" in line


def test_no_suffix_without_extra():
    line = ExtraFormatter("%(message)s").format(_record())
    assert line == "Merchant analysis result"


def test_level_comes_from_settings():
    assert resolve_level(config=Settings(log_level="warning", _env_file=None)) == logging.WARNING
    assert resolve_level(config=Settings(log_level="WARNING", debug=True, _env_file=None)) == logging.DEBUG
    assert resolve_level(config=Settings(log_level="chatty", _env_file=None)) == logging.INFO


def test_explicit_level_overrides_settings():
    assert resolve_level("error", Settings(debug=True, _env_file=None)) == logging.ERROR


def test_configure_logging_applies_settings(restore_levels):
    applied = configure_logging(config=Settings(log_level="ERROR", _env_file=None))

    assert applied == logging.ERROR
    assert logging.getLogger().level == logging.ERROR
    assert logging.getLogger("httpx").level == logging.WARNING


def test_debug_settings_let_http_client_logs_through(restore_levels):
    configure_logging(config=Settings(debug=True, _env_file=None))

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.DEBUG
