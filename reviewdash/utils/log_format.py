"""Dashboard logging: one line per record, `extra=` context appended as sorted JSON."""
import json
import logging
from typing import Optional, Union

from reviewdash.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries, plus the two Formatter.format() adds
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Per-request INFO lines from the HTTP client drown out the dashboard's own
_CHATTY_LOGGERS = ("httpx", "httpcore")


class ExtraFormatter(logging.Formatter):
    """Formatter that appends whatever was passed through `extra=`."""

    def context(self, record: logging.LogRecord) -> dict:
        return {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = self.context(record)
        if not context:
            return line
        return f"{line} | {json.dumps(context, default=str, sort_keys=True)}"


def resolve_level(level: Optional[Union[int, str]] = None, config: Optional[Settings] = None) -> int:
    """
    Pick the root level. An explicit `level` wins; otherwise `config.debug`
    forces DEBUG and `config.log_level` applies. Unknown names fall back to INFO.
    """
    if level is None and config is not None:
        level = logging.DEBUG if config.debug else config.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[Union[int, str]] = None, config: Optional[Settings] = None) -> int:
    """Install the root handler once; later calls only adjust levels. Returns the level applied."""
    resolved = resolve_level(level, config)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(ExtraFormatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(resolved)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(resolved if resolved <= logging.DEBUG else logging.WARNING)
    return resolved
