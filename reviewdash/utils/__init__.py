from .timestamp import parse_timestamp
from .log_format import ExtraFormatter, configure_logging

__all__ = ["parse_timestamp", "ExtraFormatter", "configure_logging"]
