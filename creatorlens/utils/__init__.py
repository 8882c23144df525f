"""Utility helpers for CreatorLens."""

from .logger import DEFAULT_LOG_FORMAT, ExtraFieldsFormatter, configure_logging, extract_extra_fields, get_logger
from .formatters import (
    JSONFormatter,
    RichFormatter,
    TableBuilder,
    format_json,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "extract_extra_fields",
    "ExtraFieldsFormatter",
    "DEFAULT_LOG_FORMAT",
    "JSONFormatter",
    "RichFormatter",
    "TableBuilder",
    "format_json",
]
