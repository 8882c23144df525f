"""Logging utilities for the CreatorLens application."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_configured = False

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def _resolve_level(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    if isinstance(numeric_level, str):
        raise ValueError(f"Unknown log level: {level}")
    return int(numeric_level)


def extract_extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the structured fields attached to ``record`` via ``extra=``."""

    return {key: value for key, value in vars(record).items() if key not in _RESERVED_ATTRS}


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs.

    Routing and provider logs carry their details (provider, cost, state) as
    structured extras rather than in the message text.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = extract_extra_fields(record)
        if not extras:
            return message
        rendered = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        return f"{message} [{rendered}]"


def configure_logging(
    *,
    level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: str = DEFAULT_LOG_FORMAT,
    force: bool = False,
) -> None:
    """Configure global logging handlers.

    Args:
        level: Logging level name (e.g. "INFO", "DEBUG").
        log_file: Optional path to a file that should receive logs in addition to stderr.
        log_format: Logging format string applied to all handlers.
        force: When ``True`` reconfigure logging even if it was already set up.
    """

    global _configured
    if _configured and not force:
        return

    formatter = ExtraFieldsFormatter(log_format)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=_resolve_level(level),
        handlers=handlers,
        force=True,
    )
    # google and httpx log every request at INFO
    for noisy in ("httpx", "httpcore", "google"):
        logging.getLogger(noisy).setLevel(max(_resolve_level(level), logging.WARNING))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured with the CreatorLens defaults."""

    if not _configured:
        configure_logging()
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "extract_extra_fields", "ExtraFieldsFormatter", "DEFAULT_LOG_FORMAT"]
