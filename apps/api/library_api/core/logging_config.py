"""Logging setup and helpers for safe structured log fields."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

_PACKAGE_LOGGER = "library_api"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the package logger."""
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    package_logger.setLevel(level.upper())
    if package_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger.addHandler(handler)


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"
