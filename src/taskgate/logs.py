"""
Logging helpers.

Provides:
- configure_logging: root handler setup for the service process
- HealthcheckLogFilter: drops noisy healthcheck access-log lines
- redact_pii: masks credential fields before request data is logged
"""

from __future__ import annotations

import logging
from typing import Any


PII_KEYS = frozenset({
    "password",
    "old_password",
    "new_password",
    "password_hash",
    "two_fa_secret",
    "code",
})

REDACTED = "[REDACTED]"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class HealthcheckLogFilter(logging.Filter):
    """Filter out noisy healthcheck endpoint logs."""

    FILTERED_PATHS = ("/health", "/api/health")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        for path in self.FILTERED_PATHS:
            if f'"{path}' in message or f" {path} " in message:
                return False
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once and filter uvicorn healthcheck logs."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level.upper())

    uvicorn_access = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, HealthcheckLogFilter) for f in uvicorn_access.filters):
        uvicorn_access.addFilter(HealthcheckLogFilter())


def redact_pii(value: Any, keys: frozenset[str] = PII_KEYS) -> Any:
    """
    Return a copy of ``value`` with sensitive keys masked.

    Walks nested dicts, lists and tuples; other values are returned as-is.
    """
    if isinstance(value, dict):
        return {
            k: REDACTED if k in keys else redact_pii(v, keys)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(redact_pii(item, keys) for item in value)
    return value
