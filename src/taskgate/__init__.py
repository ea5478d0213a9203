"""
Taskgate - typed call-dispatch gateway for a multi-tenant TODO service.

HTTP routes map to named PostgreSQL functions/procedures ("calls"). Each
request is validated against the call's parameter spec, executed in its own
transaction under the caller's identity (row-level security), and answered
with a uniform success/failure envelope.

Usage:
    from taskgate import create_app

    app = create_app()  # settings from environment
"""

from __future__ import annotations

from .config import Settings, get_settings
from .core import (
    CallData,
    CallFailure,
    CallName,
    CallRegistry,
    CallSuccess,
    CallType,
    JSONResult,
    ParamValidator,
    RegistryError,
    TaskgateError,
    build_registry,
)
from .runtime import NO_PRINCIPAL, CallDispatcher, CallExecutor
from .service import create_app

__version__ = "0.1.0"

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Core
    "CallName",
    "CallType",
    "CallData",
    "CallSuccess",
    "CallFailure",
    "JSONResult",
    "ParamValidator",
    "CallRegistry",
    "build_registry",
    "TaskgateError",
    "RegistryError",
    # Runtime
    "NO_PRINCIPAL",
    "CallExecutor",
    "CallDispatcher",
    # App
    "create_app",
]
