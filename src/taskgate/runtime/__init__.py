"""
Runtime module - call execution and dispatch.
"""

from __future__ import annotations

from .context import NO_PRINCIPAL
from .dispatcher import CallDispatcher
from .executor import CallExecutor, build_call_statement

__all__ = [
    "NO_PRINCIPAL",
    "CallExecutor",
    "CallDispatcher",
    "build_call_statement",
]
