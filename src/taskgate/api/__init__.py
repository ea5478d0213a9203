"""
API module - FastAPI endpoints.
"""

from __future__ import annotations

from .auth_endpoints import router as auth_router
from .deps import GatewayState, enveloped, get_state, respond
from .router import create_call_router, make_call_handler

__all__ = [
    "auth_router",
    "create_call_router",
    "make_call_handler",
    "GatewayState",
    "get_state",
    "respond",
    "enveloped",
]
