"""
Service module - app factory and database engine.
"""

from __future__ import annotations

from .app import build_state, create_app
from .database import close_engine, create_engine

__all__ = [
    "create_app",
    "build_state",
    "create_engine",
    "close_engine",
]
