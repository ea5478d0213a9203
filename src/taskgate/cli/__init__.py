"""
Taskgate CLI - command line tools for running the gateway.
"""

from __future__ import annotations

from .main import main, app

__all__ = ["main", "app"]
