"""
Custom exceptions for the Taskgate system.
"""

from __future__ import annotations

from typing import Optional


class TaskgateError(Exception):
    """Base exception for all taskgate errors."""
    pass


class RegistryError(TaskgateError):
    """Raised when the call registry or route table is inconsistent."""
    pass


class CallExecutionError(TaskgateError):
    """Raised when a backend call fails inside the data store."""

    def __init__(self, call_name: str, message: str):
        self.call_name = call_name
        self.detail = message
        super().__init__(f"Call '{call_name}' failed: {message}")


class CallTimeoutError(CallExecutionError):
    """Raised when a backend call exceeds its time budget."""

    def __init__(self, call_name: str, timeout: float):
        self.timeout = timeout
        super().__init__(call_name, f"timed out after {timeout}s")


class InvalidPrincipalError(TaskgateError):
    """Raised when a principal id is not a plain integer."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Principal id must be an integer, got {type(value).__name__}")


class AuthError(TaskgateError):
    """Raised when a credential cannot be verified."""

    def __init__(self, message: str = "Authentication failed", code: Optional[str] = None):
        self.code = code
        super().__init__(message)
