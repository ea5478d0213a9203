"""
IAM (Identity and Access Management) module.
"""

from __future__ import annotations

from .passwords import PasswordHasher, validate_password
from .service import IdentityService
from .two_factor import TwoFactor

__all__ = [
    "IdentityService",
    "PasswordHasher",
    "TwoFactor",
    "validate_password",
]
