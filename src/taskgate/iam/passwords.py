"""
Password hashing and complexity rules.
"""

from __future__ import annotations

import re

import bcrypt


# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72

MIN_PASSWORD_LENGTH = 8

_PASSWORD_RULES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"[0-9]"),
    re.compile(r"[^A-Za-z0-9]"),
)


def validate_password(password: str) -> bool:
    """
    Check password complexity.

    Requires at least 8 characters with a lowercase letter, an uppercase
    letter, a digit and a symbol.
    """
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return False
    return all(rule.search(password) for rule in _PASSWORD_RULES)


class PasswordHasher:
    """
    bcrypt hashing with an application-wide pepper.

    Usage:
        hasher = PasswordHasher(pepper="s3cr3t", rounds=12)
        stored = hasher.hash("Passw0rd!")
        hasher.verify("Passw0rd!", stored)  # True
    """

    def __init__(self, pepper: str = "", rounds: int = 10):
        self.pepper = pepper
        self.rounds = rounds

    def _peppered(self, plaintext: str) -> bytes:
        return f"{plaintext}{self.pepper}".encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, plaintext: str) -> str:
        """Hash a password."""
        return bcrypt.hashpw(self._peppered(plaintext), bcrypt.gensalt(self.rounds)).decode("ascii")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return True if the password matches the stored hash."""
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(self._peppered(plaintext), hashed.encode("ascii"))
        except ValueError:
            # Malformed stored hash
            return False
