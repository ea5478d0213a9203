"""
Identity service - signed session tokens.

The gateway's only contract with a session is ``resolve(token)``: a
principal id, or None when the token is missing, forged or expired.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from ..core.errors import AuthError


logger = logging.getLogger(__name__)


class IdentityService:
    """
    Issues and verifies HS256 session tokens.

    Claims: ``user_id``, ``email``, ``iat``, ``exp``.
    """

    def __init__(self, secret: str, *, algorithm: str = "HS256", expires_minutes: int = 60):
        self.secret = secret
        self.algorithm = algorithm
        self.expires = timedelta(minutes=expires_minutes)

    def issue(self, user_id: int, email: str) -> str:
        """Sign a session token for a user."""
        now = datetime.now(timezone.utc)
        payload = {
            "user_id": user_id,
            "email": email,
            "iat": now,
            "exp": now + self.expires,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify a token and return its claims.

        Raises:
            AuthError: expired, invalid signature, or missing claims
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "user_id"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise AuthError("Session expired", code="expired") from e
        except jwt.InvalidTokenError as e:
            raise AuthError(f"Invalid session token: {e}", code="invalid") from e

        user_id = claims.get("user_id")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise AuthError("Session token has no usable user_id", code="invalid")
        return claims

    def resolve(self, token: Optional[str]) -> Optional[int]:
        """Resolve a token to a principal id, or None."""
        if not token:
            return None
        try:
            return self.decode(token)["user_id"]
        except AuthError as e:
            logger.info(f"Rejected session token: {e}")
            return None
