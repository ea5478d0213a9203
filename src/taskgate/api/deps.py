"""
Shared request dependencies for the HTTP adapter.
"""

from __future__ import annotations

import functools
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..config import Settings
from ..core.registry import CallRegistry
from ..core.result_types import (
    INTERNAL_SERVER_ERROR,
    INVALID_SESSION,
    UNAUTHENTICATED,
    CallFailure,
    CallSuccess,
    JSONResult,
    failure,
)
from ..iam.passwords import PasswordHasher
from ..iam.service import IdentityService
from ..iam.two_factor import TwoFactor
from ..runtime.dispatcher import CallDispatcher


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayState:
    """Process-wide collaborators, attached to ``app.state.taskgate``."""
    settings: Settings
    registry: CallRegistry
    dispatcher: CallDispatcher
    identity: IdentityService
    passwords: PasswordHasher
    two_factor: TwoFactor


def get_state(request: Request) -> GatewayState:
    """FastAPI dependency returning the gateway state."""
    return request.app.state.taskgate


def respond(result: JSONResult, status_code: Optional[int] = None) -> JSONResponse:
    """
    Render an envelope.

    Success is always 200; failures use ``status_code`` when given, else the
    status mapped to the failure code.
    """
    if isinstance(result, CallSuccess):
        status = 200
    else:
        status = status_code or result.http_status
    return JSONResponse(status_code=status, content=jsonable_encoder(result.to_json()))


async def read_body(request: Request) -> Optional[dict[str, Any]]:
    """
    Read the JSON object body.

    Returns {} for an empty body, None when the body is not a JSON object.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def authenticate(request: Request, state: GatewayState) -> tuple[Optional[int], Optional[CallFailure]]:
    """
    Resolve the session cookie to a principal id.

    Returns:
        (principal_id, None) or (None, failure envelope): ``unauthenticated``
        when no cookie is present, ``invalidSession`` when it does not verify
    """
    token = request.cookies.get(state.settings.SESSION_COOKIE_NAME)
    if not token:
        return None, failure(UNAUTHENTICATED)

    principal_id = state.identity.resolve(token)
    if principal_id is None:
        return None, failure(INVALID_SESSION)

    return principal_id, None


def enveloped(endpoint: Callable[..., Awaitable[JSONResponse]]) -> Callable[..., Awaitable[JSONResponse]]:
    """Turn any unexpected exception raised by an endpoint into an internalServerError envelope."""

    @functools.wraps(endpoint)
    async def wrapper(*args: Any, **kwargs: Any) -> JSONResponse:
        try:
            return await endpoint(*args, **kwargs)
        except Exception:
            logger.exception(f"Unhandled error in {endpoint.__name__}")
            return respond(failure(INTERNAL_SERVER_ERROR))

    return wrapper
