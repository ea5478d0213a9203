"""
Authentication endpoints: signup, login with TOTP two-factor, session cookie.

Calls made before a session exists run as NO_PRINCIPAL; the store grants
that principal no row-level access beyond the secret lookups these flows need.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..core.defs import CallName, CallType
from ..core.result_types import (
    INVALID_BODY,
    INVALID_PARAMS,
    CallData,
    ParseFailure,
    failure,
    rows_of,
    success,
)
from ..core.validator import validate_params
from ..core.validators import EMAIL, ID, STR_NONEMPTY
from ..iam.passwords import validate_password
from ..runtime.context import NO_PRINCIPAL
from .deps import GatewayState, authenticate, enveloped, get_state, read_body, respond


logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

# Failure codes specific to the auth flow
PASSWORD_INSECURE = "passwordInsecure"
USER_CREATE_FAILED = "userCreateFailed"
USER_NOT_FOUND = "userNotFound"
INCORRECT_PASSWORD = "incorrectPassword"
INCORRECT_2FA_CODE = "incorrect2faCode"
UPDATE_2FA_FAILED = "update2faFailed"
UPDATE_2FA_SAVED_FAILED = "update2faSavedFailed"
USER_UPDATE_FAILED = "userUpdateFailed"

SIGNUP_PARAMS = (("name", STR_NONEMPTY), ("email", EMAIL), ("password", STR_NONEMPTY))
CODE_PARAMS = (("code", STR_NONEMPTY), ("user_id", ID))
LOGIN_PARAMS = (("email", EMAIL), ("password", STR_NONEMPTY))
CHANGE_PASSWORD_PARAMS = (("old_password", STR_NONEMPTY), ("new_password", STR_NONEMPTY))


async def _parse(request: Request, expected) -> tuple[list[Any], JSONResponse | None]:
    """Read and validate the body; returns (params, None) or ([], error response)."""
    body = await read_body(request)
    if body is None:
        return [], respond(failure(INVALID_BODY))

    parsed = validate_params(body, expected)
    if isinstance(parsed, ParseFailure):
        return [], respond(failure(INVALID_PARAMS, parsed.invalid))

    return parsed.params, None


async def _call(
    state: GatewayState,
    principal_id: int,
    call_name: CallName,
    call_type: CallType,
    **params: Any,
):
    return await state.dispatcher.dispatch(
        principal_id,
        CallData(call=call_name, type=call_type, params=params),
    )


def _set_session_cookie(response: JSONResponse, state: GatewayState, user_id: int, email: str) -> None:
    settings = state.settings
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        state.identity.issue(user_id, email),
        max_age=settings.SESSION_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


@router.post("/signup")
@enveloped
async def signup(request: Request, state: GatewayState = Depends(get_state)) -> JSONResponse:
    """Create a user; two-factor is provisioned at first login."""
    params, error = await _parse(request, SIGNUP_PARAMS)
    if error is not None:
        return error
    name, email, password = params

    if not validate_password(password):
        return respond(failure(PASSWORD_INSECURE), 400)

    password_hash = await run_in_threadpool(state.passwords.hash, password)

    created = await _call(
        state, NO_PRINCIPAL, CallName.CREATE_USER, CallType.QUERY,
        name=name,
        email=email,
        password_hash=password_hash,
        two_fa_secret="",
        two_fa_saved=False,
    )
    rows = rows_of(created)
    if rows is None:
        logger.info(f"Signup failed: {created.to_json()}")
        return respond(failure(USER_CREATE_FAILED, created.to_json()), 400)

    return respond(success({"user_id": rows[0].get("user_id")}))


@router.post("/signup/confirm")
@enveloped
async def signup_confirm(request: Request, state: GatewayState = Depends(get_state)) -> JSONResponse:
    """Confirm a TOTP code against the user's stored secret."""
    params, error = await _parse(request, CODE_PARAMS)
    if error is not None:
        return error
    code, user_id = params

    rows = rows_of(await _call(
        state, NO_PRINCIPAL, CallName.GET_USER_SECRETS, CallType.QUERY, user_id=user_id,
    ))
    if rows is None:
        return respond(failure(USER_NOT_FOUND), 404)

    if not state.two_factor.verify(rows[0].get("two_fa_secret") or "", code):
        return respond(failure(INCORRECT_2FA_CODE), 401)

    return respond(success())


@router.post("/login")
@enveloped
async def login(request: Request, state: GatewayState = Depends(get_state)) -> JSONResponse:
    """
    Check email and password.

    On a user's first login (or until a code has been verified) a fresh TOTP
    secret is stored and returned as a QR-code data URL.
    """
    params, error = await _parse(request, LOGIN_PARAMS)
    if error is not None:
        return error
    email, password = params

    rows = rows_of(await _call(
        state, NO_PRINCIPAL, CallName.GET_USER_SECRETS_BY_EMAIL, CallType.QUERY, email=email,
    ))
    if rows is None:
        return respond(failure(USER_NOT_FOUND), 404)
    user = rows[0]
    user_id = user.get("id")

    if not await run_in_threadpool(state.passwords.verify, password, user.get("password_hash") or ""):
        return respond(failure(INCORRECT_PASSWORD), 401)

    qr_code_url = ""
    if not user.get("two_fa_secret") or not user.get("two_fa_saved"):
        secret = state.two_factor.generate_secret()
        updated = await _call(
            state, NO_PRINCIPAL, CallName.UPDATE_USER, CallType.MUTATION,
            user_id=user_id,
            two_fa_secret=secret,
            two_fa_saved=False,
        )
        if updated.status == "failed":
            return respond(failure(UPDATE_2FA_FAILED, updated.to_json()), 400)

        uri = state.two_factor.provisioning_uri(secret, user.get("name") or email)
        qr_code_url = await run_in_threadpool(state.two_factor.qr_code_data_url, uri)

    return respond(success({"user_id": user_id, "qrCodeUrl": qr_code_url}))


@router.post("/login/verify")
@enveloped
async def login_verify(request: Request, state: GatewayState = Depends(get_state)) -> JSONResponse:
    """Verify the TOTP code after login and open a session."""
    params, error = await _parse(request, CODE_PARAMS)
    if error is not None:
        return error
    code, user_id = params

    rows = rows_of(await _call(
        state, NO_PRINCIPAL, CallName.GET_USER_SECRETS, CallType.QUERY, user_id=user_id,
    ))
    if rows is None:
        return respond(failure(USER_NOT_FOUND), 404)
    user = rows[0]

    if not state.two_factor.verify(user.get("two_fa_secret") or "", code):
        return respond(failure(INCORRECT_2FA_CODE), 401)

    updated = await _call(
        state, NO_PRINCIPAL, CallName.UPDATE_USER, CallType.MUTATION,
        user_id=user_id,
        two_fa_saved=True,
    )
    if updated.status == "failed":
        return respond(failure(UPDATE_2FA_SAVED_FAILED, updated.to_json()), 400)

    response = respond(success({"user_id": user_id, "name": user.get("name")}))
    _set_session_cookie(response, state, user_id, user.get("email") or "")
    return response


@router.post("/logout")
@enveloped
async def logout(state: GatewayState = Depends(get_state)) -> JSONResponse:
    response = respond(success({"message": "Logged out successfully"}))
    response.delete_cookie(
        state.settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=state.settings.is_production,
        samesite="strict",
    )
    return response


@router.post("/change-password")
@enveloped
async def change_password(request: Request, state: GatewayState = Depends(get_state)) -> JSONResponse:
    """Change the session user's password."""
    principal_id, denied = authenticate(request, state)
    if denied is not None:
        return respond(denied)

    params, error = await _parse(request, CHANGE_PASSWORD_PARAMS)
    if error is not None:
        return error
    old_password, new_password = params

    if not validate_password(new_password):
        return respond(failure(PASSWORD_INSECURE), 400)

    rows = rows_of(await _call(
        state, principal_id, CallName.GET_USER_SECRETS, CallType.QUERY, user_id=principal_id,
    ))
    if rows is None:
        return respond(failure(USER_NOT_FOUND), 404)

    if not await run_in_threadpool(state.passwords.verify, old_password, rows[0].get("password_hash") or ""):
        return respond(failure(INCORRECT_PASSWORD), 401)

    new_hash = await run_in_threadpool(state.passwords.hash, new_password)
    updated = await _call(
        state, principal_id, CallName.UPDATE_USER, CallType.MUTATION,
        user_id=principal_id,
        password_hash=new_hash,
    )
    if updated.status == "failed":
        return respond(failure(USER_UPDATE_FAILED), 500)

    return respond(success())


@router.get("/auth")
@enveloped
async def auth_status(request: Request, state: GatewayState = Depends(get_state)) -> JSONResponse:
    """Report whether the session is valid, with the user's name and global roles."""
    principal_id, denied = authenticate(request, state)
    if denied is not None:
        return respond(denied)

    rows = rows_of(await _call(
        state, principal_id, CallName.GET_USER_SECRETS, CallType.QUERY, user_id=principal_id,
    ))
    if rows is None:
        return respond(failure(USER_NOT_FOUND), 404)

    roles_result = await _call(
        state, principal_id, CallName.GET_USER_GLOBAL_ROLES, CallType.QUERY, user_id=principal_id,
    )
    roles = [row.get("name") for row in (rows_of(roles_result) or [])]

    return respond(success({
        "isAuthenticated": True,
        "username": rows[0].get("name"),
        "roles": roles,
        "user_id": principal_id,
    }))
