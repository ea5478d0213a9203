"""
Pydantic models for call requests and the uniform response envelope.

Every endpoint answers with a ``JSONResult``:

    {"status": "success", "data": ...}
    {"status": "failed", "error": "invalidParams", "data": [["title", "[string_too_short]"]]}
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .defs import CallName, CallType


RawValue = Union[str, int, float, bool, date, datetime, None]
RawParams = list[RawValue]
InvalidList = list[tuple[str, str]]
TableResult = list[dict[str, Any]]


# --- Failure codes ---

INVALID_PARAMS = "invalidParams"
INVALID_BODY = "invalidBody"
UNAUTHENTICATED = "unauthenticated"
INVALID_SESSION = "invalidSession"
FORBIDDEN = "forbidden"
NOT_FOUND = "notFound"
DB_CALL_FAILED = "dbCallFailed"
INTERNAL_SERVER_ERROR = "internalServerError"

FAILURE_STATUS: dict[str, int] = {
    INVALID_PARAMS: 400,
    INVALID_BODY: 400,
    UNAUTHENTICATED: 401,
    INVALID_SESSION: 403,
    FORBIDDEN: 403,
    NOT_FOUND: 404,
    DB_CALL_FAILED: 500,
    INTERNAL_SERVER_ERROR: 500,
}

REDACTED_DB_ERROR = "The database call failed"


# --- Call request ---

class CallData(BaseModel):
    """
    A single request's call: name, raw parameter bag and type.

    Pagination fields are only meaningful for query calls and are ignored
    for mutations.
    """
    model_config = ConfigDict(frozen=True)

    call: CallName
    type: CallType
    params: dict[str, Any] = Field(default_factory=dict)
    page: Any = None
    items_per_page: Any = None


# --- Validation result ---

class ParseSuccess(BaseModel):
    status: Literal["success"] = "success"
    params: list[Any]


class ParseFailure(BaseModel):
    status: Literal["failed"] = "failed"
    invalid: InvalidList


ParseResult = Union[ParseSuccess, ParseFailure]


# --- Envelope ---

class CallSuccess(BaseModel):
    """Successful envelope; ``data`` holds result rows or a payload."""
    status: Literal["success"] = "success"
    data: Any = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"status": self.status}
        if self.data is not None:
            body["data"] = self.data
        return body


class CallFailure(BaseModel):
    """Failed envelope; ``error`` is a short code, ``data`` optional detail."""
    status: Literal["failed"] = "failed"
    error: str
    data: Any = None

    @property
    def http_status(self) -> int:
        return FAILURE_STATUS.get(self.error, 500)

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"status": self.status, "error": self.error}
        if self.data is not None:
            body["data"] = self.data
        return body


JSONResult = Union[CallSuccess, CallFailure]


def success(data: Any = None) -> CallSuccess:
    return CallSuccess(data=data)


def failure(error: str, data: Any = None) -> CallFailure:
    return CallFailure(error=error, data=data)


def rows_of(result: JSONResult) -> Optional[TableResult]:
    """Return the rows of a successful call with at least one row, else None."""
    if isinstance(result, CallSuccess) and result.data:
        return result.data
    return None
