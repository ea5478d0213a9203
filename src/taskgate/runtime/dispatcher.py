"""
Typed call dispatcher.

Composes the parameter validator, the call registry and the raw executor,
and turns every outcome into the uniform envelope. Nothing raised below
this layer escapes dispatch().
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, Field

from ..core.defs import CallType, ParamSpec
from ..core.errors import CallExecutionError
from ..core.registry import CallRegistry
from ..core.result_types import (
    DB_CALL_FAILED,
    INTERNAL_SERVER_ERROR,
    INVALID_PARAMS,
    REDACTED_DB_ERROR,
    CallData,
    InvalidList,
    JSONResult,
    ParseFailure,
    failure,
    success,
)
from ..core.validator import ParamValidator
from ..core.validators import Accepted, SchemaValidator
from ..logs import redact_pii
from .executor import DEFAULT_ITEMS_PER_PAGE, CallExecutor


logger = logging.getLogger(__name__)

PAGE_PARAM = "page"
ITEMS_PER_PAGE_PARAM = "itemsPerPage"

# OFFSET is a bigint in the store
MAX_OFFSET = 2**63 - 1


def _whole_number(value: Any) -> Any:
    """Reject bools and floats that lax int parsing would accept."""
    if isinstance(value, (bool, float)):
        raise ValueError("must be a whole number")
    return value


class CallDispatcher:
    """
    Validates a call, executes it and formats the envelope.

    Usage:
        dispatcher = CallDispatcher(executor, registry)
        result = await dispatcher.dispatch(principal_id, CallData(
            call=CallName.GET_USER_BY_ID, type=CallType.QUERY, params={"user_id": 42},
        ))
        # CallSuccess(data=[{...}]) or CallFailure(error="invalidParams", data=[...])
    """

    def __init__(
        self,
        executor: CallExecutor,
        registry: CallRegistry,
        *,
        production: bool = False,
        default_items_per_page: int = DEFAULT_ITEMS_PER_PAGE,
        max_items_per_page: int = 1000,
        validator: Optional[ParamValidator] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            executor: Raw call executor
            registry: Call registry supplying default param specs
            production: Redact store error messages in failure envelopes
            default_items_per_page: Page size when a query call gives none
            max_items_per_page: Largest page size accepted
            validator: Parameter validator (default: ParamValidator())
        """
        self.executor = executor
        self.registry = registry
        self.production = production
        self.default_items_per_page = default_items_per_page
        self.validator = validator or ParamValidator()
        self._page = SchemaValidator(Annotated[
            int, BeforeValidator(_whole_number), Field(ge=0, le=MAX_OFFSET // max_items_per_page),
        ])
        self._items_per_page = SchemaValidator(Annotated[
            int, BeforeValidator(_whole_number), Field(ge=1, le=max_items_per_page),
        ])

    async def dispatch(
        self,
        principal_id: int,
        call: CallData,
        expected: Optional[ParamSpec] = None,
    ) -> JSONResult:
        """
        Dispatch one call.

        Args:
            principal_id: Caller id for row-level security
            call: Call name, type, raw params and pagination
            expected: Param spec override (default: registry spec for call.call)

        Returns:
            CallSuccess with rows ([] when none), or CallFailure with
            invalidParams / dbCallFailed / internalServerError
        """
        try:
            return await self._dispatch(principal_id, call, expected)
        except Exception:
            logger.exception(f"Unexpected error dispatching {call.call.value}")
            return failure(INTERNAL_SERVER_ERROR)

    async def _dispatch(
        self,
        principal_id: int,
        call: CallData,
        expected: Optional[ParamSpec],
    ) -> JSONResult:
        if expected is None:
            expected = self.registry.spec_for(call.call)

        logger.debug(f"Dispatching {call.call.value} params={redact_pii(call.params)}")

        parsed = self.validator.validate(call.params, expected)
        invalid: InvalidList = list(parsed.invalid) if isinstance(parsed, ParseFailure) else []

        page: Any = 0
        items_per_page: Any = self.default_items_per_page
        if call.type is CallType.QUERY:
            page, items_per_page = self._pagination(call, invalid)

        if invalid:
            logger.info(f"Invalid params for {call.call.value}: {invalid}")
            return failure(INVALID_PARAMS, invalid)

        try:
            rows = await self.executor.execute(
                principal_id,
                call.call,
                parsed.params,
                call.type,
                page,
                items_per_page,
            )
        except CallExecutionError as e:
            detail = REDACTED_DB_ERROR if self.production else e.detail
            return failure(DB_CALL_FAILED, detail)

        return success(rows)

    def _pagination(self, call: CallData, invalid: InvalidList) -> tuple[int, int]:
        """Validate page/itemsPerPage, appending failures to ``invalid``."""
        page = 0
        items_per_page = self.default_items_per_page

        if call.page is not None:
            outcome = self._page.validate(call.page)
            if isinstance(outcome, Accepted):
                page = outcome.value
            else:
                invalid.append((PAGE_PARAM, outcome.reason))

        if call.items_per_page is not None:
            outcome = self._items_per_page.validate(call.items_per_page)
            if isinstance(outcome, Accepted):
                items_per_page = outcome.value
            else:
                invalid.append((ITEMS_PER_PAGE_PARAM, outcome.reason))

        return page, items_per_page
