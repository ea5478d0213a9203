"""
Raw call executor.

Runs one backend call inside its own connection and transaction:

    BEGIN
    SELECT set_config('app.current_user_id', :principal_id, true)
    SELECT * FROM <call>(:p0, ...) LIMIT :limit OFFSET :offset   -- query
    CALL <call>(:p0, ...)                                        -- mutation
    COMMIT  (ROLLBACK on any failure)

The call name comes from the closed CallName enum and is the only value
interpolated into statement text; every parameter, the principal id and the
pagination window are bound.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.elements import TextClause

from ..core.defs import CallName, CallType
from ..core.errors import CallExecutionError, CallTimeoutError, InvalidPrincipalError
from ..core.result_types import TableResult


logger = logging.getLogger(__name__)

PRINCIPAL_SETTING = "app.current_user_id"

DEFAULT_ITEMS_PER_PAGE = 100

# is_local=true scopes the setting to the current transaction
SET_PRINCIPAL = text("SELECT set_config(:setting, :principal_id, true)")


def build_call_statement(call_name: CallName, param_count: int, call_type: CallType) -> TextClause:
    """
    Build the parameterized statement invoking a call.

    Args:
        call_name: Call to invoke (must be a CallName member)
        param_count: Number of positional parameters
        call_type: QUERY adds a bound LIMIT/OFFSET window

    Returns:
        SQLAlchemy text clause with :p0..:pN (and :limit/:offset) binds
    """
    if not isinstance(call_name, CallName):
        raise TypeError(f"call_name must be a CallName, got {type(call_name).__name__}")

    placeholders = ", ".join(f":p{i}" for i in range(param_count))

    if call_type is CallType.MUTATION:
        return text(f"CALL {call_name.value}({placeholders})")

    return text(f"SELECT * FROM {call_name.value}({placeholders}) LIMIT :limit OFFSET :offset")


def _as_count(value: Any) -> int:
    """Coerce a pagination value to a non-negative int; anything else is 0."""
    if isinstance(value, bool):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return number if number >= 0 else 0


def _check_principal(principal_id: Any) -> int:
    # bool is an int subclass but never a user id
    if isinstance(principal_id, bool) or not isinstance(principal_id, int):
        raise InvalidPrincipalError(principal_id)
    return principal_id


class CallExecutor:
    """
    Executes backend calls against the data store.

    Each execute() borrows one pooled connection, runs BEGIN / set principal /
    call / COMMIT on it and returns it to the pool whatever the outcome.

    Usage:
        executor = CallExecutor(engine, timeout=10.0)
        rows = await executor.execute(42, CallName.GET_TEAM_TODOS, [7], CallType.QUERY)
    """

    def __init__(
        self,
        engine: AsyncEngine,
        *,
        timeout: Optional[float] = 10.0,
        principal_setting: str = PRINCIPAL_SETTING,
    ):
        """
        Initialize executor.

        Args:
            engine: Async engine owning the connection pool
            timeout: Seconds a whole call may take (None disables the bound)
            principal_setting: Session variable read by row-level security policies
        """
        self.engine = engine
        self.timeout = timeout
        self.principal_setting = principal_setting

    async def execute(
        self,
        principal_id: int,
        call_name: CallName,
        params: Sequence[Any] = (),
        call_type: CallType = CallType.QUERY,
        page: Any = 0,
        items_per_page: Any = DEFAULT_ITEMS_PER_PAGE,
    ) -> TableResult:
        """
        Execute a single call.

        Args:
            principal_id: Caller id for row-level security (NO_PRINCIPAL for none)
            call_name: Call to invoke
            params: Validated positional parameters
            call_type: QUERY (rows, paginated) or MUTATION (no rows)
            page: 0-based page, ignored for mutations
            items_per_page: Page size, ignored for mutations

        Returns:
            Result rows as dicts (always empty for mutations)

        Raises:
            InvalidPrincipalError: principal_id is not an int
            CallTimeoutError: the call exceeded the timeout
            CallExecutionError: the store raised; the transaction was rolled back
        """
        principal_id = _check_principal(principal_id)
        statement = build_call_statement(call_name, len(params), call_type)

        bind: dict[str, Any] = {f"p{i}": value for i, value in enumerate(params)}
        if call_type is CallType.QUERY:
            limit = _as_count(items_per_page)
            bind["limit"] = limit
            bind["offset"] = _as_count(page) * limit

        logger.debug(f"Executing {call_name.value} ({call_type.value}) as principal {principal_id}")

        try:
            if self.timeout is None:
                return await self._run(principal_id, statement, bind, call_type)
            return await asyncio.wait_for(
                self._run(principal_id, statement, bind, call_type),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Call {call_name.value} timed out after {self.timeout}s")
            raise CallTimeoutError(call_name.value, self.timeout) from e
        except Exception as e:
            # DBAPIError's own str() includes bound parameters; keep the driver message only
            original = getattr(e, "orig", None) or e
            logger.warning(f"Error executing {call_name.value}(...): {original}")
            raise CallExecutionError(call_name.value, str(original)) from e

    async def _run(
        self,
        principal_id: int,
        statement: TextClause,
        bind: dict[str, Any],
        call_type: CallType,
    ) -> TableResult:
        async with self.engine.connect() as conn:
            async with conn.begin():
                await conn.execute(
                    SET_PRINCIPAL,
                    {"setting": self.principal_setting, "principal_id": str(principal_id)},
                )
                result = await conn.execute(statement, bind)

                if call_type is CallType.MUTATION:
                    return []
                return [dict(row) for row in result.mappings().all()]
