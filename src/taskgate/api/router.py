"""
FastAPI router binding the route table to the call dispatcher.

Every route-table entry gets the same generic handler:

1. Resolve the principal from the session cookie
2. Merge the JSON body with the (coerced) path parameters; path wins
3. Read ``page``/``itemsPerPage`` from the query string for query calls
4. Dispatch and render the envelope
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..core.defs import CallType, RouteDef
from ..core.registry import CallRegistry
from ..core.result_types import INTERNAL_SERVER_ERROR, INVALID_BODY, CallData, failure
from ..logs import redact_pii
from .deps import authenticate, get_state, read_body, respond


logger = logging.getLogger(__name__)


def make_call_handler(route: RouteDef) -> Callable[[Request], Awaitable[JSONResponse]]:
    """Construct the request handler for one route."""

    async def handler(request: Request) -> JSONResponse:
        state = get_state(request)
        try:
            principal_id, denied = authenticate(request, state)
            if denied is not None:
                return respond(denied)

            body = await read_body(request)
            if body is None:
                return respond(failure(INVALID_BODY))

            url_params = dict(request.path_params)
            if route.coerce is not None:
                url_params = route.coerce(url_params)

            logger.debug(
                f"Calling {route.call_name.value}: body={redact_pii(body)} params={url_params}"
            )

            call = CallData(
                call=route.call_name,
                type=route.call_type,
                params={**body, **url_params},
                page=request.query_params.get("page") if route.call_type is CallType.QUERY else None,
                items_per_page=(
                    request.query_params.get("itemsPerPage")
                    if route.call_type is CallType.QUERY
                    else None
                ),
            )
            result = await state.dispatcher.dispatch(principal_id, call)
            return respond(result)

        except Exception:
            logger.exception(f"Unhandled error in {route.method} {route.path}")
            return respond(failure(INTERNAL_SERVER_ERROR))

    handler.__name__ = f"{route.method.lower()}_{route.call_name.value}"
    return handler


def create_call_router(registry: CallRegistry) -> APIRouter:
    """
    Create a router with one endpoint per route-table entry.

    Args:
        registry: Call registry holding the route table

    Returns:
        Configured FastAPI router
    """
    router = APIRouter()

    for route in registry.iter_routes():
        router.add_api_route(
            route.path,
            make_call_handler(route),
            methods=[route.method.upper()],
            name=f"{route.method.lower()}_{route.call_name.value}",
        )

    return router
