"""
Call registry - parameter specs and routes for every backend call.

Built once at startup from static declarations and never mutated afterwards.

Usage:
    from taskgate.core.registry import RegistryBuilder

    builder = RegistryBuilder()
    builder.register_call(CallName.GET_USER_BY_ID, (("user_id", ID),))
    builder.register_route(RouteDef("GET", "/user/{user_id}", CallType.QUERY, CallName.GET_USER_BY_ID))
    registry = builder.build()  # raises RegistryError if any CallName lacks a spec
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from .calls import CALL_SPECS
from .defs import CallName, ParamSpec, RouteDef
from .errors import RegistryError
from .routes import ROUTES
from .validators import PredicateValidator, SchemaValidator


logger = logging.getLogger(__name__)

# Call names are interpolated into SQL text; keep them plain identifiers
CALL_IDENTIFIER = re.compile(r"[a-z_][a-z0-9_]*")

HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE"}


@dataclass(frozen=True)
class CallRegistry:
    """
    Read-only lookups: call name -> ParamSpec and (method, path) -> route.

    Totality over CallName is checked by RegistryBuilder.build().
    """
    specs: Mapping[CallName, ParamSpec]
    routes: Mapping[tuple[str, str], RouteDef]

    def spec_for(self, call_name: CallName) -> ParamSpec:
        """Get the parameter spec for a call."""
        return self.specs[call_name]

    def route_for(self, method: str, path: str) -> Optional[RouteDef]:
        """Get the route declared for a method and path template."""
        return self.routes.get((method.upper(), path))

    def iter_routes(self) -> Iterator[RouteDef]:
        return iter(self.routes.values())

    def __len__(self) -> int:
        return len(self.specs)


class RegistryBuilder:
    """
    Collects call specs and routes, then freezes them into a CallRegistry.

    Two-phase:
    1. register_call / register_route
    2. build() validates and returns the immutable registry
    """

    def __init__(self):
        self._specs: dict[CallName, ParamSpec] = {}
        self._routes: dict[tuple[str, str], RouteDef] = {}

    def register_call(self, call_name: CallName, spec: Iterable) -> None:
        """Register the parameter spec of a call."""
        if call_name in self._specs:
            raise RegistryError(f"Call '{call_name.value}' registered twice")
        self._specs[call_name] = tuple((name, validator) for name, validator in spec)

    def register_route(self, route: RouteDef) -> None:
        """Register a route bound to a call."""
        method = route.method.upper()
        if method not in HTTP_METHODS:
            raise RegistryError(f"Unsupported HTTP method '{route.method}' for {route.path}")
        if route.key in self._routes:
            raise RegistryError(f"Duplicate route {route.method} {route.path}")
        self._routes[route.key] = route

    def build(self) -> CallRegistry:
        """
        Validate the collected declarations and freeze them.

        Raises:
            RegistryError: if a CallName has no spec, a call name is not a
                plain identifier, a spec is malformed, or a route points at
                an unknown call
        """
        errors: list[str] = []

        missing = [name.value for name in CallName if name not in self._specs]
        if missing:
            errors.append(f"missing parameter specs for: {', '.join(missing)}")

        for call_name, spec in self._specs.items():
            if not CALL_IDENTIFIER.fullmatch(call_name.value):
                errors.append(f"call name '{call_name.value}' is not a plain identifier")

            seen: set[str] = set()
            for name, validator in spec:
                if name in seen:
                    errors.append(f"{call_name.value}: parameter '{name}' declared twice")
                seen.add(name)
                if validator is not None and not isinstance(
                    validator, (SchemaValidator, PredicateValidator)
                ):
                    errors.append(f"{call_name.value}.{name}: unsupported validator {validator!r}")

        for route in self._routes.values():
            if route.call_name not in self._specs:
                errors.append(f"route {route.method} {route.path}: unknown call '{route.call_name}'")

        if errors:
            raise RegistryError("Invalid call registry: " + "; ".join(errors))

        logger.debug(f"Call registry built: {len(self._specs)} calls, {len(self._routes)} routes")

        return CallRegistry(
            specs=MappingProxyType(dict(self._specs)),
            routes=MappingProxyType(dict(self._routes)),
        )


def build_registry(
    specs: Optional[Mapping[CallName, ParamSpec]] = None,
    routes: Optional[Iterable[RouteDef]] = None,
) -> CallRegistry:
    """
    Convenience function to build the registry from declarations.

    Args:
        specs: Call specs (default: the full call catalogue)
        routes: Route definitions (default: the full route table)

    Returns:
        Immutable CallRegistry
    """
    builder = RegistryBuilder()

    for call_name, spec in (CALL_SPECS if specs is None else specs).items():
        builder.register_call(call_name, spec)

    for route in (ROUTES if routes is None else routes):
        builder.register_route(route)

    return builder.build()
