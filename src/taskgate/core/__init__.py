"""
Core module - call definitions, validation and the call registry.
"""

from __future__ import annotations

from .defs import CallName, CallType, ParamSpec, RouteDef
from .errors import (
    AuthError,
    CallExecutionError,
    CallTimeoutError,
    InvalidPrincipalError,
    RegistryError,
    TaskgateError,
)
from .registry import CallRegistry, RegistryBuilder, build_registry
from .result_types import (
    CallData,
    CallFailure,
    CallSuccess,
    InvalidList,
    JSONResult,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    RawParams,
    failure,
    success,
)
from .routes import ROUTES, params_to_int
from .validator import ParamValidator, validate_params
from .validators import PredicateValidator, SchemaValidator, Validator

__all__ = [
    # Definitions
    "CallName",
    "CallType",
    "ParamSpec",
    "RouteDef",
    # Errors
    "TaskgateError",
    "RegistryError",
    "CallExecutionError",
    "CallTimeoutError",
    "InvalidPrincipalError",
    "AuthError",
    # Envelope
    "CallData",
    "CallSuccess",
    "CallFailure",
    "JSONResult",
    "InvalidList",
    "RawParams",
    "ParseSuccess",
    "ParseFailure",
    "ParseResult",
    "success",
    "failure",
    # Validation
    "Validator",
    "SchemaValidator",
    "PredicateValidator",
    "ParamValidator",
    "validate_params",
    # Registry
    "CallRegistry",
    "RegistryBuilder",
    "build_registry",
    "ROUTES",
    "params_to_int",
]
