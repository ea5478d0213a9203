"""
Parameter validator.

Turns a call's raw parameter bag into the positional argument list expected
by the stored function/procedure, or into the complete list of invalid
fields.
"""

from __future__ import annotations

from typing import Any, Mapping

from .defs import ParamSpec
from .result_types import InvalidList, ParseFailure, ParseResult, ParseSuccess
from .validators import Rejected


class ParamValidator:
    """
    Validates raw call parameters against a ParamSpec.

    Usage:
        validator = ParamValidator()
        result = validator.validate({"b": "x", "a": 5}, (("a", ID), ("b", STR)))
        # ParseSuccess(params=[5, "x"])
    """

    def validate(self, raw_params: Mapping[str, Any], expected: ParamSpec) -> ParseResult:
        """
        Validate and order the parameters.

        Every entry of ``expected`` is checked; failures are accumulated
        rather than short-circuited so the caller sees all invalid fields.

        Returns:
            ParseSuccess with params in ``expected`` order, or
            ParseFailure with every (field, reason) pair.
        """
        params: list[Any] = []
        invalid: InvalidList = []

        for name, validator in expected:
            value = raw_params.get(name)

            # No validator: pass through unchecked
            if validator is None:
                params.append(value)
                continue

            outcome = validator.validate(value)
            if isinstance(outcome, Rejected):
                invalid.append((name, outcome.reason))
                continue
            params.append(outcome.value)

        if invalid:
            return ParseFailure(invalid=invalid)

        return ParseSuccess(params=params)


def validate_params(raw_params: Mapping[str, Any], expected: ParamSpec) -> ParseResult:
    """Convenience wrapper around ParamValidator.validate."""
    return ParamValidator().validate(raw_params, expected)
