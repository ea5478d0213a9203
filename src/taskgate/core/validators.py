"""
Per-field validators for call parameters.

A validator is one of two shapes, each with a single ``validate`` method:

- ``SchemaValidator`` wraps a pydantic type (type/shape/format check) and
  returns the coerced value.
- ``PredicateValidator`` wraps a ``(value) -> bool`` function and returns
  the original value unchanged.

Both receive ``None`` for a missing field; whether that is acceptable is
decided by the validator itself, not by key presence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Any, Callable, Optional, Union

from pydantic import EmailStr, Field, Strict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError


CUSTOM_VALIDATION_FAILED = "Failed custom validation"

MAX_STR_LENGTH = 2048


@dataclass(frozen=True)
class Accepted:
    """Validator outcome carrying the (possibly coerced) value."""
    value: Any


@dataclass(frozen=True)
class Rejected:
    """Validator outcome carrying a short machine-readable reason."""
    reason: str


ValidatorOutcome = Union[Accepted, Rejected]


@dataclass(frozen=True)
class SchemaValidator:
    """Validator backed by a pydantic type."""
    annotation: Any
    _adapter: TypeAdapter = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_adapter", TypeAdapter(self.annotation))

    def validate(self, raw: Any) -> ValidatorOutcome:
        try:
            return Accepted(self._adapter.validate_python(raw))
        except PydanticValidationError as e:
            return Rejected(", ".join(f"[{err['type']}]" for err in e.errors()))


@dataclass(frozen=True)
class PredicateValidator:
    """Validator backed by a boolean predicate."""
    predicate: Callable[[Any], bool]

    def validate(self, raw: Any) -> ValidatorOutcome:
        try:
            accepted = self.predicate(raw)
        except Exception:
            # A predicate that cannot handle the value (e.g. a missing field) rejects it
            accepted = False
        if accepted:
            return Accepted(raw)
        return Rejected(CUSTOM_VALIDATION_FAILED)


Validator = Union[SchemaValidator, PredicateValidator]


# =============================================================================
# Stock validators
# =============================================================================

_Str = Annotated[str, Field(max_length=MAX_STR_LENGTH)]
_StrNonEmpty = Annotated[str, Field(min_length=1, max_length=MAX_STR_LENGTH)]
_Id = Annotated[int, Strict(), Field(ge=0)]
_Bool = Annotated[bool, Strict()]
_Timestamp = Annotated[Union[datetime, str], Field(union_mode="left_to_right")]

STR = SchemaValidator(_Str)
STR_NONEMPTY = SchemaValidator(_StrNonEmpty)
ID = SchemaValidator(_Id)
EMAIL = SchemaValidator(EmailStr)
DATE = SchemaValidator(datetime)
TIMESTAMP = SchemaValidator(_Timestamp)
BOOL = SchemaValidator(_Bool)

STR_OPT = SchemaValidator(Optional[_Str])
STR_NONEMPTY_OPT = SchemaValidator(Optional[_StrNonEmpty])
ID_OPT = SchemaValidator(Optional[_Id])
EMAIL_OPT = SchemaValidator(Optional[EmailStr])
DATE_OPT = SchemaValidator(Optional[datetime])
TIMESTAMP_OPT = SchemaValidator(Optional[_Timestamp])
BOOL_OPT = SchemaValidator(Optional[_Bool])
