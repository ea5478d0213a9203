"""Parameter validation: positional output and accumulated failures."""

from __future__ import annotations

from datetime import datetime

from taskgate.core.calls import CALL_SPECS
from taskgate.core.defs import CallName
from taskgate.core.result_types import ParseFailure, ParseSuccess
from taskgate.core.validator import ParamValidator, validate_params
from taskgate.core.validators import (
    BOOL,
    EMAIL,
    ID,
    ID_OPT,
    STR,
    STR_NONEMPTY,
    Accepted,
    PredicateValidator,
    Rejected,
)


def test_params_follow_spec_order_not_input_order():
    result = validate_params({"b": "x", "a": 5}, (("a", ID), ("b", STR)))

    assert isinstance(result, ParseSuccess)
    assert result.params == [5, "x"]


def test_empty_spec_accepts_anything():
    result = validate_params({"extra": 1}, ())

    assert isinstance(result, ParseSuccess)
    assert result.params == []


def test_extra_fields_are_ignored():
    result = validate_params({"a": 1, "zzz": "ignored"}, (("a", ID),))

    assert isinstance(result, ParseSuccess)
    assert result.params == [1]


def test_all_failures_are_reported():
    result = validate_params(
        {"a": "not-an-int", "c": "not-an-email"},
        (("a", ID), ("b", STR_NONEMPTY), ("c", EMAIL)),
    )

    assert isinstance(result, ParseFailure)
    assert [name for name, _ in result.invalid] == ["a", "b", "c"]
    assert all(reason.startswith("[") for _, reason in result.invalid)


def test_missing_field_is_presented_as_none():
    seen = []

    def record(value):
        seen.append(value)
        return True

    result = validate_params({}, (("a", PredicateValidator(record)),))

    assert isinstance(result, ParseSuccess)
    assert result.params == [None]
    assert seen == [None]


def test_optional_validator_accepts_missing_and_null():
    assert validate_params({}, (("a", ID_OPT),)).params == [None]
    assert validate_params({"a": None}, (("a", ID_OPT),)).params == [None]


def test_required_validator_rejects_missing():
    result = validate_params({}, (("a", ID),))

    assert isinstance(result, ParseFailure)
    assert result.invalid[0][0] == "a"


def test_field_without_validator_passes_through():
    payload = {"nested": [1, 2]}
    result = validate_params({"raw": payload}, (("raw", None),))

    assert isinstance(result, ParseSuccess)
    assert result.params == [payload]


def test_predicate_failure_reason():
    even = PredicateValidator(lambda v: isinstance(v, int) and v % 2 == 0)

    result = validate_params({"n": 3}, (("n", even),))

    assert isinstance(result, ParseFailure)
    assert result.invalid == [("n", "Failed custom validation")]


def test_predicate_returns_original_value():
    marker = object()
    assert PredicateValidator(lambda v: True).validate(marker) == Accepted(marker)


def test_ids_are_strict():
    assert isinstance(ID.validate("5"), Rejected)
    assert isinstance(ID.validate(True), Rejected)
    assert isinstance(ID.validate(-1), Rejected)
    assert ID.validate(0) == Accepted(0)


def test_bool_is_strict():
    assert isinstance(BOOL.validate("true"), Rejected)
    assert BOOL.validate(False) == Accepted(False)


def test_schema_reason_names_error_type():
    outcome = STR_NONEMPTY.validate("")

    assert outcome == Rejected("[string_too_short]")


def test_create_todo_with_empty_title_is_rejected():
    result = ParamValidator().validate(
        {"created_by": 1, "team_id": 7, "title": "", "description": "x", "status": 1},
        CALL_SPECS[CallName.CREATE_TODO],
    )

    assert isinstance(result, ParseFailure)
    assert result.invalid == [("title", "[string_too_short]")]


def test_create_todo_coerces_due_date():
    result = ParamValidator().validate(
        {
            "created_by": 1,
            "team_id": 7,
            "title": "Write report",
            "description": "",
            "status": 1,
            "due_date": "2025-05-01T12:00:00",
        },
        CALL_SPECS[CallName.CREATE_TODO],
    )

    assert isinstance(result, ParseSuccess)
    assert result.params == [1, 7, "Write report", "", 1, None, datetime(2025, 5, 1, 12, 0)]


def test_every_failing_create_todo_field_is_listed():
    result = validate_params(
        {"team_id": 1, "title": "", "description": "x", "status": 1},
        CALL_SPECS[CallName.CREATE_TODO],
    )

    assert isinstance(result, ParseFailure)
    assert dict(result.invalid)["title"] == "[string_too_short]"
    assert [name for name, _ in result.invalid] == ["created_by", "title"]


def test_raising_predicate_rejects_and_other_failures_are_kept():
    even = PredicateValidator(lambda v: v % 2 == 0)

    result = validate_params({"b": ""}, (("n", even), ("b", STR_NONEMPTY)))

    assert isinstance(result, ParseFailure)
    assert result.invalid == [("n", "Failed custom validation"), ("b", "[string_too_short]")]
