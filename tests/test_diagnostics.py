"""Tests for exactcalc.diagnostics: error formatting and actionable hints."""

from __future__ import annotations

from exactcalc.diagnostics import format_caret, format_error, format_hint
from exactcalc.errors import (
    ArityMismatchError,
    CalcConfigError,
    CalcSyntaxError,
    DivisionByZeroError,
    ResourceLimitExceededError,
    TimeoutExceededError,
    TypeMismatchError,
    UnknownFunctionError,
)

# --- format_caret ---


def test_caret_points_at_position() -> None:
    out = format_caret("1 / 0", 2)
    line, caret = out.split("\n")
    assert line == "  1 / 0"
    assert caret == "    ^"


def test_caret_clamps_past_end() -> None:
    out = format_caret("2 +", 99)
    assert out.split("\n")[1] == "  " + " " * 3 + "^"


def test_caret_without_position_is_empty() -> None:
    assert format_caret("1", None) == ""


# --- format_hint ---


def test_hint_missing_toml() -> None:
    exc = CalcConfigError("Could not find exactcalc.toml by walking upward from start path.")
    hint = format_hint(exc)
    assert hint is not None
    assert "--config" in hint


def test_hint_unknown_function_lists_names() -> None:
    hint = format_hint(UnknownFunctionError("foo"), function_names=["abs", "pow"])
    assert hint == "available functions: abs, pow"
    assert "no functions" in format_hint(UnknownFunctionError("foo"))


def test_hint_arity() -> None:
    hint = format_hint(ArityMismatchError("pow", 2, 1))
    assert hint is not None
    assert "2 argument" in hint


def test_hint_limits() -> None:
    assert "[limits]" in format_hint(ResourceLimitExceededError("too deep"))
    assert "timeout" in format_hint(TimeoutExceededError("slow"))


def test_hint_bitwise_type_mismatch() -> None:
    hint = format_hint(TypeMismatchError("bitwise operator requires whole numbers"))
    assert hint is not None


def test_no_hint_for_division_by_zero() -> None:
    assert format_hint(DivisionByZeroError("division by zero")) is None


# --- format_error ---


def test_format_error_with_caret_and_hint() -> None:
    out = format_error(
        UnknownFunctionError("foo", 4), text="1 + foo(2)", function_names=["abs"]
    )
    lines = out.split("\n")
    assert lines[0] == "error: unknown function 'foo'"
    assert lines[1] == "  1 + foo(2)"
    assert lines[2] == "      ^"
    assert lines[3] == "hint: available functions: abs"


def test_format_error_without_text() -> None:
    out = format_error(CalcSyntaxError("empty expression", 0))
    assert out == "error: empty expression"


def test_format_error_config() -> None:
    out = format_error(CalcConfigError("Unsupported config version: 2 (expected 1)."))
    assert out == "error: Unsupported config version: 2 (expected 1)."
