"""Error formatting and actionable hints for exactcalc CLI output.

Keep this module small and dependency-light: it is imported by the CLI layer
and only depends on the error hierarchy.
"""

from __future__ import annotations

from exactcalc.errors import (
    ArityMismatchError,
    CalcConfigError,
    CalcError,
    CalcSyntaxError,
    ResourceLimitExceededError,
    TimeoutExceededError,
    TypeMismatchError,
    UnknownFunctionError,
)


def format_caret(text: str, position: int | None) -> str:
    """Return the source line plus a caret under `position`, or "" if unknown."""
    if position is None or "\n" in text:
        return ""
    pos = min(max(0, position), len(text))
    return f"  {text}\n  {' ' * pos}^"


def format_hint(exc: BaseException, *, function_names: list[str] | None = None) -> str | None:
    """Return an actionable hint for a known error, or None."""
    msg = str(exc)

    if isinstance(exc, CalcConfigError):
        if "exactcalc.toml" in msg and "find" in msg.lower():
            return "create an exactcalc.toml with `version = 1` or pass --config"
        return None

    if isinstance(exc, UnknownFunctionError):
        if function_names:
            return f"available functions: {', '.join(function_names)}"
        return "no functions are available in this context"

    if isinstance(exc, ArityMismatchError):
        return f"call {exc.name}() with exactly {exc.expected} argument(s)"

    if isinstance(exc, TypeMismatchError) and "whole numbers" in msg:
        return "bitwise and shift operators only accept whole numbers"

    if isinstance(exc, ResourceLimitExceededError):
        return "raise the matching value under [limits] in exactcalc.toml"

    if isinstance(exc, TimeoutExceededError):
        return "raise limits.timeout in exactcalc.toml"

    if isinstance(exc, CalcSyntaxError) and "after function name" in msg:
        return "names can only be used as function calls, e.g. abs(-1)"

    return None


def format_error(
    exc: BaseException,
    *,
    text: str | None = None,
    function_names: list[str] | None = None,
) -> str:
    """Format error message, caret line and optional hint for stderr output."""
    msg = (str(exc) or repr(exc)).strip()

    result = f"error: {msg}"
    if text is not None and isinstance(exc, CalcError):
        caret = format_caret(text, exc.position)
        if caret:
            result += "\n" + caret
    hint = format_hint(exc, function_names=function_names)
    if hint:
        result += f"\nhint: {hint}"
    return result
