"""exactcalc exception hierarchy.

Keep this module small and dependency-free: it is imported broadly across the
project and by tests.
"""

from __future__ import annotations


class CalcError(Exception):
    """Base exception for all evaluation errors.

    `position` is the 0-based offset into the source text, or None when the
    error is not tied to a location (e.g. raised directly by a `Number`).
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        return self.message

    def at(self, position: int) -> CalcError:
        """Attach `position` unless one is already set; returns self."""
        if self.position is None:
            self.position = position
        return self


class CalcSyntaxError(CalcError):
    """Raised for malformed tokens, unexpected tokens, and unbalanced parens."""


class TypeMismatchError(CalcError):
    """Raised when an operator is applied to an incompatible number variant."""


class DomainError(CalcError):
    """Raised when an operation is undefined for the given operand."""


class DivisionByZeroError(CalcError):
    """Raised for any division or modulus by zero."""


class UnknownFunctionError(CalcError):
    """Raised when a call names a function missing from the table."""

    def __init__(self, name: str, position: int | None = None) -> None:
        super().__init__(f"unknown function {name!r}", position)
        self.name = name


class ArityMismatchError(CalcError):
    """Raised when a call passes the wrong number of arguments."""

    def __init__(
        self, name: str, expected: int, received: int, position: int | None = None
    ) -> None:
        super().__init__(
            f"{name}() takes {expected} argument(s) but {received} were given", position
        )
        self.name = name
        self.expected = expected
        self.received = received


class ResourceLimitExceededError(CalcError):
    """Raised when nesting depth, operand size or operation count exceeds a limit."""


class TimeoutExceededError(CalcError):
    """Raised when the wall-clock budget runs out mid-evaluation."""


class CalcConfigError(Exception):
    """Raised for invalid user configuration."""
