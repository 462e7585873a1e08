"""Arbitrary-precision numeric values.

A `Number` wraps either a Python `int` (the Integer variant) or a
`decimal.Decimal` (the Decimal variant). Operations return the narrowest
variant that keeps the result exact: Integer op Integer stays Integer, and any
Decimal operand promotes the pair to Decimal.

Addition, subtraction and multiplication of Decimals run in an
unbounded-precision context, so they never round. Division is the only
operation that may round; when it does the result carries `exact=False`, and
inexactness propagates through every later operation.
"""

from __future__ import annotations

import decimal
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from exactcalc.errors import (
    DivisionByZeroError,
    DomainError,
    ResourceLimitExceededError,
    TypeMismatchError,
)

_TRAPS = [decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow]

# + - * on finite Decimals are exact at this precision.
_EXACT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    traps=_TRAPS,
)

_CHECKPOINT_EVERY = 256


def _rounding_context(precision: int) -> decimal.Context:
    # Exponent range matches _EXACT; only the precision is bounded.
    return decimal.Context(
        prec=precision,
        rounding=decimal.ROUND_HALF_EVEN,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=_TRAPS,
    )


def _to_decimal(value: int | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # Decimal(int) is exact regardless of context precision.
    return Decimal(value)


def _int_digits(value: int) -> str:
    """Base-10 digits of abs(value).

    Goes through Decimal, which is not subject to the interpreter's limit on
    int to str conversion.
    """
    return str(Decimal(abs(value)))


def _decimal_parts(value: Decimal) -> tuple[int, int]:
    """Split a finite Decimal into (mantissa, exponent) with value == m * 10**e."""
    exponent = int(value.as_tuple().exponent)
    return int(_EXACT.scaleb(value, -exponent)), exponent


@dataclass(frozen=True, slots=True)
class Number:
    value: int | Decimal
    exact: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, Decimal)):
            raise TypeError(f"Number value must be int or Decimal, got {type(self.value)!r}")
        if isinstance(self.value, Decimal) and not self.value.is_finite():
            raise TypeError("Number value must be finite")

    # -- constructors -------------------------------------------------

    @classmethod
    def from_literal(cls, text: str, *, base: int = 10, is_decimal: bool = False) -> Number:
        """Build a Number from the raw digits of a numeric literal.

        `text` excludes any base prefix. Decimal literals are always base 10.
        """
        if is_decimal:
            if base != 10:
                raise ValueError("decimal literals must be base 10")
            return cls(Decimal(text))
        if base == 10:
            # int(str) refuses very long base-10 strings; Decimal does not.
            return cls(int(Decimal(text)))
        return cls(int(text, base))

    # -- accessors ----------------------------------------------------

    @property
    def is_integer(self) -> bool:
        """True for the Integer variant (not merely a whole-valued Decimal)."""
        return isinstance(self.value, int)

    @property
    def is_whole(self) -> bool:
        if isinstance(self.value, int):
            return True
        return self.value == _EXACT.to_integral_value(self.value)

    @property
    def is_zero(self) -> bool:
        return self.value == 0

    @property
    def sign(self) -> int:
        if self.value > 0:
            return 1
        if self.value < 0:
            return -1
        return 0

    @property
    def digits(self) -> str:
        """Base-10 digits of the magnitude, without sign or decimal point."""
        if isinstance(self.value, int):
            return _int_digits(self.value)
        return "".join(str(d) for d in self.value.as_tuple().digits)

    @property
    def scale(self) -> int:
        """Number of digits after the decimal point (0 for integers).

        Negative when a Decimal carries a positive exponent (e.g. ``1E+3``).
        """
        if isinstance(self.value, int):
            return 0
        return -int(self.value.as_tuple().exponent)

    def as_tuple(self) -> tuple[int, str, int]:
        """Return ``(sign, digits, scale)``; enough to render the value losslessly."""
        return self.sign, self.digits, self.scale

    # -- helpers ------------------------------------------------------

    def _with(self, value: int | Decimal, *others: Number, exact: bool = True) -> Number:
        return Number(value, exact and self.exact and all(o.exact for o in others))

    def _promote(self, other: Number) -> tuple[int, int] | tuple[Decimal, Decimal]:
        if isinstance(self.value, int) and isinstance(other.value, int):
            return self.value, other.value
        return _to_decimal(self.value), _to_decimal(other.value)

    def _bitwise_operand(self) -> int:
        if isinstance(self.value, int):
            return self.value
        if not self.is_whole:
            raise TypeMismatchError("bitwise operator requires whole numbers")
        return int(self.value)

    def _whole_for(self, what: str) -> int:
        if not self.is_whole:
            raise DomainError(f"{what} is only defined for whole numbers")
        return int(self.value)

    # -- arithmetic ---------------------------------------------------

    def negate(self) -> Number:
        if isinstance(self.value, int):
            return self._with(-self.value)
        return self._with(_EXACT.minus(self.value))

    def abs(self) -> Number:
        if isinstance(self.value, int):
            return self._with(abs(self.value))
        return self._with(_EXACT.abs(self.value))

    def add(self, other: Number) -> Number:
        a, b = self._promote(other)
        if isinstance(a, int):
            return self._with(a + b, other)
        return self._with(_EXACT.add(a, b), other)

    def sub(self, other: Number) -> Number:
        a, b = self._promote(other)
        if isinstance(a, int):
            return self._with(a - b, other)
        return self._with(_EXACT.subtract(a, b), other)

    def mul(self, other: Number) -> Number:
        a, b = self._promote(other)
        if isinstance(a, int):
            return self._with(a * b, other)
        return self._with(_EXACT.multiply(a, b), other)

    def div(self, other: Number, *, precision: int) -> Number:
        """True division.

        Integer / Integer stays Integer when the quotient is whole. Otherwise the
        quotient is a Decimal rounded to `precision` significant digits, flagged
        inexact if rounding happened.
        """
        if other.is_zero:
            raise DivisionByZeroError("division by zero")
        a, b = self._promote(other)
        if isinstance(a, int):
            q, r = divmod(a, b)
            if r == 0:
                return self._with(q, other)
            a, b = Decimal(a), Decimal(b)
        ctx = _rounding_context(precision)
        q = ctx.divide(a, b)
        return self._with(q, other, exact=not ctx.flags[decimal.Inexact])

    def floordiv(self, other: Number) -> Number:
        """Floor division; always returns the Integer variant."""
        if other.is_zero:
            raise DivisionByZeroError("integer division by zero")
        a, b = self._promote(other)
        if isinstance(a, int):
            return self._with(a // b, other)
        q = _EXACT.divide_int(a, b)
        if _EXACT.remainder(a, b) != 0 and (a < 0) != (b < 0):
            q = _EXACT.subtract(q, Decimal(1))
        return self._with(int(q), other)

    def mod(self, other: Number) -> Number:
        """Floored modulus: the result takes the sign of the divisor."""
        if other.is_zero:
            raise DivisionByZeroError("modulo by zero")
        a, b = self._promote(other)
        if isinstance(a, int):
            return self._with(a % b, other)
        r = _EXACT.remainder(a, b)
        if r != 0 and (r < 0) != (b < 0):
            r = _EXACT.add(r, b)
        return self._with(r, other)

    def pow(self, exponent: Number, *, precision: int, max_bits: int) -> Number:
        """Raise to `exponent`.

        Whole exponents are exact (negative ones go through `div`). Fractional
        exponents use a decimal power routine at `precision` digits and are
        always flagged inexact.
        """
        if not exponent.is_whole:
            return self._fractional_pow(exponent, precision=precision)

        n = int(exponent.value)
        if n < 0:
            if self.is_zero:
                raise DivisionByZeroError("zero raised to a negative power")
            denominator = self.pow(Number(-n), precision=precision, max_bits=max_bits)
            return Number(1).div(denominator, precision=precision)._with_exact(exponent)

        if isinstance(self.value, int):
            _check_pow_size(self.value, n, max_bits)
            return self._with(self.value**n, exponent)

        mantissa, exp10 = _decimal_parts(_EXACT.normalize(self.value))
        _check_pow_size(mantissa, n, max_bits)
        value = _EXACT.scaleb(Decimal(mantissa**n), exp10 * n)
        return self._with(value, exponent)

    def _fractional_pow(self, exponent: Number, *, precision: int) -> Number:
        if self.sign < 0:
            raise DomainError("fractional exponent of a negative number")
        if self.is_zero:
            if exponent.sign < 0:
                raise DivisionByZeroError("zero raised to a negative power")
            return Number(0)
        ctx = _rounding_context(precision)
        try:
            value = ctx.power(_to_decimal(self.value), _to_decimal(exponent.value))
        except decimal.Overflow as e:
            raise ResourceLimitExceededError("power result is too large") from e
        return Number(value, exact=False)

    def _with_exact(self, *others: Number) -> Number:
        return self._with(self.value, *others)

    def factorial(
        self, *, max_argument: int, checkpoint: Callable[[], None] | None = None
    ) -> Number:
        """Iterative factorial of a non-negative whole number.

        `checkpoint` is called every few hundred multiplications so a caller can
        enforce a wall-clock budget.
        """
        if not self.is_whole or self.sign < 0:
            raise DomainError("factorial is only defined for non-negative whole numbers")
        n = int(self.value)
        if n > max_argument:
            raise ResourceLimitExceededError(
                f"factorial argument exceeds the limit of {max_argument}"
            )
        result = 1
        for i in range(2, n + 1):
            result *= i
            if checkpoint is not None and i % _CHECKPOINT_EVERY == 0:
                checkpoint()
        return self._with(result)

    # -- bitwise ------------------------------------------------------

    def bit_and(self, other: Number) -> Number:
        return self._with(self._bitwise_operand() & other._bitwise_operand(), other)

    def bit_or(self, other: Number) -> Number:
        return self._with(self._bitwise_operand() | other._bitwise_operand(), other)

    def bit_xor(self, other: Number) -> Number:
        return self._with(self._bitwise_operand() ^ other._bitwise_operand(), other)

    def bit_not(self) -> Number:
        return self._with(~self._bitwise_operand())

    def shift_left(self, other: Number, *, max_bits: int) -> Number:
        a = self._bitwise_operand()
        n = other._bitwise_operand()
        if n < 0:
            raise DomainError("negative shift count")
        if a != 0 and a.bit_length() + n > max_bits:
            raise ResourceLimitExceededError(f"shift result exceeds {max_bits} bits")
        if a == 0:
            return self._with(0, other)
        return self._with(a << n, other)

    def shift_right(self, other: Number) -> Number:
        a = self._bitwise_operand()
        n = other._bitwise_operand()
        if n < 0:
            raise DomainError("negative shift count")
        if n >= a.bit_length():
            return self._with(-1 if a < 0 else 0, other)
        return self._with(a >> n, other)


def _check_pow_size(base: int, n: int, max_bits: int) -> None:
    if abs(base) <= 1 or n == 0:
        return
    if (abs(base).bit_length() - 1) * n > max_bits:
        raise ResourceLimitExceededError(f"power result exceeds {max_bits} bits")
