"""Text rendering for `Number` values."""

from __future__ import annotations

from exactcalc.config import SUPPORTED_BASES
from exactcalc.errors import TypeMismatchError
from exactcalc.numbers import Number

_PREFIX = {2: "0b", 8: "0o", 10: "", 16: "0x"}
_FORMAT = {2: "b", 8: "o", 16: "X"}

INEXACT_MARK = "~"


def format_number(number: Number, base: int = 10) -> str:
    """Render `number` losslessly.

    Integers may be rendered in base 2, 8, 10 or 16 (with a ``0b``/``0o``/``0x``
    prefix and a leading ``-`` for negatives). Decimals are rendered in base 10
    in positional notation with their full scale. Inexact results are prefixed
    with ``~``.
    """

    if base not in SUPPORTED_BASES:
        raise ValueError(f"unsupported base: {base}")

    mark = "" if number.exact else INEXACT_MARK
    if number.is_integer:
        v = int(number.value)
        sign = "-" if v < 0 else ""
        if base == 10:
            return f"{mark}{sign}{number.digits}"
        return f"{mark}{sign}{_PREFIX[base]}{format(abs(v), _FORMAT[base])}"

    if base != 10:
        if not number.is_whole:
            raise TypeMismatchError(f"cannot render a fractional number in base {base}")
        return format_number(Number(int(number.value), number.exact), base)

    return f"{mark}{_positional(number)}"


def _positional(number: Number) -> str:
    sign, digits, scale = number.as_tuple()
    prefix = "-" if sign < 0 else ""
    if scale <= 0:
        return prefix + digits + "0" * -scale
    if len(digits) <= scale:
        digits = "0" * (scale - len(digits) + 1) + digits
    return f"{prefix}{digits[:-scale]}.{digits[-scale:]}"
