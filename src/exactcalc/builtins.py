"""Default function table: abs(x), pow(x, y) and idiv(a, b)."""

from __future__ import annotations

from collections.abc import Sequence

from exactcalc.config import DEFAULT_LIMITS, Limits
from exactcalc.functions import FunctionSpec, FunctionTable
from exactcalc.numbers import Number


def _abs(args: Sequence[Number]) -> Number:
    return args[0].abs()


def _idiv(args: Sequence[Number]) -> Number:
    return args[0].floordiv(args[1])


def default_functions(limits: Limits = DEFAULT_LIMITS) -> FunctionTable:
    """Build the default table; `pow` honours `limits.precision` and `limits.max_bits`."""

    def _pow(args: Sequence[Number]) -> Number:
        return args[0].pow(args[1], precision=limits.precision, max_bits=limits.max_bits)

    return FunctionTable(
        {
            "abs": FunctionSpec(1, _abs),
            "pow": FunctionSpec(2, _pow),
            "idiv": FunctionSpec(2, _idiv),
        }
    )


DEFAULT_FUNCTIONS = default_functions()
