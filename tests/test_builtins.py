from __future__ import annotations

from decimal import Decimal

import pytest

from exactcalc.builtins import DEFAULT_FUNCTIONS, default_functions
from exactcalc.config import Limits
from exactcalc.errors import ResourceLimitExceededError
from exactcalc.evaluator import evaluate
from exactcalc.numbers import Number


def test_default_table_contents() -> None:
    assert DEFAULT_FUNCTIONS.names() == ["abs", "idiv", "pow"]
    assert DEFAULT_FUNCTIONS.lookup("abs").arity == 1
    assert DEFAULT_FUNCTIONS.lookup("pow").arity == 2
    assert DEFAULT_FUNCTIONS.lookup("idiv").arity == 2


def test_abs() -> None:
    spec = DEFAULT_FUNCTIONS.lookup("abs")
    assert spec.invoke([Number(-5)]) == Number(5)
    assert spec.invoke([Number(Decimal("-2.5"))]).value == Decimal("2.5")


def test_idiv_floors() -> None:
    spec = DEFAULT_FUNCTIONS.lookup("idiv")
    assert spec.invoke([Number(7), Number(2)]) == Number(3)
    assert spec.invoke([Number(-7), Number(2)]) == Number(-4)


def test_pow_uses_table_limits() -> None:
    small = default_functions(Limits(precision=5, max_bits=64))
    third = evaluate("pow(3, -1)", small)
    assert third.value == Decimal("0.33333")
    with pytest.raises(ResourceLimitExceededError):
        evaluate("pow(2, 65)", small)
    assert evaluate("pow(2, 64)", small).value == 2**64
