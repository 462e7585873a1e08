from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from exactcalc.builtins import DEFAULT_FUNCTIONS, default_functions
from exactcalc.config import DEFAULT_LIMITS, Limits
from exactcalc.errors import (
    ArityMismatchError,
    CalcConfigError,
    CalcError,
    CalcSyntaxError,
    DivisionByZeroError,
    DomainError,
    ResourceLimitExceededError,
    TimeoutExceededError,
    TypeMismatchError,
    UnknownFunctionError,
)
from exactcalc.evaluator import EvalResult, evaluate, try_evaluate
from exactcalc.functions import EMPTY_FUNCTIONS, FunctionSpec, FunctionTable
from exactcalc.numbers import Number


def _package_version() -> str:
    try:
        return version("exactcalc")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "DEFAULT_FUNCTIONS",
    "DEFAULT_LIMITS",
    "EMPTY_FUNCTIONS",
    "ArityMismatchError",
    "CalcConfigError",
    "CalcError",
    "CalcSyntaxError",
    "DivisionByZeroError",
    "DomainError",
    "EvalResult",
    "FunctionSpec",
    "FunctionTable",
    "Limits",
    "Number",
    "ResourceLimitExceededError",
    "TimeoutExceededError",
    "TypeMismatchError",
    "UnknownFunctionError",
    "__version__",
    "default_functions",
    "evaluate",
    "try_evaluate",
]
