"""Immutable function tables consulted by the evaluator for named calls.

A table is built once and then only read; evaluations running concurrently
can share one without locking. `extend` returns a new table.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from exactcalc.numbers import Number

Invoke = Callable[[Sequence[Number]], Number]


@dataclass(frozen=True, slots=True)
class FunctionSpec:
    arity: int
    invoke: Invoke

    def __post_init__(self) -> None:
        if isinstance(self.arity, bool) or not isinstance(self.arity, int) or self.arity < 0:
            raise ValueError(f"arity must be a non-negative int, got {self.arity!r}")
        if not callable(self.invoke):
            raise TypeError("invoke must be callable")


class FunctionTable:
    """Read-only mapping of function name -> FunctionSpec."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, FunctionSpec] | None = None) -> None:
        copied: dict[str, FunctionSpec] = {}
        for name, spec in (entries or {}).items():
            if not isinstance(name, str) or not name.isidentifier():
                raise ValueError(f"invalid function name: {name!r}")
            if not isinstance(spec, FunctionSpec):
                raise TypeError(f"entry {name!r} must be a FunctionSpec")
            copied[name] = spec
        self._entries: Mapping[str, FunctionSpec] = MappingProxyType(copied)

    def lookup(self, name: str) -> FunctionSpec | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return sorted(self._entries)

    def extend(self, other: FunctionTable | Mapping[str, FunctionSpec]) -> FunctionTable:
        """Return a new table with `other`'s entries layered over this one."""
        extra = other._entries if isinstance(other, FunctionTable) else other
        return FunctionTable({**self._entries, **extra})

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"FunctionTable({self.names()!r})"


EMPTY_FUNCTIONS = FunctionTable()
