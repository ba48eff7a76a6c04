"""Resolved chains of invocables and their execution."""

from __future__ import annotations

from typing import Any, Iterable

from .invocable import Invocable
from .types import Tagged, TypeDescriptor, TypeRegistry

DEFAULT_SEPARATOR = " => "


class Chain:
    """
    Ordered invocables whose sequential execution satisfies the last one.

    The chain owns its value pool. call() appends each present result to
    the pool so later invocables can consume it, which makes concurrent
    calls on the same instance unsafe. ``values`` holds the pool of the
    last successful call.
    """

    def __init__(
        self,
        funcs: Iterable[Invocable],
        values: Iterable[Any] = (),
        *,
        registry: TypeRegistry | None = None,
        separator: str = DEFAULT_SEPARATOR,
    ):
        self._funcs = tuple(funcs)
        if not self._funcs:
            raise ValueError("chain must contain at least one invocable")
        self._inputs = tuple(values)
        self._values = list(self._inputs)
        self.registry = registry
        self.separator = separator

    @property
    def funcs(self) -> tuple[Invocable, ...]:
        return self._funcs

    @property
    def values(self) -> tuple[Any, ...]:
        return tuple(self._values)

    @property
    def out(self) -> TypeDescriptor:
        """Output type of the chain (the target's output)."""
        return self._funcs[-1].out

    def call(self) -> Any:
        """
        Call every invocable in order and return the last result.

        The first exception raised by an invocable aborts the chain and
        propagates unchanged; later invocables are not run and the pool
        keeps no intermediate results from the aborted call.

        Every call starts from the values the chain was built with, so
        each invocable binds against results produced in this call only.
        """
        pool = list(self._inputs)
        result: Any = None
        for f in self._funcs:
            outcome = f.prepare(*pool, registry=self.registry).call()
            if outcome.present:
                # Results are typed by the declared output, not their class.
                pool.append(Tagged(f.out, outcome.value))
            result = outcome.value

        self._values = pool
        return result

    def __len__(self) -> int:
        return len(self._funcs)

    def __iter__(self):
        return iter(self._funcs)

    def __str__(self) -> str:
        return self.separator.join(str(f) for f in self._funcs)

    def __repr__(self) -> str:
        return f"<Chain {self}>"
