"""
Mapper library: ordered collection of invocables used as conversion steps.

Registration order is significant. It is the tie-break when several
mappers produce the same type, so the library is a priority list.

A module-level default library backs the ``mapper`` decorator and the
``register_mapper`` / ``list_mappers`` / ``clear_mappers`` helpers.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, overload

from .chain import Chain
from .invocable import Invocable
from .leafset import required_leaf_types
from .resolver import build_chain, find_chain
from .trace import Trace
from .types import DEFAULT_REGISTRY, TypeDescriptor, TypeRegistry


class MapperLibrary:
    """An ordered, append-only set of mappers sharing one type registry."""

    def __init__(self, registry: TypeRegistry | None = None, mappers: Iterable[Invocable] = ()):
        self.registry = DEFAULT_REGISTRY if registry is None else registry
        self._mappers: list[Invocable] = []
        for m in mappers:
            self.register(m)

    def register(self, invocable: Invocable) -> Invocable:
        """
        Append a mapper to the library.

        Registering the same invocable twice is a no-op.
        """
        if not any(m is invocable for m in self._mappers):
            self._mappers.append(invocable)
        return invocable

    @overload
    def mapper(self, func: Callable[..., Any]) -> Invocable: ...

    @overload
    def mapper(
        self,
        func: None = None,
        *,
        label: str = "",
        values: Iterable[Any] = (),
    ) -> Callable[[Callable[..., Any]], Invocable]: ...

    def mapper(self, func=None, *, label="", values=()):
        """
        Decorator registering a function as a mapper.

        Usable bare (``@lib.mapper``) or with options
        (``@lib.mapper(label="...", values=[...])``). The decorated name is
        bound to the resulting Invocable.
        """

        def decorate(fn: Callable[..., Any]) -> Invocable:
            invocable = Invocable.from_function(fn, self.registry, values=values, label=label)
            return self.register(invocable)

        if func is not None:
            return decorate(func)
        return decorate

    def invocable(self, func: Callable[..., Any], **kwargs: Any) -> Invocable:
        """Build an invocable for ``func`` without registering it (e.g. a target)."""
        return Invocable.from_function(func, self.registry, **kwargs)

    # -------------------------------------------------------------------------
    # Resolution shortcuts
    # -------------------------------------------------------------------------

    def chain(self, target: Invocable, *values: Any, trace: Trace | None = None) -> Chain:
        return build_chain(target, self._mappers, *values, registry=self.registry, trace=trace)

    def find(
        self,
        accept: Callable[[TypeDescriptor], bool],
        *values: Any,
        trace: Trace | None = None,
    ) -> Chain | None:
        return find_chain(accept, self._mappers, *values, registry=self.registry, trace=trace)

    def leaves(
        self,
        target: Invocable,
        can_supply: Callable[[TypeDescriptor], bool],
        trace: Trace | None = None,
    ) -> list[TypeDescriptor] | None:
        return required_leaf_types(target, self._mappers, can_supply, trace=trace)

    # -------------------------------------------------------------------------
    # Collection protocol
    # -------------------------------------------------------------------------

    def producers(self, descriptor: TypeDescriptor) -> list[Invocable]:
        """Mappers whose output key matches ``descriptor``, in library order."""
        return [m for m in self._mappers if m.out.key == descriptor.key]

    def clear(self) -> None:
        """Remove all mappers (for testing)."""
        self._mappers.clear()

    def __iter__(self) -> Iterator[Invocable]:
        return iter(list(self._mappers))

    def __len__(self) -> int:
        return len(self._mappers)

    def __contains__(self, invocable: object) -> bool:
        return any(m is invocable for m in self._mappers)


# Global library backing the module-level helpers.
DEFAULT_LIBRARY = MapperLibrary()


def mapper(func=None, *, label: str = "", values: Iterable[Any] = ()):
    """Register ``func`` with the default library. See MapperLibrary.mapper."""
    return DEFAULT_LIBRARY.mapper(func, label=label, values=values)


def register_mapper(invocable: Invocable) -> Invocable:
    """Register an invocable with the default library."""
    return DEFAULT_LIBRARY.register(invocable)


def list_mappers() -> list[Invocable]:
    """List mappers in the default library, in registration order."""
    return list(DEFAULT_LIBRARY)


def clear_mappers() -> None:
    """Clear the default library (for testing)."""
    DEFAULT_LIBRARY.clear()
