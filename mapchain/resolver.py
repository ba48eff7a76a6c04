"""
Value-driven chain search.

build_chain() finds an ordered list of mappers whose sequential execution
supplies every argument of a target invocable, given the values the
caller already has. find_chain() picks the target itself from a library
by output type.

The search is first-fit with limited backtracking: when a mapper fails to
resolve, its parent tries the next producer of the same type, but a type
that was already satisfied is never revisited to rescue a later sibling.
Resolvability depends only on type keys and on which producers are
already committed; the value pool is never simulated during search.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from .chain import DEFAULT_SEPARATOR, Chain
from .errors import UnknownTypeError, UnresolvableTypeError
from .index import MapperIndex, build_index
from .invocable import Invocable
from .trace import Trace, TraceKind
from .types import DEFAULT_REGISTRY, TypeDescriptor, TypeRegistry


class _ChainSearch:
    """State shared by one build_chain() call."""

    def __init__(
        self,
        values: list[Any],
        index: MapperIndex,
        registry: TypeRegistry,
        trace: Trace,
    ):
        self.values = values
        self.index = index
        self.registry = registry
        self.trace = trace

    def resolve(
        self,
        f: Invocable,
        chain: list[Invocable],
        resolved: set[Invocable],
        pending: set[Invocable],
    ) -> None:
        """
        Append ``f`` and everything it needs to ``chain``.

        Raises UnresolvableTypeError if some missing arg of ``f`` has no
        producer that resolves. On failure ``chain`` and ``resolved`` may
        hold partial additions; the caller rolls them back.
        """
        # Always against the caller's values, never chain outputs.
        missing = f.missing_args(self.values, self.registry)
        if not missing:
            chain.append(f)
            resolved.add(f)
            return

        pending.add(f)
        try:
            for t in missing.values():
                self._satisfy(f, t, chain, resolved, pending)
        finally:
            pending.discard(f)

        chain.append(f)
        resolved.add(f)

    def _satisfy(
        self,
        f: Invocable,
        t: TypeDescriptor,
        chain: list[Invocable],
        resolved: set[Invocable],
        pending: set[Invocable],
    ) -> None:
        candidates = self.index.get(t.key, [])
        if not candidates:
            self.trace.emit(TraceKind.UNRESOLVABLE, func=f, type=t, reason="no producers")
            raise UnresolvableTypeError(t)

        for m in candidates:
            if m in resolved:
                self.trace.emit(TraceKind.ALREADY_RESOLVED, func=m, type=t)
                return

        last_error: UnresolvableTypeError | None = None
        for m in candidates:
            if m in pending:
                self.trace.emit(TraceKind.SKIP_PENDING, func=m, type=t)
                continue

            mark = len(chain)
            try:
                self.resolve(m, chain, resolved, pending)
            except UnresolvableTypeError as e:
                for added in chain[mark:]:
                    resolved.discard(added)
                del chain[mark:]
                self.trace.emit(TraceKind.CANDIDATE_FAILED, func=m, type=t, error=str(e))
                last_error = e
                continue

            self.trace.emit(TraceKind.MAPPER_SATISFIED, func=m, type=t)
            return

        self.trace.emit(TraceKind.UNRESOLVABLE, func=f, type=t, reason="no producer resolved")
        raise UnresolvableTypeError(t) from last_error


def build_chain(
    target: Invocable,
    library: Iterable[Invocable],
    *values: Any,
    registry: TypeRegistry | None = None,
    trace: Trace | None = None,
    separator: str = DEFAULT_SEPARATOR,
) -> Chain:
    """
    Build a chain that ends in ``target`` and satisfies all its args.

    Args:
        target: Invocable whose inputs must be satisfied
        library: Candidate mappers; order is the tie-break between
            producers of the same type
        *values: Values the caller already has
        registry: Type registry used to derive value types
        trace: Collector for search decisions (disabled when omitted)
        separator: Separator for the chain's string form

    Returns:
        Chain whose last invocable is ``target``

    Raises:
        UnresolvableTypeError: some required type cannot be produced
    """
    registry = DEFAULT_REGISTRY if registry is None else registry
    trace = Trace(enabled=False) if trace is None else trace

    pool = [*values, *target.bound_values]
    if trace.enabled:
        value_types = sorted(_type_name(v, registry) for v in pool)
        trace.emit(TraceKind.CHAIN_START, func=target, values=value_types)

    missing = target.missing_args(pool, registry)
    if not missing:
        trace.emit(TraceKind.SATISFIED_BY_INPUTS, func=target)
        return Chain([target], pool, registry=registry, separator=separator)

    for t in missing.values():
        trace.emit(TraceKind.MISSING_ARGUMENT, func=target, type=t)

    index = build_index(library, trace)
    search = _ChainSearch(pool, index, registry, trace)
    funcs: list[Invocable] = []
    search.resolve(target, funcs, set(), set())

    chain = Chain(funcs, pool, registry=registry, separator=separator)
    trace.emit(TraceKind.CHAIN_BUILT, func=target, chain=str(chain))
    return chain


def find_chain(
    accept: Callable[[TypeDescriptor], bool],
    library: Iterable[Invocable],
    *values: Any,
    registry: TypeRegistry | None = None,
    trace: Trace | None = None,
    separator: str = DEFAULT_SEPARATOR,
) -> Chain | None:
    """
    Return the first chain, in library order, whose output passes ``accept``.

    Every library entry with an accepted output is tried as a target in
    turn. Returns None if none of them resolves.
    """
    mappers = list(library)
    for m in mappers:
        if not accept(m.out):
            continue
        try:
            return build_chain(
                m,
                mappers,
                *values,
                registry=registry,
                trace=trace,
                separator=separator,
            )
        except UnresolvableTypeError:
            continue
    return None


def _type_name(value: Any, registry: TypeRegistry) -> str:
    try:
        return registry.descriptor_of(value).name
    except UnknownTypeError:
        return type(value).__qualname__
