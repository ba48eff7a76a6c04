"""
Predicate-driven leaf-set search.

required_leaf_types() answers "which types must I be able to supply so a
chain for this target is guaranteed to exist later?" without concrete
values. It reasons about capability (``can_supply``) instead of a value
pool but follows the same cycle discipline as build_chain(): a producer is
never reused on its own depth-first path.

In practice libraries are small enough that this exhaustive-per-type
search stays cheap.
"""

from __future__ import annotations

from typing import Callable, Hashable, Iterable

from .index import MapperIndex, build_index
from .invocable import Invocable
from .trace import Trace, TraceKind
from .types import TypeDescriptor

LeafSet = dict[Hashable, TypeDescriptor]


def required_leaf_types(
    target: Invocable,
    library: Iterable[Invocable],
    can_supply: Callable[[TypeDescriptor], bool],
    *,
    trace: Trace | None = None,
) -> list[TypeDescriptor] | None:
    """
    Compute the types a caller must supply for ``target`` to be callable.

    Args:
        target: Invocable to satisfy
        library: Candidate mappers, tried in order
        can_supply: Returns True for types the caller can produce directly
        trace: Collector for search decisions

    Returns:
        Leaf types in the order they were first accepted, or None when
        every path needs a type nobody can supply.
    """
    trace = Trace(enabled=False) if trace is None else trace
    index = build_index(library, trace)

    leaves = _input_set(target, index, can_supply, set(), {}, trace)
    if leaves is None:
        return None

    result = list(leaves.values())
    trace.emit(TraceKind.LEAF_SET_FOUND, func=target, types=[t.name for t in result])
    return result


def _input_set(
    f: Invocable,
    index: MapperIndex,
    can_supply: Callable[[TypeDescriptor], bool],
    visited: set[Invocable],
    accepted: LeafSet,
    trace: Trace,
) -> LeafSet | None:
    pending: LeafSet = dict(accepted)
    missing: LeafSet = {}

    for arg in f.args:
        if arg.key in pending or arg.key in missing:
            continue
        if can_supply(arg):
            pending[arg.key] = arg
            trace.emit(TraceKind.LEAF_SUPPLIED, func=f, type=arg)
        else:
            missing[arg.key] = arg
            trace.emit(TraceKind.LEAF_MISSING, func=f, type=arg)

    if not missing:
        return pending

    for t in missing.values():
        for m in index.get(t.key, []):
            if m in visited:
                continue

            visited.add(m)
            try:
                result = _input_set(m, index, can_supply, visited, pending, trace)
            finally:
                visited.discard(m)

            if result is not None:
                pending = result
                break
        else:
            trace.emit(TraceKind.UNRESOLVABLE, func=f, type=t)
            return None

    return pending
