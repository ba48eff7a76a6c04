"""Output-type index over a mapper library."""

from __future__ import annotations

from collections import defaultdict
from typing import Hashable, Iterable

from .invocable import Invocable
from .trace import Trace, TraceKind

MapperIndex = dict[Hashable, list[Invocable]]


def build_index(library: Iterable[Invocable], trace: Trace | None = None) -> MapperIndex:
    """Group mappers by output key, keeping library order within each group."""
    trace = Trace(enabled=False) if trace is None else trace
    index: dict[Hashable, list[Invocable]] = defaultdict(list)
    for m in library:
        index[m.out.key].append(m)
        trace.emit(
            TraceKind.AVAILABLE_MAPPER,
            func=m,
            type=m.out,
            in_types=[a.name for a in m.args],
            out_key=m.out.key,
        )
    return dict(index)
