"""
Structured trace events for chain search.

A Trace is created per resolution call and passed explicitly through the
recursive search; nothing is kept in process-wide state. Every recorded
event is also forwarded to this module's logger at DEBUG.

Tracing is best-effort: a failing sink is logged and ignored, it never
fails a resolution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)


class TraceKind(str, Enum):
    """Search decisions worth recording."""

    CHAIN_START = "chain_start"
    SATISFIED_BY_INPUTS = "satisfied_by_inputs"
    MISSING_ARGUMENT = "missing_argument"
    AVAILABLE_MAPPER = "available_mapper"
    MAPPER_SATISFIED = "mapper_satisfied"
    ALREADY_RESOLVED = "already_resolved"
    SKIP_PENDING = "skip_pending"
    CANDIDATE_FAILED = "candidate_failed"
    UNRESOLVABLE = "unresolvable"
    CHAIN_BUILT = "chain_built"
    LEAF_SUPPLIED = "leaf_supplied"
    LEAF_MISSING = "leaf_missing"
    LEAF_SET_FOUND = "leaf_set_found"


@dataclass(frozen=True)
class TraceEvent:
    """A single search decision."""

    kind: TraceKind
    func: str | None = None  # label of the invocable being resolved
    type: str | None = None  # display name of the type involved
    detail: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding empty fields."""
        d: dict[str, Any] = {"kind": self.kind.value}
        if self.func:
            d["func"] = self.func
        if self.type:
            d["type"] = self.type
        if self.detail:
            d["detail"] = dict(self.detail)
        return d

    def __str__(self) -> str:
        parts = [self.kind.value]
        if self.func:
            parts.append(f"func={self.func}")
        if self.type:
            parts.append(f"type={self.type}")
        parts.extend(f"{k}={v}" for k, v in self.detail.items())
        return " ".join(parts)


class Trace:
    """Collector for trace events of one resolution call."""

    def __init__(
        self,
        *,
        enabled: bool = True,
        sink: Callable[[TraceEvent], None] | None = None,
    ):
        self.enabled = enabled
        self.sink = sink
        self.events: list[TraceEvent] = []

    def emit(
        self,
        kind: TraceKind,
        func: object | None = None,
        type: object | None = None,
        **detail: Any,
    ) -> None:
        if not self.enabled:
            return

        event = TraceEvent(
            kind=kind,
            func=str(func) if func is not None else None,
            type=str(type) if type is not None else None,
            detail=detail,
        )
        self.events.append(event)
        logger.debug("%s", event)

        if self.sink is not None:
            try:
                self.sink(event)
            except Exception:
                logger.exception("trace sink failed on %s", event.kind.value)

    def of_kind(self, kind: TraceKind) -> list[TraceEvent]:
        return [e for e in self.events if e.kind == kind]

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self.events]

    def __iter__(self) -> Iterator[TraceEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)
