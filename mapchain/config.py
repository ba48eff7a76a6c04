"""
TOML configuration: resolver settings and declarative type-graph files.

Settings come from ``[tool.mapchain]`` in a pyproject.toml, or from the
root table of any other TOML file.

A graph file declares types and invocables by key only; its invocables
carry no callable and exist for resolution, not execution::

    [[types]]
    key = "int"
    name = "Int"

    [[mappers]]
    name = "parse"
    args = ["str"]
    out = "int"

    [[targets]]
    name = "render"
    args = ["int", "str"]
    out = "void"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .chain import DEFAULT_SEPARATOR
from .errors import ConfigError
from .invocable import Invocable
from .types import VOID, TypeDescriptor, TypeRegistry


@dataclass(frozen=True)
class Settings:
    separator: str = DEFAULT_SEPARATOR
    trace: bool = False


@dataclass(frozen=True)
class GraphDef:
    """Types and invocables declared in a graph file."""

    registry: TypeRegistry
    mappers: list[Invocable] = field(default_factory=list)
    targets: list[Invocable] = field(default_factory=list)

    def find(self, name: str) -> Invocable | None:
        """Look up an invocable by name, targets first."""
        for inv in (*self.targets, *self.mappers):
            if inv.name == name:
                return inv
        return None

    def type(self, key: str) -> TypeDescriptor:
        descriptor = VOID if key == VOID.key else self.registry.get(key)
        if descriptor is None:
            raise ConfigError(f"unknown type key {key!r}")
        return descriptor


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _read_toml(path: Path) -> dict[str, Any]:
    import tomllib

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e


def load_settings(path: Path | None) -> Settings:
    """
    Load resolver settings.

    Missing files (or ``None``) yield defaults.

    Raises:
        ConfigError: malformed TOML or wrongly typed values
    """
    if path is None or not path.exists():
        return Settings()

    data = _read_toml(path)
    if path.name == "pyproject.toml":
        data = _coerce_dict(_coerce_dict(data.get("tool")).get("mapchain"))

    separator = data.get("separator", DEFAULT_SEPARATOR)
    if not isinstance(separator, str):
        raise ConfigError("separator must be a string")

    trace = data.get("trace", False)
    if not isinstance(trace, bool):
        raise ConfigError("trace must be a boolean")

    return Settings(separator=separator, trace=trace)


def load_graph(path: Path) -> GraphDef:
    """
    Load a type-graph file.

    Types are declared in ``[[types]]``; ``args`` and ``out`` of each
    ``[[mappers]]`` / ``[[targets]]`` entry refer to declared keys, or to
    ``"void"`` for outputs.

    Raises:
        ConfigError: missing file, malformed TOML, unknown keys
    """
    if not path.exists():
        raise ConfigError(f"graph file not found: {path}")

    data = _read_toml(path)
    registry = TypeRegistry(builtins=False)

    for raw in data.get("types", []):
        if not isinstance(raw, dict):
            continue
        key = str(raw.get("key", "")).strip()
        if not key:
            raise ConfigError("type entry without key")
        name = raw.get("name")
        registry.declare(key, str(name) if isinstance(name, str) and name.strip() else None)

    graph = GraphDef(registry=registry)
    graph.mappers.extend(_load_invocables(data.get("mappers", []), graph, "mappers"))
    graph.targets.extend(_load_invocables(data.get("targets", []), graph, "targets"))
    return graph


def _load_invocables(entries: Any, graph: GraphDef, table: str) -> list[Invocable]:
    if not isinstance(entries, list):
        raise ConfigError(f"{table} must be an array of tables")

    invocables: list[Invocable] = []
    for raw in entries:
        if not isinstance(raw, dict):
            continue

        name = str(raw.get("name", "")).strip()
        if not name:
            raise ConfigError(f"{table} entry without name")

        args_raw = raw.get("args", [])
        if not isinstance(args_raw, list):
            raise ConfigError(f"{name}: args must be a list of type keys")

        out_raw = raw.get("out")
        if not isinstance(out_raw, str) or not out_raw.strip():
            raise ConfigError(f"{name}: out is required")

        try:
            args = tuple(graph.type(str(a).strip()) for a in args_raw)
            out = graph.type(out_raw.strip())
        except ConfigError as e:
            raise ConfigError(f"{name}: {e}") from e

        label = raw.get("label")
        invocables.append(
            Invocable(
                args=args,
                out=out,
                name=name,
                label=str(label) if isinstance(label, str) else "",
            )
        )
    return invocables
