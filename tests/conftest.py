"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from mapchain.invocable import Invocable
from mapchain.types import TypeDescriptor, TypeRegistry


@pytest.fixture
def registry() -> TypeRegistry:
    """Fresh registry with builtin scalars registered."""
    return TypeRegistry()


@pytest.fixture
def int_t(registry: TypeRegistry) -> TypeDescriptor:
    return registry.descriptor(int)


@pytest.fixture
def str_t(registry: TypeRegistry) -> TypeDescriptor:
    return registry.descriptor(str)


@pytest.fixture
def float_t(registry: TypeRegistry) -> TypeDescriptor:
    return registry.descriptor(float)


@pytest.fixture
def make() -> Callable[..., Invocable]:
    """Factory for invocables: make("name", [args], out, func=None)."""

    def _make(
        name: str,
        args: list[TypeDescriptor],
        out: TypeDescriptor,
        func: Callable[..., Any] | None = None,
        values: tuple[Any, ...] = (),
    ) -> Invocable:
        return Invocable(args=tuple(args), out=out, func=func, bound_values=values, name=name)

    return _make


@pytest.fixture
def graph_file(tmp_path: Path) -> Path:
    """A small graph file: str -> int -> float, plus a render target."""
    path = tmp_path / "graph.toml"
    path.write_text(
        "\n".join(
            [
                "[[types]]",
                'key = "str"',
                'name = "String"',
                "",
                "[[types]]",
                'key = "int"',
                'name = "Int"',
                "",
                "[[types]]",
                'key = "float"',
                'name = "Float"',
                "",
                "[[types]]",
                'key = "blob"',
                'name = "Blob"',
                "",
                "[[mappers]]",
                'name = "parse"',
                'args = ["str"]',
                'out = "int"',
                "",
                "[[mappers]]",
                'name = "widen"',
                'args = ["int"]',
                'out = "float"',
                "",
                "[[targets]]",
                'name = "render"',
                'args = ["float", "str"]',
                'out = "void"',
                "",
                "[[targets]]",
                'name = "upload"',
                'args = ["blob"]',
                'out = "void"',
                "",
            ]
        ),
        encoding="utf-8",
    )
    return path
