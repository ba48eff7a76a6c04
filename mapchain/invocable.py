"""
Invocable operations: typed inputs, one typed output, an optional callable.

An invocable is used in two phases:
1. Resolution: only ``args``, ``out`` and ``missing_args()`` matter.
2. Execution: ``prepare()`` binds concrete values to positional args and
   the returned BoundCall runs the callable.

Invocables compare by identity. Two invocables producing the same type
are distinct entities and may both sit in one library.
"""

from __future__ import annotations

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterable

from .errors import ArgumentBindingError, NotExecutableError, UnknownTypeError
from .types import DEFAULT_REGISTRY, VOID, TypeDescriptor, TypeRegistry, unwrap

logger = logging.getLogger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class CallResult:
    """Outcome of executing a bound invocable."""

    value: Any
    present: bool  # False for VOID outputs; the value is not added to any pool


@dataclass(frozen=True)
class BoundCall:
    """An invocable with its positional arguments resolved."""

    invocable: "Invocable"
    arguments: tuple[Any, ...]

    def call(self) -> CallResult:
        func = self.invocable.func
        if func is None:
            raise NotExecutableError(f"{self.invocable} has no callable")
        value = func(*self.arguments)
        present = self.invocable.out != VOID
        return CallResult(value=value if present else None, present=present)


@dataclass(frozen=True, eq=False)
class Invocable:
    """A registered operation."""

    args: tuple[TypeDescriptor, ...]
    out: TypeDescriptor
    func: Callable[..., Any] | None = None
    bound_values: tuple[Any, ...] = ()
    name: str = ""
    label: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "bound_values", tuple(self.bound_values))
        if not self.name:
            object.__setattr__(self, "name", getattr(self.func, "__name__", "anonymous"))
        if not self.label:
            arg_names = ", ".join(a.name for a in self.args)
            object.__setattr__(self, "label", f"{self.name}({arg_names}) -> {self.out.name}")

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return f"<Invocable {self.label}>"

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def missing_args(
        self,
        values: Iterable[Any],
        registry: TypeRegistry | None = None,
    ) -> dict[Hashable, TypeDescriptor]:
        """
        Args not matched by key against any value's type.

        The result is ordered by first positional occurrence; args sharing
        a key collapse into one entry. The invocable's own bound values
        count as available.
        """
        registry = DEFAULT_REGISTRY if registry is None else registry
        have = _value_keys([*values, *self.bound_values], registry)
        missing: dict[Hashable, TypeDescriptor] = {}
        for arg in self.args:
            if arg.key not in have and arg.key not in missing:
                missing[arg.key] = arg
        return missing

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def prepare(self, *values: Any, registry: TypeRegistry | None = None) -> BoundCall:
        """
        Bind each positional arg to the first matching value.

        Values are scanned in the given order, then this invocable's bound
        values, so a supplied value of the same type takes precedence over
        a bound one. Tagged wrappers are stripped before binding.

        Raises:
            ArgumentBindingError: some arg has no matching value
        """
        registry = DEFAULT_REGISTRY if registry is None else registry
        pool = [*values, *self.bound_values]
        keyed: list[tuple[Hashable, Any]] = []
        for value in pool:
            try:
                keyed.append((registry.descriptor_of(value).key, value))
            except UnknownTypeError:
                logger.debug("ignoring value of unregistered type %s", type(value).__qualname__)

        arguments = []
        for index, arg in enumerate(self.args):
            for key, value in keyed:
                if key == arg.key:
                    arguments.append(unwrap(value))
                    break
            else:
                raise ArgumentBindingError(self.label, arg, index)

        return BoundCall(invocable=self, arguments=tuple(arguments))

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_function(
        cls,
        func: Callable[..., Any],
        registry: TypeRegistry | None = None,
        *,
        values: Iterable[Any] = (),
        label: str = "",
    ) -> "Invocable":
        """
        Build an invocable from a function's annotations.

        Each positional parameter must be annotated with a registered class
        or ``Annotated[..., TypeDescriptor]``. A ``None`` return annotation
        maps to VOID.
        """
        registry = DEFAULT_REGISTRY if registry is None else registry
        hints = typing.get_type_hints(func, include_extras=True)
        signature = inspect.signature(func)

        args = []
        for param in signature.parameters.values():
            if param.kind not in _POSITIONAL:
                continue
            if param.name not in hints:
                raise UnknownTypeError(f"{func.__qualname__}: parameter {param.name!r} is not annotated")
            args.append(_annotation_descriptor(hints[param.name], registry))

        if "return" not in hints:
            raise UnknownTypeError(f"{func.__qualname__}: missing return annotation")
        out = _annotation_descriptor(hints["return"], registry)

        return cls(
            args=tuple(args),
            out=out,
            func=func,
            bound_values=tuple(values),
            name=func.__name__,
            label=label,
        )


def _value_keys(values: Iterable[Any], registry: TypeRegistry) -> set[Hashable]:
    keys: set[Hashable] = set()
    for value in values:
        try:
            keys.add(registry.descriptor_of(value).key)
        except UnknownTypeError:
            logger.debug("ignoring value of unregistered type %s", type(value).__qualname__)
    return keys


def _annotation_descriptor(annotation: Any, registry: TypeRegistry) -> TypeDescriptor:
    if annotation is None or annotation is type(None):
        return VOID
    if typing.get_origin(annotation) is typing.Annotated:
        for meta in annotation.__metadata__:
            if isinstance(meta, TypeDescriptor):
                return meta
        annotation = typing.get_args(annotation)[0]
    if isinstance(annotation, type):
        return registry.descriptor(annotation)
    raise UnknownTypeError(f"unsupported annotation {annotation!r}")
