"""
Type identities for chain resolution.

Every logical type is assigned a descriptor explicitly through a
TypeRegistry; nothing is inferred from runtime introspection beyond a
lookup of the value's class in the registry. Values whose logical type
differs from their Python class (several semantic types backed by
``str``, for instance) are wrapped in Tagged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable

from .errors import TypeRegistrationError, UnknownTypeError


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Canonical identity plus display label for a value's type.

    Equality and hashing use ``key`` only; two descriptors with equal
    keys are interchangeable even if their names differ.
    """

    key: Hashable
    name: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", str(self.key))

    def __str__(self) -> str:
        return self.name


# Output type of operations that produce no value.
VOID = TypeDescriptor("void", "void")


@dataclass(frozen=True)
class Tagged:
    """A value carrying its own descriptor."""

    descriptor: TypeDescriptor
    value: Any


def unwrap(value: Any) -> Any:
    """Strip a Tagged wrapper, if any."""
    return value.value if isinstance(value, Tagged) else value


class TypeRegistry:
    """
    Explicit class -> descriptor registry.

    Builtin scalar classes are registered under their bare names
    ("int", "str", ...) unless ``builtins=False``. Other classes default
    to their dotted module path as key.
    """

    BUILTINS: tuple[type, ...] = (bool, int, float, complex, str, bytes)

    def __init__(self, *, builtins: bool = True):
        self._by_class: dict[type, TypeDescriptor] = {}
        self._by_key: dict[Hashable, TypeDescriptor] = {}
        self._class_for_key: dict[Hashable, type] = {}
        if builtins:
            for cls in self.BUILTINS:
                self.register(cls, key=cls.__name__)

    def register(
        self,
        cls: type,
        key: Hashable | None = None,
        name: str | None = None,
    ) -> TypeDescriptor:
        """
        Assign a descriptor to ``cls``.

        Registering the same class again returns its existing descriptor.
        A key that was only declared (no class yet) is bound to ``cls``.

        Raises:
            TypeRegistrationError: ``cls`` is registered under another key,
                or ``key`` already belongs to another class.
        """
        existing = self._by_class.get(cls)
        if existing is not None:
            if key is not None and key != existing.key:
                raise TypeRegistrationError(
                    f"{cls.__qualname__} already registered as {existing.key!r}"
                )
            return existing

        if key is None:
            key = f"{cls.__module__}.{cls.__qualname__}"

        owner = self._class_for_key.get(key)
        if owner is not None and owner is not cls:
            raise TypeRegistrationError(
                f"type key {key!r} already registered for {owner.__qualname__}"
            )

        descriptor = self._by_key.get(key)
        if descriptor is None:
            descriptor = TypeDescriptor(key, name or cls.__name__)
            self._by_key[key] = descriptor

        self._by_class[cls] = descriptor
        self._class_for_key[key] = cls
        return descriptor

    def declare(self, key: Hashable, name: str | None = None) -> TypeDescriptor:
        """Get or create a descriptor with no backing class."""
        descriptor = self._by_key.get(key)
        if descriptor is None:
            descriptor = TypeDescriptor(key, name or str(key))
            self._by_key[key] = descriptor
        return descriptor

    def get(self, key: Hashable) -> TypeDescriptor | None:
        return self._by_key.get(key)

    def descriptor(self, cls: type) -> TypeDescriptor:
        """
        Descriptor for ``cls`` or its nearest registered base class.

        Raises:
            UnknownTypeError: nothing in the MRO is registered
        """
        for base in cls.__mro__:
            descriptor = self._by_class.get(base)
            if descriptor is not None:
                return descriptor
        raise UnknownTypeError(f"no type registered for {cls.__qualname__}")

    def descriptor_of(self, value: Any) -> TypeDescriptor:
        if isinstance(value, Tagged):
            return value.descriptor
        return self.descriptor(type(value))

    def keys(self) -> list[Hashable]:
        return list(self._by_key.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)


# Shared registry used when callers do not pass one explicitly.
DEFAULT_REGISTRY = TypeRegistry()
