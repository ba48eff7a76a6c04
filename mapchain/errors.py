"""
Error taxonomy for chain resolution.

Search failures are all-or-nothing: no partial chain is ever returned.
Errors raised by a mapper's own callable are not wrapped here; they
propagate verbatim out of Chain.call().
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import TypeDescriptor


class MapChainError(Exception):
    """Base class for all mapchain errors."""


class UnresolvableTypeError(MapChainError):
    """No producer along any explored path yields a required type."""

    def __init__(self, type_descriptor: "TypeDescriptor"):
        self.type_descriptor = type_descriptor
        super().__init__(f"unable to map to {type_descriptor.name}")


class TypeRegistrationError(MapChainError):
    """A type key is already bound to a different class."""


class UnknownTypeError(MapChainError):
    """A class has no descriptor in the registry."""


class ArgumentBindingError(MapChainError):
    """No value in the pool matches a positional argument."""

    def __init__(self, func: str, type_descriptor: "TypeDescriptor", index: int):
        self.func = func
        self.type_descriptor = type_descriptor
        self.index = index
        super().__init__(
            f"{func}: no value for argument {index} of type {type_descriptor.name}"
        )


class NotExecutableError(MapChainError):
    """The invocable has no callable attached (declared for resolution only)."""


class ConfigError(MapChainError):
    """Malformed settings or graph file."""
