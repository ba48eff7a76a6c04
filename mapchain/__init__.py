"""
mapchain: automatic value derivation through chains of typed mappers.

Given a target that needs an ordered set of typed inputs, a library of
mappers converting between types, and the values a caller already has,
build_chain() finds an ordered sequence of mappers that supplies every
input. required_leaf_types() answers which types a caller must be able to
supply for such a chain to exist.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .chain import Chain
from .config import GraphDef, Settings, load_graph, load_settings
from .errors import (
    ArgumentBindingError,
    ConfigError,
    MapChainError,
    NotExecutableError,
    TypeRegistrationError,
    UnknownTypeError,
    UnresolvableTypeError,
)
from .invocable import BoundCall, CallResult, Invocable
from .leafset import required_leaf_types
from .library import (
    DEFAULT_LIBRARY,
    MapperLibrary,
    clear_mappers,
    list_mappers,
    mapper,
    register_mapper,
)
from .resolver import build_chain, find_chain
from .trace import Trace, TraceEvent, TraceKind
from .types import DEFAULT_REGISTRY, VOID, Tagged, TypeDescriptor, TypeRegistry

__all__ = [
    "__version__",
    # Types
    "DEFAULT_REGISTRY",
    "Tagged",
    "TypeDescriptor",
    "TypeRegistry",
    "VOID",
    # Invocables
    "BoundCall",
    "CallResult",
    "Invocable",
    # Resolution
    "Chain",
    "build_chain",
    "find_chain",
    "required_leaf_types",
    # Library
    "DEFAULT_LIBRARY",
    "MapperLibrary",
    "clear_mappers",
    "list_mappers",
    "mapper",
    "register_mapper",
    # Tracing
    "Trace",
    "TraceEvent",
    "TraceKind",
    # Config
    "GraphDef",
    "Settings",
    "load_graph",
    "load_settings",
    # Errors
    "ArgumentBindingError",
    "ConfigError",
    "MapChainError",
    "NotExecutableError",
    "TypeRegistrationError",
    "UnknownTypeError",
    "UnresolvableTypeError",
]
