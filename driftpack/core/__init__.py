"""Core models and primitives for DriftKit."""

from driftpack.core.canonical import canonicalize
from driftpack.core.exceptions import (
    DiffConfigError,
    DriftError,
    ExecutionError,
    ManifestError,
    RetrievalError,
    SerializationError,
    StagingIOError,
    TypeMismatchError,
)
from driftpack.core.fields import extract_nested_map
from driftpack.core.models import (
    ComparableObject,
    GroupVersionKind,
    ObjectPair,
    Presence,
    StaticObject,
)

__all__ = [
    "ComparableObject",
    "GroupVersionKind",
    "ObjectPair",
    "Presence",
    "StaticObject",
    "canonicalize",
    "extract_nested_map",
    "DriftError",
    "StagingIOError",
    "SerializationError",
    "RetrievalError",
    "ExecutionError",
    "TypeMismatchError",
    "DiffConfigError",
    "ManifestError",
]
