"""Nested-field access for structured resource values."""

from __future__ import annotations

from typing import Any

from driftpack.core.exceptions import TypeMismatchError


def extract_nested_map(
    obj: dict[str, Any] | None,
    *fields: str,
) -> tuple[dict[str, Any] | None, dict[str, Any] | None]:
    """Descend into nested maps along ``fields``.

    Returns ``(container, extracted)`` where ``container`` is the map holding
    the last segment. Both are the original references so callers may mutate
    them in place. An absent object, an empty path or a missing (or null)
    segment yields ``(None, None)``.
    """
    if obj is None or not fields:
        return None, None
    if not isinstance(obj, dict):
        raise TypeMismatchError(
            f"expected a map at the object root, got {type(obj).__name__}"
        )

    container: dict[str, Any] = obj
    for depth, field_name in enumerate(fields):
        value = container.get(field_name)
        if value is None:
            return None, None
        if not isinstance(value, dict):
            path = ".".join(fields[: depth + 1])
            raise TypeMismatchError(
                f".{path} accessor error: {value!r} is of the type "
                f"{type(value).__name__}, expected a map"
            )
        if depth == len(fields) - 1:
            return container, value
        container = value

    return None, None
