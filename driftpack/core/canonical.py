"""Deterministic canonicalization of structured resource values."""

from __future__ import annotations

import math
from typing import Any

from driftpack.core.exceptions import SerializationError


def canonicalize(value: Any) -> Any:
    """Normalize a structured value to sorted plain dicts, lists and scalars.

    Raises SerializationError for anything that has no stable textual form.
    """
    return _canonicalize(value, path=())


def _canonicalize(value: Any, *, path: tuple[str, ...]) -> Any:
    if isinstance(value, dict):
        normalized: dict[str, Any] = {}
        for key in value.keys():
            if not isinstance(key, str):
                raise SerializationError(
                    f"unsupported map key {key!r} at {_render_path(path)}: "
                    "keys must be strings"
                )
        for key in sorted(value.keys()):
            normalized[key] = _canonicalize(value[key], path=path + (key,))
        return normalized

    if isinstance(value, (list, tuple)):
        return [
            _canonicalize(item, path=path + (f"[{index}]",))
            for index, item in enumerate(value)
        ]

    if isinstance(value, (str, bool)) or value is None:
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise SerializationError(
                f"NaN and infinity are not supported (at {_render_path(path)})"
            )
        return value

    raise SerializationError(
        f"unsupported value of type {type(value).__name__} at {_render_path(path)}"
    )


def _render_path(path: tuple[str, ...]) -> str:
    if not path:
        return "<root>"
    rendered = ""
    for segment in path:
        if segment.startswith("["):
            rendered += segment
        else:
            rendered += f".{segment}"
    return rendered
