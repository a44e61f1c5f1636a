"""Redaction of secret payloads before objects are written for diffing."""

from __future__ import annotations

import copy
from typing import Any

from driftpack.core.exceptions import RetrievalError
from driftpack.core.fields import extract_nested_map
from driftpack.core.models import ComparableObject, GroupVersionKind

MASK = "***"
MASK_BEFORE_SUFFIX = " (before)"
MASK_AFTER_SUFFIX = " (after)"

SECRET_GVK = GroupVersionKind(group="", version="v1", kind="Secret")

MaskedPair = tuple[dict[str, Any] | None, dict[str, Any] | None]


def mask_object(obj: ComparableObject, *, mask: str = MASK) -> MaskedPair:
    """Return deep copies of the live and merged values with secret data masked.

    Only v1 Secrets are masked, and only the keys of their ``data`` map.
    Keys whose values differ between the two sides keep a visible change
    marker so the rendered diff still reports them.
    """
    live = copy.deepcopy(obj.live())
    merged = copy.deepcopy(_retrieve_merged(obj))

    if obj.group_version_kind() != SECRET_GVK:
        return live, merged

    _, live_data = extract_nested_map(live, "data")
    _, merged_data = extract_nested_map(merged, "data")
    mask_data_pair(live_data, merged_data, mask=mask)
    return live, merged


def mask_data_pair(
    live_data: dict[str, Any] | None,
    merged_data: dict[str, Any] | None,
    *,
    mask: str = MASK,
) -> None:
    """Mask two ``data`` maps in place."""
    live_data = live_data if live_data is not None else {}
    merged_data = merged_data if merged_data is not None else {}

    for key in live_data:
        if key in merged_data and live_data[key] != merged_data[key]:
            live_data[key] = mask + MASK_BEFORE_SUFFIX
            merged_data[key] = mask + MASK_AFTER_SUFFIX
            continue
        live_data[key] = mask
        if key in merged_data:
            merged_data[key] = mask

    for key in merged_data:
        if key not in live_data:
            merged_data[key] = mask


def _retrieve_merged(obj: ComparableObject) -> dict[str, Any] | None:
    try:
        return obj.merged()
    except RetrievalError:
        raise
    except Exception as error:
        raise RetrievalError(
            f"cannot compute merged state of {obj.name()}: {error}"
        ) from error
