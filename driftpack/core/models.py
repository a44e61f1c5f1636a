"""Collaborator contract and value models for compared objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Protocol

Presence = Literal["both", "live_only", "merged_only", "absent"]


@dataclass(frozen=True, slots=True)
class GroupVersionKind:
    """Type identity of a resource."""

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> "GroupVersionKind":
        group, _, version = api_version.rpartition("/")
        return cls(group=group, version=version, kind=kind)

    def to_dict(self) -> dict[str, str]:
        return {
            "group": self.group,
            "version": self.version,
            "kind": self.kind,
        }

    def __str__(self) -> str:
        return f"{self.api_version}, Kind={self.kind}"


class ComparableObject(Protocol):
    """Capability interface for one compared item."""

    def name(self) -> str:
        """File-system safe name the object is staged under."""

    def group_version_kind(self) -> GroupVersionKind:
        """Type identity used to decide whether masking applies."""

    def live(self) -> dict[str, Any] | None:
        """Currently applied state, or None when the object does not exist yet."""

    def merged(self) -> dict[str, Any] | None:
        """State after applying the pending change, or None when it gets removed.

        May raise when producing the merged state requires a failing computation.
        """


@dataclass(slots=True)
class StaticObject:
    """Comparable object backed by fixed live/merged values."""

    object_name: str
    gvk: GroupVersionKind
    live_value: dict[str, Any] | None = None
    merged_value: dict[str, Any] | None = None
    merged_factory: Callable[[], dict[str, Any] | None] | None = field(
        default=None,
        repr=False,
    )

    def name(self) -> str:
        return self.object_name

    def group_version_kind(self) -> GroupVersionKind:
        return self.gvk

    def live(self) -> dict[str, Any] | None:
        return self.live_value

    def merged(self) -> dict[str, Any] | None:
        if self.merged_factory is not None:
            return self.merged_factory()
        return self.merged_value


@dataclass(slots=True)
class ObjectPair:
    """Live/merged values of one object after retrieval."""

    name: str
    live: dict[str, Any] | None
    merged: dict[str, Any] | None

    @property
    def presence(self) -> Presence:
        if self.live is not None and self.merged is not None:
            return "both"
        if self.live is not None:
            return "live_only"
        if self.merged is not None:
            return "merged_only"
        return "absent"
