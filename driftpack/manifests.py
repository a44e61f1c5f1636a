"""Manifest files as comparable objects for the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

import yaml

from driftpack.core.exceptions import ManifestError
from driftpack.core.models import GroupVersionKind, StaticObject


def load_manifests(path: str | Path) -> list[dict[str, Any]]:
    """Read every document of a YAML (or JSON) manifest file.

    Empty documents are skipped and ``kind: List`` documents are expanded
    into their items.
    """
    manifest_path = Path(path)
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except OSError as error:
        raise ManifestError(f"cannot read manifest file {manifest_path}: {error}") from error

    try:
        raw_documents = list(yaml.safe_load_all(text))
    except yaml.YAMLError as error:
        raise ManifestError(f"invalid YAML in {manifest_path}: {error}") from error

    documents: list[dict[str, Any]] = []
    for index, raw in enumerate(raw_documents):
        if raw is None:
            continue
        if not isinstance(raw, dict):
            raise ManifestError(
                f"document {index} in {manifest_path} must be a mapping, "
                f"got {type(raw).__name__}"
            )
        documents.extend(_expand_list(raw, source=f"{manifest_path}#{index}"))
    return documents


def group_version_kind_of(document: dict[str, Any]) -> GroupVersionKind:
    api_version = document.get("apiVersion")
    kind = document.get("kind")
    if not isinstance(api_version, str) or not api_version:
        raise ManifestError("manifest document is missing a string 'apiVersion'")
    if not isinstance(kind, str) or not kind:
        raise ManifestError("manifest document is missing a string 'kind'")
    return GroupVersionKind.from_api_version(api_version, kind)


def object_file_name(document: dict[str, Any]) -> str:
    """Staged file name: ``[group.]version.kind.namespace.name``."""
    gvk = group_version_kind_of(document)
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        raise ManifestError(f"{gvk.kind} document is missing 'metadata'")
    name = metadata.get("name")
    if not isinstance(name, str) or not name:
        raise ManifestError(f"{gvk.kind} document is missing 'metadata.name'")
    namespace = metadata.get("namespace") or ""
    if not isinstance(namespace, str):
        raise ManifestError(f"{gvk.kind}/{name} has a non-string 'metadata.namespace'")
    if "/" in name or "/" in namespace:
        raise ManifestError(f"{gvk.kind}/{name} name and namespace must not contain '/'")

    group = f"{gvk.group}." if gvk.group else ""
    return f"{group}{gvk.version}.{gvk.kind}.{namespace}.{name}"


def pair_manifests(
    live_documents: Iterable[dict[str, Any]],
    merged_documents: Iterable[dict[str, Any]],
) -> list[StaticObject]:
    """Match live and merged documents by staged name, sorted by that name."""
    live_by_name = _index_documents(live_documents, side="live")
    merged_by_name = _index_documents(merged_documents, side="merged")

    objects: list[StaticObject] = []
    for name in sorted(set(live_by_name) | set(merged_by_name)):
        live = live_by_name.get(name)
        merged = merged_by_name.get(name)
        reference = merged if merged is not None else live_by_name[name]
        objects.append(
            StaticObject(
                object_name=name,
                gvk=group_version_kind_of(reference),
                live_value=live,
                merged_value=merged,
            )
        )
    return objects


def load_manifest_pair(live_path: str | Path, merged_path: str | Path) -> list[StaticObject]:
    return pair_manifests(load_manifests(live_path), load_manifests(merged_path))


def _index_documents(
    documents: Iterable[dict[str, Any]],
    *,
    side: str,
) -> dict[str, dict[str, Any]]:
    indexed: dict[str, dict[str, Any]] = {}
    for document in documents:
        name = object_file_name(document)
        if name in indexed:
            raise ManifestError(f"duplicate {side} object {name}")
        indexed[name] = document
    return indexed


def _expand_list(document: dict[str, Any], *, source: str) -> list[dict[str, Any]]:
    kind = document.get("kind")
    if not isinstance(kind, str) or not kind.endswith("List") or "items" not in document:
        return [document]
    items = document.get("items") or []
    if not isinstance(items, list):
        raise ManifestError(f"'items' of {source} must be a list")
    expanded: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            raise ManifestError(f"list item in {source} must be a mapping")
        expanded.append(item)
    return expanded
