from __future__ import annotations

from typing import Any, Callable

import pytest

from driftpack.core.models import GroupVersionKind, StaticObject

CONFIG_MAP = GroupVersionKind(group="", version="v1", kind="ConfigMap")

ObjectFactory = Callable[..., StaticObject]


def _make_object(
    name: str,
    *,
    live: dict[str, Any] | None = None,
    merged: dict[str, Any] | None = None,
    gvk: GroupVersionKind = CONFIG_MAP,
) -> StaticObject:
    return StaticObject(object_name=name, gvk=gvk, live_value=live, merged_value=merged)


@pytest.fixture
def make_object() -> ObjectFactory:
    return _make_object


@pytest.fixture(autouse=True)
def _isolate_external_diff_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DRIFTKIT_EXTERNAL_DIFF", raising=False)
