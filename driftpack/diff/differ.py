"""Paired on-disk snapshots of the two sides of a comparison."""

from __future__ import annotations

import itertools
import threading
from typing import Any, Callable

from loguru import logger

from driftpack.core.exceptions import StagingIOError
from driftpack.core.models import ComparableObject, ObjectPair
from driftpack.diff.masking import MaskedPair, mask_object
from driftpack.diff.printer import Printer
from driftpack.diff.staging import StagingDirectory

Masker = Callable[[ComparableObject], MaskedPair]


class _LabelRegistry:
    """Hands out unique labels: ``MERGED``, then ``MERGED-1``, ``MERGED-2``..."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, itertools.count[int]] = {}

    def claim(self, label: str) -> str:
        with self._lock:
            counter = self._counters.get(label)
            if counter is None:
                self._counters[label] = itertools.count(1)
                return label
            return f"{label}-{next(counter)}"


_LABELS = _LabelRegistry()


class DiffVersion:
    """One side of a comparison: a labelled staging directory."""

    def __init__(self, label: str, directory: StagingDirectory) -> None:
        self.label = label
        self.directory = directory

    @classmethod
    def create(cls, label: str) -> "DiffVersion":
        unique_label = _LABELS.claim(label)
        directory = StagingDirectory.create(f"{unique_label}-")
        return cls(unique_label, directory)

    @property
    def path(self) -> str:
        return self.directory.name

    def write_object(self, name: str, value: Any, printer: Printer) -> None:
        """Write ``value`` into a member file called ``name``; absent values write nothing."""
        if value is None:
            return
        rendered = printer.render(value)
        try:
            with self.directory.new_file(name) as handle:
                handle.write(rendered)
        except OSError as error:
            raise StagingIOError(f"cannot write {name!r} to {self.path}: {error}") from error

    def remove_object(self, name: str) -> None:
        self.directory.remove_file(name)

    def delete(self) -> None:
        self.directory.delete()


class Differ:
    """Owns the "from" and "to" snapshots and tears them down together."""

    def __init__(self, from_version: DiffVersion, to_version: DiffVersion) -> None:
        self.from_version = from_version
        self.to_version = to_version

    @classmethod
    def create(cls, from_label: str = "LIVE", to_label: str = "MERGED") -> "Differ":
        from_version = DiffVersion.create(from_label)
        try:
            to_version = DiffVersion.create(to_label)
        except StagingIOError:
            from_version.delete()
            raise
        return cls(from_version, to_version)

    @property
    def from_path(self) -> str:
        return self.from_version.path

    @property
    def to_path(self) -> str:
        return self.to_version.path

    def diff(
        self,
        obj: ComparableObject,
        *,
        printer: Printer | None = None,
        masker: Masker = mask_object,
    ) -> None:
        """Mask ``obj`` and write its live and merged sides under ``obj.name()``."""
        active_printer = printer or Printer()
        live, merged = masker(obj)
        pair = ObjectPair(name=obj.name(), live=live, merged=merged)
        logger.debug("staging {} ({})", pair.name, pair.presence)
        self.from_version.write_object(pair.name, pair.live, active_printer)
        self.to_version.write_object(pair.name, pair.merged, active_printer)

    def discard(self, name: str) -> None:
        """Remove whatever was staged for ``name`` on both sides."""
        self.from_version.remove_object(name)
        self.to_version.remove_object(name)

    def tear_down(self) -> None:
        """Delete both staging directories, attempting both before raising."""
        first_error: StagingIOError | None = None
        for version in (self.from_version, self.to_version):
            try:
                version.delete()
            except StagingIOError as error:
                logger.warning("tear down failed for {}: {}", version.label, error)
                if first_error is None:
                    first_error = error
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "Differ":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        try:
            self.tear_down()
        except StagingIOError:
            if exc_type is None:
                raise
        return False
