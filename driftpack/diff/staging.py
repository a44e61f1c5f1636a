"""Isolated temporary directories holding the files handed to the diff tool."""

from __future__ import annotations

import os
from pathlib import Path
import shutil
import tempfile
from typing import Any, TextIO

from loguru import logger

from driftpack.core.exceptions import StagingIOError

_ILLEGAL_NAMES = frozenset({"", ".", ".."})
_FORBIDDEN_CHARS = frozenset(
    char for char in ("/", "\x00", os.sep, os.altsep) if char
)


class StagingDirectory:
    """A uniquely named temporary directory that is removed exactly once."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._deleted = False

    @classmethod
    def create(cls, prefix: str, *, base_dir: str | Path | None = None) -> "StagingDirectory":
        """Create an empty directory whose base name starts with ``prefix``."""
        try:
            raw_path = tempfile.mkdtemp(
                prefix=prefix,
                dir=str(base_dir) if base_dir is not None else None,
            )
        except OSError as error:
            raise StagingIOError(
                f"cannot create staging directory with prefix {prefix!r}: {error}"
            ) from error
        logger.debug("created staging directory {}", raw_path)
        return cls(Path(raw_path))

    @property
    def name(self) -> str:
        return str(self.path)

    @property
    def deleted(self) -> bool:
        return self._deleted

    def new_file(self, name: str) -> TextIO:
        """Create or truncate a member file and return it open for writing."""
        if self._deleted:
            raise StagingIOError(f"staging directory {self.path} was already deleted")
        _validate_member_name(name)
        try:
            return open(self.path / name, "w", encoding="utf-8", newline="\n")
        except OSError as error:
            raise StagingIOError(
                f"cannot create {name!r} in staging directory {self.path}: {error}"
            ) from error

    def remove_file(self, name: str) -> None:
        """Remove a member file if it exists."""
        if self._deleted or not _is_legal_member_name(name):
            return
        try:
            (self.path / name).unlink(missing_ok=True)
        except OSError as error:
            raise StagingIOError(
                f"cannot remove {name!r} from staging directory {self.path}: {error}"
            ) from error

    def entries(self) -> list[str]:
        if self._deleted:
            return []
        try:
            return sorted(os.listdir(self.path))
        except OSError as error:
            raise StagingIOError(f"cannot list staging directory {self.path}: {error}") from error

    def delete(self) -> None:
        """Remove the directory recursively. Already-missing directories count as deleted."""
        if self._deleted:
            return
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            logger.debug("staging directory {} already removed", self.path)
        except OSError as error:
            raise StagingIOError(
                f"cannot delete staging directory {self.path}: {error}"
            ) from error
        else:
            logger.debug("deleted staging directory {}", self.path)
        self._deleted = True

    def __enter__(self) -> "StagingDirectory":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        self.delete()
        return False

    def __repr__(self) -> str:
        return f"StagingDirectory(path={str(self.path)!r}, deleted={self._deleted})"


def _is_legal_member_name(name: str) -> bool:
    return name not in _ILLEGAL_NAMES and not any(char in name for char in _FORBIDDEN_CHARS)


def _validate_member_name(name: str) -> None:
    if name in _ILLEGAL_NAMES:
        raise StagingIOError(f"illegal staged file name: {name!r}")
    if any(char in name for char in _FORBIDDEN_CHARS):
        raise StagingIOError(f"staged file name must not contain path separators: {name!r}")
