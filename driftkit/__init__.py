"""Stable public API surface for DriftKit.

This module is the supported import path for library users.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, TextIO

from driftpack.core import (
    ComparableObject,
    DriftError,
    ExecutionError,
    GroupVersionKind,
    RetrievalError,
    SerializationError,
    StagingIOError,
    StaticObject,
    TypeMismatchError,
)
from driftpack.diff import (
    ComparisonReport,
    DiffProgram,
    DiffProgramConfig,
    Differ,
    Printer,
    compare_objects,
    mask_object,
)
from driftpack.manifests import load_manifest_pair

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ComparableObject",
    "GroupVersionKind",
    "StaticObject",
    "ComparisonReport",
    "Differ",
    "DiffProgram",
    "DiffProgramConfig",
    "Printer",
    "DriftError",
    "StagingIOError",
    "SerializationError",
    "RetrievalError",
    "ExecutionError",
    "TypeMismatchError",
    "mask_object",
    "compare",
    "diff_manifests",
]


def compare(
    objects: Iterable[ComparableObject],
    *,
    diff_command: str | None = None,
    timeout: float | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> ComparisonReport:
    """Compare objects with the external diff tool and return the aggregated report.

    ``diff_command`` overrides the command from the environment; when omitted
    the ``DRIFTKIT_EXTERNAL_DIFF`` variable or ``diff -u -N`` is used.
    """
    if diff_command is None:
        config = DiffProgramConfig.from_environ(timeout=timeout)
    else:
        config = DiffProgramConfig.from_command_line(diff_command, timeout=timeout)
    program = DiffProgram(config, stdout=stdout, stderr=stderr)
    return compare_objects(objects, program=program)


def diff_manifests(
    live: str | Path,
    merged: str | Path,
    *,
    diff_command: str | None = None,
    timeout: float | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> ComparisonReport:
    """Compare two manifest files document by document."""
    return compare(
        load_manifest_pair(live, merged),
        diff_command=diff_command,
        timeout=timeout,
        stdout=stdout,
        stderr=stderr,
    )
