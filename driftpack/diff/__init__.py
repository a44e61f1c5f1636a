"""Comparison pipeline for DriftKit."""

from driftpack.diff.differ import DiffVersion, Differ
from driftpack.diff.masking import (
    MASK,
    MASK_AFTER_SUFFIX,
    MASK_BEFORE_SUFFIX,
    SECRET_GVK,
    mask_data_pair,
    mask_object,
)
from driftpack.diff.models import ComparisonReport, DiffRunResult, ObjectError
from driftpack.diff.printer import Printer
from driftpack.diff.program import (
    DEFAULT_DIFF_COMMAND,
    EXTERNAL_DIFF_ENV_VAR,
    DiffProgram,
    DiffProgramConfig,
)
from driftpack.diff.runner import compare_object, compare_objects
from driftpack.diff.staging import StagingDirectory

__all__ = [
    "MASK",
    "MASK_BEFORE_SUFFIX",
    "MASK_AFTER_SUFFIX",
    "SECRET_GVK",
    "mask_object",
    "mask_data_pair",
    "Printer",
    "StagingDirectory",
    "DiffVersion",
    "Differ",
    "DEFAULT_DIFF_COMMAND",
    "EXTERNAL_DIFF_ENV_VAR",
    "DiffProgram",
    "DiffProgramConfig",
    "DiffRunResult",
    "ObjectError",
    "ComparisonReport",
    "compare_object",
    "compare_objects",
]
