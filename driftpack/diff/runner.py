"""End-to-end comparison runs: stage every object, run the diff once, clean up."""

from __future__ import annotations

from typing import Iterable

from loguru import logger

from driftpack.core.exceptions import DriftError, StagingIOError
from driftpack.core.models import ComparableObject
from driftpack.diff.differ import Differ, Masker
from driftpack.diff.masking import mask_object
from driftpack.diff.models import ComparisonReport, ObjectError
from driftpack.diff.printer import Printer
from driftpack.diff.program import DiffProgram


def compare_objects(
    objects: Iterable[ComparableObject],
    *,
    program: DiffProgram | None = None,
    printer: Printer | None = None,
    masker: Masker = mask_object,
    from_label: str = "LIVE",
    to_label: str = "MERGED",
) -> ComparisonReport:
    """Stage all objects into one pair of directories and diff them in a single run.

    Per-object failures are collected in the report rather than aborting the run.
    The staging directories are always removed before returning.
    """
    active_program = program or DiffProgram()
    active_printer = printer or Printer()
    report = ComparisonReport()

    staged_cleanly = True
    with Differ.create(from_label, to_label) as differ:
        for obj in objects:
            name = obj.name()
            try:
                differ.diff(obj, printer=active_printer, masker=masker)
            except DriftError as error:
                logger.debug("staging {} failed: {}", name, error)
                report.object_errors.append(ObjectError.from_exception(name, error))
                staged_cleanly = _discard(differ, name, report) and staged_cleanly
                continue
            report.objects.append(name)

        # Never diff a tree that still holds a half-staged object.
        if report.objects and staged_cleanly:
            _run_program(active_program, differ, report)

    return report


def compare_object(
    obj: ComparableObject,
    *,
    program: DiffProgram | None = None,
    printer: Printer | None = None,
    masker: Masker = mask_object,
) -> ComparisonReport:
    """Compare a single object with its own staging directories.

    Each call owns its Differ end to end, so calls may run on separate threads.
    """
    return compare_objects(
        [obj],
        program=program,
        printer=printer,
        masker=masker,
    )


def _discard(differ: Differ, name: str, report: ComparisonReport) -> bool:
    try:
        differ.discard(name)
    except StagingIOError as error:
        report.object_errors.append(ObjectError.from_exception(name, error))
        return False
    return True


def _run_program(program: DiffProgram, differ: Differ, report: ComparisonReport) -> None:
    try:
        report.run_result = program.run(differ.from_path, differ.to_path)
    except DriftError as error:
        report.run_error = ObjectError.from_exception("<diff>", error)
