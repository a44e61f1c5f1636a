"""Result models for external diff runs and whole comparisons."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

DiffRunStatus = Literal["identical", "changed"]
ComparisonStatus = Literal["identical", "changed", "error"]

EXIT_IDENTICAL = 0
EXIT_CHANGED = 1
EXIT_ERROR = 2


@dataclass(slots=True)
class DiffRunResult:
    """Outcome of one external diff invocation that exited normally."""

    command: tuple[str, ...]
    exit_code: int
    from_path: str
    to_path: str

    @property
    def status(self) -> DiffRunStatus:
        return "identical" if self.exit_code == EXIT_IDENTICAL else "changed"

    @property
    def identical(self) -> bool:
        return self.status == "identical"

    def to_dict(self) -> dict[str, Any]:
        # Staging directories are gone once the run finishes; leave them out.
        return {
            "command": list(self.command[:-2]),
            "exit_code": self.exit_code,
            "status": self.status,
        }


@dataclass(slots=True)
class ObjectError:
    """A per-object failure collected during a comparison run."""

    name: str
    error_type: str
    message: str

    @classmethod
    def from_exception(cls, name: str, error: BaseException) -> "ObjectError":
        return cls(name=name, error_type=error.__class__.__name__, message=str(error))

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "error_type": self.error_type,
            "message": self.message,
        }


@dataclass(slots=True)
class ComparisonReport:
    """Aggregated result of comparing a set of objects."""

    objects: list[str] = field(default_factory=list)
    object_errors: list[ObjectError] = field(default_factory=list)
    run_result: DiffRunResult | None = None
    run_error: ObjectError | None = None

    @property
    def status(self) -> ComparisonStatus:
        if self.object_errors or self.run_error is not None:
            return "error"
        if self.run_result is not None and not self.run_result.identical:
            return "changed"
        return "identical"

    @property
    def exit_code(self) -> int:
        return {
            "identical": EXIT_IDENTICAL,
            "changed": EXIT_CHANGED,
            "error": EXIT_ERROR,
        }[self.status]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "exit_code": self.exit_code,
            "objects": list(self.objects),
            "object_errors": [error.to_dict() for error in self.object_errors],
            "run_result": self.run_result.to_dict() if self.run_result is not None else None,
            "run_error": self.run_error.to_dict() if self.run_error is not None else None,
        }
