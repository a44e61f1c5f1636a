"""Exception taxonomy for DriftKit."""

from __future__ import annotations


class DriftError(Exception):
    """Base class for DriftKit errors."""


class StagingIOError(DriftError):
    """Filesystem failure while creating, writing or deleting staged state."""


class SerializationError(DriftError):
    """A structured value contains something the printer cannot render."""


class RetrievalError(DriftError):
    """The collaborator failed to produce the merged value of an object."""


class ExecutionError(DriftError):
    """The external diff command failed to start or returned an unexpected status."""

    def __init__(
        self,
        message: str,
        *,
        command: tuple[str, ...] = (),
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code


class TypeMismatchError(DriftError):
    """A nested field lookup reached a non-map value where a map was expected."""


class DiffConfigError(DriftError):
    """Invalid external diff configuration."""


class ManifestError(DriftError):
    """A manifest file or document could not be turned into a comparable object."""
