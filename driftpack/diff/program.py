"""Invocation of the external line-diff command."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
import shlex
import subprocess
import sys
from typing import Mapping, TextIO

from loguru import logger

from driftpack.core.exceptions import DiffConfigError, ExecutionError
from driftpack.diff.models import EXIT_CHANGED, EXIT_IDENTICAL, DiffRunResult

EXTERNAL_DIFF_ENV_VAR = "DRIFTKIT_EXTERNAL_DIFF"
DEFAULT_DIFF_COMMAND: tuple[str, ...] = ("diff", "-u", "-N")
STABLE_LOCALE_ENV: Mapping[str, str] = {"LANG": "C", "LC_ALL": "C"}


@dataclass(frozen=True, slots=True)
class DiffProgramConfig:
    """Which diff command to run and how."""

    command: tuple[str, ...] = DEFAULT_DIFF_COMMAND
    environment: Mapping[str, str] = field(default_factory=lambda: dict(STABLE_LOCALE_ENV))
    timeout: float | None = None

    def __post_init__(self) -> None:
        if not self.command:
            raise DiffConfigError("diff command cannot be empty.")
        if self.timeout is not None and self.timeout <= 0:
            raise DiffConfigError("diff timeout must be positive.")

    @classmethod
    def from_command_line(
        cls,
        raw_command: str | None,
        *,
        timeout: float | None = None,
    ) -> "DiffProgramConfig":
        """Build a config from a shell-style command string; blank means the default."""
        if raw_command is None or not raw_command.strip():
            return cls(timeout=timeout)
        try:
            command = tuple(shlex.split(raw_command))
        except ValueError as error:
            raise DiffConfigError(f"invalid diff command {raw_command!r}: {error}") from error
        return cls(command=command, timeout=timeout)

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> "DiffProgramConfig":
        source = os.environ if environ is None else environ
        return cls.from_command_line(source.get(EXTERNAL_DIFF_ENV_VAR), timeout=timeout)

    def child_environment(self, base: Mapping[str, str] | None = None) -> dict[str, str]:
        env = dict(os.environ if base is None else base)
        env.update(self.environment)
        return env


class DiffProgram:
    """Runs the configured diff command against two paths and forwards its output."""

    def __init__(
        self,
        config: DiffProgramConfig | None = None,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.config = config or DiffProgramConfig()
        self._stdout = stdout
        self._stderr = stderr

    def run(self, from_path: str, to_path: str) -> DiffRunResult:
        """Run the diff. Exit status 1 means differences were found and is not an error.

        Streams backed by a file descriptor are handed to the child directly,
        so interactive tools work. Other streams receive the captured bytes
        after the child exits.
        """
        argv = [*self.config.command, from_path, to_path]
        command = tuple(argv)
        out = self._stdout if self._stdout is not None else sys.stdout
        err = self._stderr if self._stderr is not None else sys.stderr
        stdout_target = _child_target(out)
        stderr_target = _child_target(err)

        logger.debug("running external diff: {}", shlex.join(argv))
        try:
            completed = subprocess.run(
                argv,
                stdout=stdout_target,
                stderr=stderr_target,
                env=self.config.child_environment(),
                timeout=self.config.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            _forward(out, error.stdout)
            _forward(err, error.stderr)
            raise ExecutionError(
                f"diff command {argv[0]!r} timed out after {self.config.timeout}s",
                command=command,
            ) from error
        except OSError as error:
            raise ExecutionError(
                f"cannot run diff command {argv[0]!r}: {error}",
                command=command,
            ) from error

        _forward(out, completed.stdout)
        _forward(err, completed.stderr)
        logger.debug("external diff exited with {}", completed.returncode)

        if completed.returncode not in (EXIT_IDENTICAL, EXIT_CHANGED):
            raise ExecutionError(
                f"diff command {argv[0]!r} exited with status {completed.returncode}",
                command=command,
                exit_code=completed.returncode,
            )

        return DiffRunResult(
            command=command,
            exit_code=completed.returncode,
            from_path=from_path,
            to_path=to_path,
        )


def _child_target(stream: TextIO | None) -> int | None:
    """File descriptor the child should write to, or PIPE when it must be captured."""
    if stream is None:
        return None
    try:
        descriptor = stream.fileno()
    except (AttributeError, OSError, ValueError):
        return subprocess.PIPE
    stream.flush()
    return descriptor


def _forward(stream: TextIO | None, data: bytes | str | None) -> None:
    if stream is None or not data:
        return
    if isinstance(data, str):
        data = data.encode("utf-8")
    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        stream.flush()
        buffer.write(data)
        buffer.flush()
        return
    # Text-only sinks: decode without newline translation.
    stream.write(data.decode("utf-8", errors="replace"))
    stream.flush()
