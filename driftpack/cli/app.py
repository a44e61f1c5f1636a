import io
import json
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Any

import typer

from driftpack.core.exceptions import DiffConfigError, DriftError, ManifestError
from driftpack.diff import (
    EXTERNAL_DIFF_ENV_VAR,
    ComparisonReport,
    DiffProgram,
    DiffProgramConfig,
    Printer,
    compare_objects,
    mask_object,
)
from driftpack.diff.models import EXIT_ERROR
from driftpack.log import configure_logging
from driftpack.manifests import load_manifest_pair, load_manifests, pair_manifests

app = typer.Typer(help="DriftKit CLI: diff live resource state against merged state.")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    stable_json: bool = True


_OUTPUT_OPTIONS = _OutputOptions()


def _resolve_cli_version() -> str:
    try:
        return package_version("driftkit")
    except PackageNotFoundError:
        from driftpack import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version(), color=False)
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show DriftKit version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output, including the rendered diff.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log staging and diff command details to stderr.",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.quiet = quiet
    _OUTPUT_OPTIONS.stable_json = stable_json
    configure_logging(verbose=verbose)


def _echo(message: str, *, err: bool = False, force: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err and not force:
        return
    typer.echo(message, err=err)


def _echo_json(payload: dict[str, Any], *, err: bool = False) -> None:
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
    else:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            indent=2,
        )
    typer.echo(rendered, err=err)


def _fail(message: str, *, json_output: bool, extra: dict[str, Any] | None = None) -> None:
    if json_output:
        _echo_json(
            {
                "status": "error",
                "exit_code": EXIT_ERROR,
                "message": message,
                **(extra or {}),
            }
        )
    else:
        _echo(message, err=True)
    raise typer.Exit(code=EXIT_ERROR)


def _report_errors(report: ComparisonReport) -> None:
    for object_error in report.object_errors:
        _echo(
            f"diff failed for {object_error.name}: "
            f"{object_error.error_type}: {object_error.message}",
            err=True,
        )
    if report.run_error is not None:
        _echo(
            f"diff failed: {report.run_error.error_type}: {report.run_error.message}",
            err=True,
        )


@app.command()
def diff(
    live: Path = typer.Argument(..., help="Manifest file with the live (applied) objects."),
    merged: Path = typer.Argument(..., help="Manifest file with the merged (pending) objects."),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable output with the diff text embedded.",
    ),
    diff_command: str | None = typer.Option(
        None,
        "--diff-command",
        envvar=EXTERNAL_DIFF_ENV_VAR,
        help=(
            "External diff command plus fixed arguments (default: 'diff -u -N'). "
            f"Can also be set via {EXTERNAL_DIFF_ENV_VAR}."
        ),
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        min=0.001,
        help="Terminate the external diff command after this many seconds.",
    ),
) -> None:
    """Diff live objects against merged objects.

    Exit status: 0 no differences, 1 differences found, 2 error.
    """
    paths = {"live_path": str(live), "merged_path": str(merged)}
    try:
        objects = load_manifest_pair(live, merged)
        config = DiffProgramConfig.from_command_line(diff_command, timeout=timeout)
    except (ManifestError, DiffConfigError) as error:
        _fail(f"diff failed: {error}", json_output=json_output, extra=paths)
        return

    capture = json_output or _OUTPUT_OPTIONS.quiet
    diff_stdout = io.StringIO() if capture else None
    diff_stderr = io.StringIO() if capture else None
    program = DiffProgram(config, stdout=diff_stdout, stderr=diff_stderr)

    try:
        report = compare_objects(objects, program=program)
    except DriftError as error:
        _fail(f"diff failed: {error}", json_output=json_output, extra=paths)
        return

    if json_output:
        _echo_json(
            {
                **report.to_dict(),
                **paths,
                "diff": diff_stdout.getvalue() if diff_stdout is not None else "",
                "diff_stderr": diff_stderr.getvalue() if diff_stderr is not None else "",
            }
        )
    else:
        _report_errors(report)

    if report.exit_code:
        raise typer.Exit(code=report.exit_code)


@app.command()
def render(
    manifest: Path = typer.Argument(..., help="Manifest file to render."),
    unmasked: bool = typer.Option(
        False,
        "--unmasked",
        help="Print Secret data without masking.",
    ),
) -> None:
    """Print manifest documents in the canonical form used for diffing."""
    try:
        documents = load_manifests(manifest)
        objects = pair_manifests(documents, documents)
    except ManifestError as error:
        _fail(f"render failed: {error}", json_output=False)
        return

    printer = Printer()
    rendered: list[str] = []
    try:
        for obj in objects:
            value = obj.live() if unmasked else mask_object(obj)[0]
            rendered.append(f"# {obj.name()}\n{printer.render(value)}")
    except DriftError as error:
        _fail(f"render failed: {error}", json_output=False)
        return

    _echo("---\n".join(rendered).rstrip("\n"))


def main() -> None:
    app()
