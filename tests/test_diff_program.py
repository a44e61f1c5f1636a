import io
from pathlib import Path
import shutil
import sys

import pytest

from driftpack.core.exceptions import DiffConfigError, ExecutionError
from driftpack.diff.program import (
    DEFAULT_DIFF_COMMAND,
    EXTERNAL_DIFF_ENV_VAR,
    DiffProgram,
    DiffProgramConfig,
)

requires_diff = pytest.mark.skipif(shutil.which("diff") is None, reason="diff binary not available")


def _python_command(code: str) -> tuple[str, ...]:
    return (sys.executable, "-c", code)


def _program(config: DiffProgramConfig) -> tuple[DiffProgram, io.StringIO, io.StringIO]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    return DiffProgram(config, stdout=stdout, stderr=stderr), stdout, stderr


def _write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


@requires_diff
@pytest.mark.parametrize("raw_command", ["diff", "diff -ruN", "diff --report-identical-files"])
def test_identical_files_report_no_differences(tmp_path: Path, raw_command: str) -> None:
    left = _write(tmp_path / "left", "a: 1\n")
    right = _write(tmp_path / "right", "a: 1\n")
    program, stdout, _ = _program(DiffProgramConfig.from_command_line(raw_command))

    result = program.run(left, right)

    assert result.status == "identical"
    assert result.exit_code == 0
    if "--report-identical-files" in raw_command:
        assert stdout.getvalue() == f"Files {left} and {right} are identical\n"


@requires_diff
def test_differing_files_are_not_an_error(tmp_path: Path) -> None:
    left = _write(tmp_path / "left", "a: 1\n")
    right = _write(tmp_path / "right", "a: 2\n")
    program, stdout, _ = _program(DiffProgramConfig())

    result = program.run(left, right)

    assert result.status == "changed"
    assert result.identical is False
    assert "-a: 1" in stdout.getvalue()
    assert "+a: 2" in stdout.getvalue()


@requires_diff
def test_directories_line_up_by_member_name(tmp_path: Path) -> None:
    live_dir = tmp_path / "live"
    merged_dir = tmp_path / "merged"
    live_dir.mkdir()
    merged_dir.mkdir()
    _write(merged_dir / "v1.ConfigMap.default.new", "kind: ConfigMap\n")
    program, stdout, _ = _program(DiffProgramConfig())

    result = program.run(str(live_dir), str(merged_dir))

    assert result.status == "changed"
    assert "+kind: ConfigMap" in stdout.getvalue()


def test_missing_command_raises_execution_error(tmp_path: Path) -> None:
    program, _, _ = _program(DiffProgramConfig(command=("driftkit-no-such-diff-binary",)))

    with pytest.raises(ExecutionError, match="cannot run diff command") as exc_info:
        program.run(str(tmp_path), str(tmp_path))

    assert exc_info.value.exit_code is None
    assert exc_info.value.command[0] == "driftkit-no-such-diff-binary"


def test_unexpected_exit_status_raises_after_forwarding_output(tmp_path: Path) -> None:
    code = "import sys; sys.stderr.write('diff: trouble\\n'); sys.exit(2)"
    program, _, stderr = _program(DiffProgramConfig(command=_python_command(code)))

    with pytest.raises(ExecutionError, match="exited with status 2") as exc_info:
        program.run(str(tmp_path), str(tmp_path))

    assert exc_info.value.exit_code == 2
    assert stderr.getvalue() == "diff: trouble\n"


def test_exit_status_one_means_changed() -> None:
    program, _, _ = _program(DiffProgramConfig(command=_python_command("raise SystemExit(1)")))

    result = program.run("a", "b")

    assert result.status == "changed"
    assert result.command[-2:] == ("a", "b")


def test_paths_are_appended_and_output_forwarded_verbatim() -> None:
    code = "import sys; sys.stdout.write('|'.join(sys.argv[1:]) + '\\n\\ttrailing  \\n')"
    program, stdout, _ = _program(DiffProgramConfig(command=_python_command(code) + ("--extra",)))

    program.run("from-dir", "to-dir")

    assert stdout.getvalue() == "--extra|from-dir|to-dir\n\ttrailing  \n"


def test_child_runs_with_stable_locale(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LANG", "de_DE.UTF-8")
    code = "import os, sys; sys.stdout.write(os.environ['LANG'] + ' ' + os.environ['LC_ALL'])"
    program, stdout, _ = _program(DiffProgramConfig(command=_python_command(code)))

    program.run("a", "b")

    assert stdout.getvalue() == "C C"
    assert DiffProgramConfig().child_environment({"LANG": "de_DE.UTF-8"})["LANG"] == "C"


def test_timeout_terminates_child_and_raises() -> None:
    config = DiffProgramConfig(command=_python_command("import time; time.sleep(30)"), timeout=0.5)
    program, _, _ = _program(config)

    with pytest.raises(ExecutionError, match="timed out"):
        program.run("a", "b")


def test_config_from_environ_shell_splits_override() -> None:
    config = DiffProgramConfig.from_environ({EXTERNAL_DIFF_ENV_VAR: "colordiff -u --label 'live side'"})

    assert config.command == ("colordiff", "-u", "--label", "live side")


def test_config_from_environ_defaults_when_unset_or_blank() -> None:
    assert DiffProgramConfig.from_environ({}).command == DEFAULT_DIFF_COMMAND
    assert DiffProgramConfig.from_environ({EXTERNAL_DIFF_ENV_VAR: "   "}).command == DEFAULT_DIFF_COMMAND


def test_config_rejects_bad_values() -> None:
    with pytest.raises(DiffConfigError):
        DiffProgramConfig.from_command_line("diff 'unterminated")
    with pytest.raises(DiffConfigError):
        DiffProgramConfig(command=())
    with pytest.raises(DiffConfigError):
        DiffProgramConfig(timeout=0)


def test_default_streams_resolve_at_run_time(capsys: pytest.CaptureFixture[str]) -> None:
    program = DiffProgram(DiffProgramConfig(command=_python_command("print('rendered diff')")))

    program.run("a", "b")

    assert capsys.readouterr().out == "rendered diff\n"


_RAW_BYTES_CODE = "import sys; sys.stdout.buffer.write(b'x\\r\\n\\xff\\n')"


def test_binary_sink_receives_child_bytes_unchanged() -> None:
    raw = io.BytesIO()
    sink = io.TextIOWrapper(raw, encoding="utf-8")
    program = DiffProgram(DiffProgramConfig(command=_python_command(_RAW_BYTES_CODE)), stdout=sink)

    program.run("a", "b")

    assert raw.getvalue() == b"x\r\n\xff\n"


def test_text_only_sink_keeps_carriage_returns() -> None:
    program, stdout, _ = _program(DiffProgramConfig(command=_python_command(_RAW_BYTES_CODE)))

    program.run("a", "b")

    assert stdout.getvalue() == "x\r\n�\n"


def test_file_backed_sink_is_handed_to_child(tmp_path: Path) -> None:
    target = tmp_path / "out.txt"
    with target.open("w", encoding="utf-8") as sink:
        sink.write("before\n")
        program = DiffProgram(DiffProgramConfig(command=_python_command(_RAW_BYTES_CODE)), stdout=sink)
        program.run("a", "b")

    assert target.read_bytes() == b"before\nx\r\n\xff\n"
