import inspect
import io
from pathlib import Path
import sys

import driftkit


def test_public_api_symbol_list_is_explicit_and_stable() -> None:
    assert driftkit.__all__ == [
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


def test_public_api_function_signatures() -> None:
    expected_parameter_order = {
        "compare": ("objects", "diff_command", "timeout", "stdout", "stderr"),
        "diff_manifests": ("live", "merged", "diff_command", "timeout", "stdout", "stderr"),
    }

    for name, parameters in expected_parameter_order.items():
        signature = inspect.signature(getattr(driftkit, name))
        assert tuple(signature.parameters) == parameters


def test_error_types_share_a_common_base() -> None:
    for error_type in (
        driftkit.StagingIOError,
        driftkit.SerializationError,
        driftkit.RetrievalError,
        driftkit.ExecutionError,
        driftkit.TypeMismatchError,
    ):
        assert issubclass(error_type, driftkit.DriftError)


def test_compare_with_explicit_command_forwards_output() -> None:
    stdout = io.StringIO()
    obj = driftkit.StaticObject(
        object_name="cm",
        gvk=driftkit.GroupVersionKind(group="", version="v1", kind="ConfigMap"),
        live_value={"data": {"a": "1"}},
        merged_value={"data": {"a": "2"}},
    )
    command = f"'{sys.executable}' -c \"print('ran'); raise SystemExit(1)\""

    report = driftkit.compare([obj], diff_command=command, stdout=stdout)

    assert report.status == "changed"
    assert stdout.getvalue() == "ran\n"


def test_diff_manifests_reads_command_from_environment(monkeypatch) -> None:
    monkeypatch.setenv(
        "DRIFTKIT_EXTERNAL_DIFF",
        f"'{sys.executable}' -c \"import sys; print(len(sys.argv) - 1)\"",
    )
    stdout = io.StringIO()

    report = driftkit.diff_manifests(
        Path("examples/manifests/live.yaml"),
        Path("examples/manifests/merged.yaml"),
        stdout=stdout,
    )

    assert report.status == "identical"
    assert report.exit_code == 0
    assert stdout.getvalue() == "2\n"
