import sys

from eval_bridge import LocalEngine
from eval_bridge.execution.types import ProcessRequest


def test_local_engine_defaults_to_running_interpreter() -> None:
    assert LocalEngine().python_executable == sys.executable
    assert LocalEngine(python_executable="  ").python_executable == sys.executable


def test_local_engine_runs_program_from_stdin() -> None:
    engine = LocalEngine(python_executable=sys.executable)
    result = engine.execute(
        ProcessRequest(
            program="import sys\nprint('out')\nprint('err', file=sys.stderr)\nsys.exit(4)\n",
            timeout_seconds=10,
        )
    )

    assert result.stdout == "out\n"
    assert result.stderr == "err\n"
    assert result.returncode == 4
    assert result.timed_out is False
    assert result.error is None


def test_local_engine_reports_missing_working_directory(tmp_path) -> None:
    missing = tmp_path / "nope"
    result = LocalEngine(python_executable=sys.executable).execute(
        ProcessRequest(program="print('x')\n", timeout_seconds=10, cwd=str(missing))
    )

    assert result.stdout == ""
    assert result.error == f"Working directory does not exist: {missing}"
    assert "interpreter" not in result.error
