import sys
from pathlib import Path

from eval_bridge import (
    AuthorizationGate,
    AuthorizationState,
    ErrorKind,
    EvalSettings,
    ExecutionRequest,
    Failure,
    LocalEngine,
    Success,
    evaluate as raw_evaluate,
)

ENGINE = LocalEngine(python_executable=sys.executable)


def _never_asked(tool: str, payload: str) -> bool:
    raise AssertionError("decision callback must not run in forced-allow mode")


def evaluate(*args, **kwargs):
    kwargs.setdefault("engine", ENGINE)
    kwargs.setdefault(
        "gate",
        AuthorizationGate(decide=_never_asked, state=AuthorizationState.FORCED_ALLOW),
    )
    return raw_evaluate(*args, **kwargs)


def test_simple_expression() -> None:
    assert evaluate("2 + 2") == Success(output="", result=4, display="4")


def test_output_and_result() -> None:
    outcome = evaluate("print('Hello'); 42")
    assert outcome == Success(output="Hello\n", result=42, display="Hello\n\n=> 42")


def test_output_only() -> None:
    outcome = evaluate("print('Hello World')")
    assert isinstance(outcome, Success)
    assert outcome.result is None
    assert outcome.output == "Hello World\n"
    assert outcome.display == "Hello World\n"


def test_no_output_no_result() -> None:
    assert evaluate("x = 5") == Success(output="", result=None, display="")


def test_list_result() -> None:
    outcome = evaluate("[x * 2 for x in [1, 2, 3]]")
    assert isinstance(outcome, Success)
    assert outcome.result == [2, 4, 6]
    assert outcome.display == "[2, 4, 6]"


def test_dict_result() -> None:
    outcome = evaluate("{'name': 'test', 'value': 42}")
    assert isinstance(outcome, Success)
    assert outcome.result == {"name": "test", "value": 42}


def test_mixed_sequence_round_trips() -> None:
    outcome = evaluate("[1, 2.5, 'three', None, True, {'k': [1]}]")
    assert isinstance(outcome, Success)
    assert outcome.result == [1, 2.5, "three", None, True, {"k": [1]}]


def test_module_import() -> None:
    outcome = evaluate("import math; math.sqrt(16)")
    assert isinstance(outcome, Success)
    assert outcome.result == 4.0


def test_multiline_with_functions() -> None:
    code = """
def square(n):
    return n * n

total = sum(square(i) for i in range(4))
print("total computed")
total
"""
    outcome = evaluate(code)
    assert outcome == Success(output="total computed\n", result=14, display="total computed\n\n=> 14")


def test_quotes_and_backslashes_survive_transport() -> None:
    expected = "it's \"quoted\" '''triple''' \"\"\"more\"\"\" \\ back\nnew line ✓"
    outcome = evaluate(repr(expected))
    assert isinstance(outcome, Success)
    assert outcome.result == expected


def test_non_json_result_falls_back_to_repr() -> None:
    outcome = evaluate("{1, 2}")
    assert isinstance(outcome, Success)
    assert outcome.result == "{1, 2}"
    assert outcome.display == "{1, 2}"


def test_syntax_error() -> None:
    outcome = evaluate("def foo(:")
    assert isinstance(outcome, Failure)
    assert outcome.error_type == "SyntaxError"
    assert outcome.kind is ErrorKind.SYNTAX


def test_runtime_error() -> None:
    outcome = evaluate("1 / 0")
    assert isinstance(outcome, Failure)
    assert "division by zero" in outcome.error
    assert outcome.error_type == "ZeroDivisionError"
    assert outcome.kind is ErrorKind.RUNTIME


def test_raised_exception_type_is_reported() -> None:
    outcome = evaluate("raise ValueError('Test error')")
    assert outcome == Failure(error="Test error", error_type="ValueError", kind=ErrorKind.RUNTIME)


def test_sys_exit_zero_is_success() -> None:
    outcome = evaluate("import sys\nprint('before')\nsys.exit(0)")
    assert outcome == Success(output="before\n", result=None, display="before\n")


def test_sys_exit_nonzero_is_failure() -> None:
    outcome = evaluate("import sys\nsys.exit(3)")
    assert outcome == Failure(error="SystemExit: 3", error_type="SystemExit", kind=ErrorKind.RUNTIME)


def test_input_reads_eof_instead_of_blocking() -> None:
    outcome = evaluate("input('name? ')")
    assert isinstance(outcome, Failure)
    assert outcome.error_type == "EOFError"


def test_stderr_and_stray_stdout_writes_do_not_break_record() -> None:
    code = "import sys\nprint('warn', file=sys.stderr)\nsys.__stdout__.write('noise')\n7"
    outcome = evaluate(code)
    assert isinstance(outcome, Success)
    assert outcome.result == 7


def test_hard_exit_is_protocol_failure() -> None:
    outcome = evaluate("import os\nos._exit(3)")
    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.PROTOCOL
    assert outcome.error_type is None
    assert "status 3" in outcome.error


def test_timeout_kills_child() -> None:
    outcome = evaluate("import time\ntime.sleep(30)", settings=EvalSettings(timeout_seconds=1))
    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.PROTOCOL
    assert "timed out after 1s" in outcome.error


def test_working_directory(tmp_path: Path) -> None:
    outcome = evaluate(ExecutionRequest(code="import os; os.getcwd()", cwd=str(tmp_path)))
    assert isinstance(outcome, Success)
    assert Path(outcome.result).resolve() == tmp_path.resolve()


def test_missing_interpreter_is_protocol_failure() -> None:
    outcome = evaluate("1", engine=LocalEngine(python_executable="/nonexistent/bin/python"))
    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.PROTOCOL
    assert "Failed to start Python interpreter" in outcome.error


def test_each_request_runs_in_a_fresh_process() -> None:
    assert isinstance(evaluate("leaked = 1"), Success)
    outcome = evaluate("leaked")
    assert isinstance(outcome, Failure)
    assert outcome.error_type == "NameError"
