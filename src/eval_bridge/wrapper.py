from __future__ import annotations

from dataclasses import dataclass

from .encoding import encode_source

SOURCE_PLACEHOLDER = "__EVAL_BRIDGE_SOURCE__"

# Program run by the child interpreter. SOURCE_PLACEHOLDER is the only
# substitution point and receives a base64 literal. The record is written as
# one JSON line, preceded by a newline so stray writes cannot merge with it.
_WRAPPER_TEMPLATE = r'''import ast
import base64
import contextlib
import io
import json
import sys

_ENCODED_SOURCE = "__EVAL_BRIDGE_SOURCE__"
_RESULT_NAME = "__eval_bridge_result__"
_FILENAME = "<eval>"
_STDOUT = sys.stdout


def _capture_last_expression(tree):
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        last = tree.body[-1]
        assign = ast.Assign(
            targets=[ast.Name(id=_RESULT_NAME, ctx=ast.Store())],
            value=last.value,
        )
        tree.body[-1] = ast.copy_location(assign, last)
        ast.fix_missing_locations(tree)
    return tree


def _display(output, result):
    if result is None:
        return output
    rendered = repr(result)
    if output:
        return output + "\n=> " + rendered
    return rendered


def _evaluate(source):
    tree = _capture_last_expression(ast.parse(source, _FILENAME, "exec"))
    code = compile(tree, _FILENAME, "exec")
    namespace = {"__name__": "__main__"}
    buffer = io.StringIO()
    try:
        with contextlib.redirect_stdout(buffer):
            exec(code, namespace)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            raise
    output = buffer.getvalue()
    result = namespace.get(_RESULT_NAME)
    return {
        "success": True,
        "output": output,
        "result": result,
        "display": _display(output, result),
    }


def _failure(exc):
    if isinstance(exc, SystemExit):
        message = "SystemExit: %s" % (exc.code,)
    else:
        message = str(exc) or type(exc).__name__
    return {"success": False, "error": message, "error_type": type(exc).__name__}


def _serialize(record):
    try:
        return json.dumps(record)
    except (TypeError, ValueError):
        return json.dumps(dict(record, result=repr(record.get("result"))))


def _emit(record):
    try:
        text = _serialize(record)
    except Exception as exc:
        text = json.dumps(_failure(exc))
    _STDOUT.write("\n" + text + "\n")
    _STDOUT.flush()


def _main():
    try:
        source = base64.b64decode(_ENCODED_SOURCE).decode("utf-8")
        record = _evaluate(source)
    except BaseException as exc:
        record = _failure(exc)
    _emit(record)


_main()
'''


@dataclass(frozen=True, slots=True)
class WrapperProgram:
    """Generated child program for exactly one request.

    Example:
        ```python
        program = build_wrapper("2 + 2")
        program.text  # complete Python source
        ```
    """

    text: str
    encoded_source: str


def build_wrapper(code: str) -> WrapperProgram:
    """Embed transport-encoded code into the wrapper template.

    The child decodes the literal, runs it with stdout captured, keeps the
    value of a trailing bare expression and prints one JSON record:
    `{"success": true, "output", "result", "display"}` or
    `{"success": false, "error", "error_type"}`.

    Example:
        ```python
        program = build_wrapper("print('hello'); 42")
        ```
    """
    literal = encode_source(code)
    return WrapperProgram(
        text=_WRAPPER_TEMPLATE.replace(SOURCE_PLACEHOLDER, literal, 1),
        encoded_source=literal,
    )
