from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .authorization import AuthorizationGate
from .edit_file import edit_file
from .execution.engine import ExecutionEngine
from .models import ExecutionRequest
from .runner import evaluate
from .settings import EvalSettings


@dataclass(frozen=True, slots=True)
class ToolParam:
    """Parameter metadata advertised to the calling agent.

    Example:
        ```python
        param = ToolParam("code", "Python code to execute")
        ```
    """

    name: str
    description: str
    required: bool = True


class PythonEval:
    """Tool that evaluates Python code in a child interpreter.

    Example:
        ```python
        tool = PythonEval(gate=AuthorizationGate(decide=lambda tool, code: True))
        tool.execute(code="2 + 2")["display"]  # "4"
        ```
    """

    name: ClassVar[str] = "python_eval"
    description: ClassVar[str] = (
        "Execute Python code and return the result.\n\n"
        "Printed output is captured. If the last statement is an expression, its value\n"
        "is returned as 'result'. Errors come back with 'error' and 'error_type'.\n"
        "The user is asked to approve every execution unless auto-execute is enabled."
    )
    params: ClassVar[tuple[ToolParam, ...]] = (
        ToolParam("code", "Python code to execute"),
    )

    def __init__(
        self,
        *,
        engine: ExecutionEngine | None = None,
        gate: AuthorizationGate | None = None,
        settings: EvalSettings | None = None,
        cwd: str | None = None,
    ) -> None:
        """Bind collaborators used for every call.

        Example:
            ```python
            tool = PythonEval(settings=EvalSettings(timeout_seconds=5))
            ```
        """
        self._engine = engine
        self._gate = gate
        self._settings = settings
        self._cwd = cwd

    def execute(self, code: str) -> dict[str, Any]:
        """Evaluate `code` and return the tool response mapping.

        Example:
            ```python
            tool.execute(code="print('Hello'); 42")
            ```
        """
        outcome = evaluate(
            ExecutionRequest(code=code, cwd=self._cwd),
            engine=self._engine,
            gate=self._gate,
            settings=self._settings,
            tool=self.name,
        )
        return outcome.to_dict()


class EditFile:
    """Tool that replaces literal text in a file.

    Example:
        ```python
        EditFile().execute(path="a.txt", old_str="x", new_str="y")
        ```
    """

    name: ClassVar[str] = "edit_file"
    description: ClassVar[str] = (
        "Make edits to a text file.\n\n"
        "Replaces 'old_str' with 'new_str' in the given file.\n"
        "'old_str' and 'new_str' MUST be different from each other.\n\n"
        "If the file specified with path doesn't exist, it will be created.\n\n"
        "By default, only the first occurrence will be replaced. "
        "Set replace_all to true to replace all occurrences."
    )
    params: ClassVar[tuple[ToolParam, ...]] = (
        ToolParam("path", "The path to the file"),
        ToolParam("old_str", "Text to search for - must match exactly"),
        ToolParam("new_str", "Text to replace old_str with"),
        ToolParam(
            "replace_all",
            "Whether to replace all occurrences (true) or just the first one (false)",
            required=False,
        ),
    )

    def execute(
        self,
        path: str,
        old_str: str,
        new_str: str,
        replace_all: bool = False,
    ) -> dict[str, Any]:
        """Apply one edit and return the tool response mapping.

        Example:
            ```python
            EditFile().execute(path="a.txt", old_str="x", new_str="y", replace_all=True)
            ```
        """
        return edit_file(path, old_str, new_str, replace_all=replace_all)


TOOLS: dict[str, type[PythonEval] | type[EditFile]] = {
    PythonEval.name: PythonEval,
    EditFile.name: EditFile,
}


def get_tool(name: str) -> type[PythonEval] | type[EditFile]:
    """Look up a registered tool class by name.

    Example:
        ```python
        tool_cls = get_tool("python_eval")
        ```
    """
    try:
        return TOOLS[name]
    except KeyError:
        raise KeyError(f"Unknown tool: {name}") from None
