from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .errors import ErrorKind

EMPTY_CODE_MESSAGE = "Python code cannot be empty"
DENIED_REASON = "User declined to execute the Python code"


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    """One evaluation request as received from the tool layer.

    Example:
        ```python
        req = ExecutionRequest(code="2 + 2", cwd="/tmp")
        ```
    """

    code: str
    cwd: str | None = None

    def is_blank(self) -> bool:
        """Return True when the code is empty or whitespace-only.

        Example:
            ```python
            assert ExecutionRequest(code="  \\n").is_blank()
            ```
        """
        return not self.code.strip()


@dataclass(frozen=True, slots=True)
class Success:
    """Code ran to completion.

    Example:
        ```python
        ok = Success(output="Hello\\n", result=42, display="Hello\\n\\n=> 42")
        ```
    """

    output: str = ""
    result: Any = None
    display: str = ""

    @property
    def success(self) -> bool:
        """Always True for this variant.

        Example:
            ```python
            assert Success().success
            ```
        """
        return True

    def to_dict(self) -> dict[str, Any]:
        """Render as the tool-layer response mapping.

        Example:
            ```python
            Success(result=4, display="4").to_dict()
            ```
        """
        return {
            "success": True,
            "output": self.output,
            "result": self.result,
            "display": self.display,
        }


@dataclass(frozen=True, slots=True)
class Failure:
    """Code could not be evaluated, or raised while running.

    Example:
        ```python
        err = Failure(error="division by zero", error_type="ZeroDivisionError")
        ```
    """

    error: str
    error_type: str | None = None
    kind: ErrorKind = ErrorKind.RUNTIME

    @property
    def success(self) -> bool:
        """Always False for this variant.

        Example:
            ```python
            assert not Failure(error="boom").success
            ```
        """
        return False

    def to_dict(self) -> dict[str, Any]:
        """Render as the tool-layer response mapping.

        Example:
            ```python
            Failure(error="boom", error_type="ValueError").to_dict()
            ```
        """
        return {
            "success": False,
            "error": self.error,
            "error_type": self.error_type,
        }


@dataclass(frozen=True, slots=True)
class Denied:
    """The authorization gate refused the request; nothing was spawned.

    Example:
        ```python
        denied = Denied(reason=DENIED_REASON)
        ```
    """

    reason: str = DENIED_REASON

    @property
    def success(self) -> bool:
        """Always False for this variant.

        Example:
            ```python
            assert not Denied().success
            ```
        """
        return False

    @property
    def kind(self) -> ErrorKind:
        """Taxonomy kind for a refused request.

        Example:
            ```python
            assert Denied().kind is ErrorKind.DENIED
            ```
        """
        return ErrorKind.DENIED

    def to_dict(self) -> dict[str, Any]:
        """Render as the tool-layer response mapping.

        Example:
            ```python
            Denied().to_dict()
            ```
        """
        return {"success": False, "error": self.reason}


ExecutionOutcome = Union[Success, Failure, Denied]
