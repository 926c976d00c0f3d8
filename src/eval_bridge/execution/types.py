from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProcessRequest:
    """Wrapper program plus launch context handed to an execution engine.

    Example:
        ```python
        req = ProcessRequest(program=build_wrapper("1 + 1").text, timeout_seconds=30)
        ```
    """

    program: str
    timeout_seconds: int
    cwd: str | None = None


@dataclass(slots=True)
class SubprocessResult:
    """Raw streams and exit status collected from one child process.

    Example:
        ```python
        out = SubprocessResult(stdout="{}", stderr="", returncode=0, timed_out=False)
        ```
    """

    stdout: str
    stderr: str
    returncode: int
    timed_out: bool = False
    error: str | None = None
