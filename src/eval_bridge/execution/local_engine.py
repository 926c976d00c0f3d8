from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from ..logging_config import get_logger
from .types import ProcessRequest, SubprocessResult

logger = get_logger(__name__)


class LocalEngine:
    """Run wrapper programs with a local Python interpreter.

    The program is piped to `python -` on stdin, so no shell or argv quoting
    is involved and submitted code calling `input()` reads EOF.

    Example:
        ```python
        engine = LocalEngine(python_executable="/usr/bin/python3")
        ```
    """

    def __init__(self, *, python_executable: str | None = None) -> None:
        """Initialize the engine with the interpreter to spawn.

        Example:
            ```python
            engine = LocalEngine()  # uses sys.executable
            ```
        """
        cleaned = (python_executable or "").strip()
        self._python = str(Path(cleaned).expanduser()) if cleaned else sys.executable

    @property
    def python_executable(self) -> str:
        """Interpreter path used for every spawned child.

        Example:
            ```python
            LocalEngine().python_executable
            ```
        """
        return self._python

    def execute(self, request: ProcessRequest) -> SubprocessResult:
        """Spawn one interpreter, feed it the program and wait for exit.

        Example:
            ```python
            result = engine.execute(ProcessRequest(program=program.text, timeout_seconds=30))
            ```
        """
        cmd = [self._python, "-"]
        timeout = max(1, int(request.timeout_seconds))
        if request.cwd is not None and not Path(request.cwd).is_dir():
            logger.error("process.bad_cwd", cwd=request.cwd)
            return SubprocessResult(
                stdout="",
                stderr="",
                returncode=127,
                error=f"Working directory does not exist: {request.cwd}",
            )
        logger.debug("process.spawn", python=self._python, cwd=request.cwd, timeout=timeout)
        try:
            completed = subprocess.run(
                cmd,
                input=request.program,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=request.cwd,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("process.timeout", timeout=timeout)
            return SubprocessResult(
                stdout="",
                stderr="",
                returncode=124,
                timed_out=True,
                error=f"Execution timed out after {timeout}s",
            )
        except OSError as exc:
            logger.error("process.launch_failed", python=self._python, error=str(exc))
            return SubprocessResult(
                stdout="",
                stderr="",
                returncode=127,
                error=f"Failed to start Python interpreter '{self._python}': {exc}",
            )
        logger.debug("process.exit", returncode=completed.returncode)
        return SubprocessResult(
            stdout=completed.stdout,
            stderr=completed.stderr,
            returncode=completed.returncode,
        )
