from __future__ import annotations

from typing import Protocol

from .types import ProcessRequest, SubprocessResult


class ExecutionEngine(Protocol):
    def execute(self, request: ProcessRequest) -> SubprocessResult:
        """Run one wrapper program to completion and return its raw streams.

        Example:
            ```python
            result = engine.execute(ProcessRequest(program=program.text, timeout_seconds=30))
            ```
        """
        ...
