from __future__ import annotations

import json
from typing import Any

from .errors import ErrorKind, classify_error_type
from .execution.types import SubprocessResult
from .logging_config import get_logger
from .models import ExecutionOutcome, Failure, Success

logger = get_logger(__name__)


def _last_record_line(stdout: str) -> str | None:
    """Return the last non-empty stdout line, where the wrapper writes its record.

    Example:
        ```python
        assert _last_record_line('noise\\n{"success": true}\\n') == '{"success": true}'
        ```
    """
    for line in reversed(stdout.splitlines()):
        if line.strip():
            return line.strip()
    return None


def _protocol_failure(result: SubprocessResult, reason: str) -> Failure:
    """Build a `PROTOCOL` failure from whatever the child left behind.

    Example:
        ```python
        failure = _protocol_failure(SubprocessResult("", "Segmentation fault", -11), "no record")
        ```
    """
    message = (
        result.error
        or result.stderr.strip()
        or f"Python process exited with status {result.returncode} without producing a result"
    )
    logger.error(
        "result.protocol_error",
        reason=reason,
        returncode=result.returncode,
        timed_out=result.timed_out,
    )
    return Failure(error=message, error_type=None, kind=ErrorKind.PROTOCOL)


def _decode_record(line: str) -> dict[str, Any] | None:
    """Decode one JSON record line, or return None when it is not a record.

    Example:
        ```python
        record = _decode_record('{"success": false, "error": "x", "error_type": "ValueError"}')
        ```
    """
    try:
        parsed = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict) or not isinstance(parsed.get("success"), bool):
        return None
    return parsed


def parse_result(result: SubprocessResult) -> ExecutionOutcome:
    """Turn a finished child's streams into a `Success` or `Failure`.

    Example:
        ```python
        outcome = parse_result(SubprocessResult(
            stdout='{"success": true, "output": "", "result": 4, "display": "4"}',
            stderr="",
            returncode=0,
        ))
        ```
    """
    if result.timed_out:
        return _protocol_failure(result, "timeout")

    line = _last_record_line(result.stdout)
    if line is None:
        return _protocol_failure(result, "empty stdout")

    record = _decode_record(line)
    if record is None:
        return _protocol_failure(result, "malformed record")

    if record["success"]:
        return Success(
            output=str(record.get("output") or ""),
            result=record.get("result"),
            display=str(record.get("display") or ""),
        )

    error_type = record.get("error_type")
    if not isinstance(error_type, str) or not error_type:
        error_type = None
    return Failure(
        error=str(record.get("error") or "Unknown error"),
        error_type=error_type,
        kind=classify_error_type(error_type),
    )
