from __future__ import annotations

from .authorization import AuthorizationGate, default_gate
from .errors import ErrorKind
from .execution.engine import ExecutionEngine
from .execution.local_engine import LocalEngine
from .execution.types import ProcessRequest
from .logging_config import get_logger
from .models import (
    DENIED_REASON,
    EMPTY_CODE_MESSAGE,
    Denied,
    ExecutionOutcome,
    ExecutionRequest,
    Failure,
)
from .parser import parse_result
from .settings import EvalSettings
from .wrapper import build_wrapper

logger = get_logger(__name__)

DEFAULT_TOOL_NAME = "python_eval"


def _resolve_request(request: ExecutionRequest | str) -> ExecutionRequest:
    """Accept either a bare code string or a full request.

    Example:
        ```python
        req = _resolve_request("2 + 2")
        ```
    """
    if isinstance(request, ExecutionRequest):
        return request
    return ExecutionRequest(code=request)


def evaluate(
    request: ExecutionRequest | str,
    *,
    engine: ExecutionEngine | None = None,
    gate: AuthorizationGate | None = None,
    settings: EvalSettings | None = None,
    tool: str = DEFAULT_TOOL_NAME,
) -> ExecutionOutcome:
    """Evaluate untrusted Python code in a child interpreter.

    Blank code and refused consent return without spawning anything. All
    other requests run in exactly one subprocess. Nothing raises past this
    function: every path ends in `Success`, `Failure` or `Denied`.

    Without an explicit `gate`, `settings.auto_execute` approves every request;
    otherwise the process-wide gate decides.

    Example:
        ```python
        from eval_bridge import AuthorizationGate, evaluate
        gate = AuthorizationGate(decide=lambda tool, code: True)
        outcome = evaluate("print('Hello'); 42", gate=gate)
        outcome.display  # "Hello\\n\\n=> 42"
        ```
    """
    req = _resolve_request(request)
    if req.is_blank():
        return Failure(error=EMPTY_CODE_MESSAGE, kind=ErrorKind.INVALID_INPUT)

    resolved_settings = settings or EvalSettings()
    if gate is not None:
        resolved_gate = gate
    elif resolved_settings.auto_execute:
        resolved_gate = AuthorizationGate.from_settings(resolved_settings)
    else:
        resolved_gate = default_gate()
    logger.info("evaluation.requested", tool=tool, code_length=len(req.code))
    if not resolved_gate.authorize(tool, req.code):
        return Denied(reason=DENIED_REASON)

    resolved_engine = engine or LocalEngine(python_executable=resolved_settings.python_executable)
    program = build_wrapper(req.code)
    try:
        raw = resolved_engine.execute(
            ProcessRequest(
                program=program.text,
                timeout_seconds=resolved_settings.timeout_seconds,
                cwd=req.cwd,
            )
        )
    except Exception as exc:
        logger.exception("evaluation.engine_failed", engine=type(resolved_engine).__name__)
        return Failure(error=f"Execution engine failed: {exc}", kind=ErrorKind.PROTOCOL)

    outcome = parse_result(raw)
    logger.info("evaluation.finished", tool=tool, success=outcome.success)
    return outcome
