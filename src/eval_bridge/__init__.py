from .authorization import AuthorizationGate, AuthorizationState, auto_execute, default_gate
from .edit_file import edit_file
from .errors import ConfigurationError, ErrorKind
from .execution.local_engine import LocalEngine
from .models import Denied, ExecutionOutcome, ExecutionRequest, Failure, Success
from .runner import evaluate
from .settings import EvalSettings
from .tools import EditFile, PythonEval, get_tool

__all__ = [
    "AuthorizationGate",
    "AuthorizationState",
    "ConfigurationError",
    "Denied",
    "EditFile",
    "ErrorKind",
    "EvalSettings",
    "ExecutionOutcome",
    "ExecutionRequest",
    "Failure",
    "LocalEngine",
    "PythonEval",
    "Success",
    "auto_execute",
    "default_gate",
    "edit_file",
    "evaluate",
    "get_tool",
]
