from .engine import ExecutionEngine
from .local_engine import LocalEngine
from .types import ProcessRequest, SubprocessResult

__all__ = [
    "ExecutionEngine",
    "LocalEngine",
    "ProcessRequest",
    "SubprocessResult",
]
