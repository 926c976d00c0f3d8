from __future__ import annotations

from enum import Enum


class EvalBridgeError(Exception):
    """Base error for eval-bridge exceptions.

    Example:
        ```python
        raise EvalBridgeError("something went wrong")
        ```
    """


class ConfigurationError(EvalBridgeError, ValueError):
    """Invalid settings value or settings file.

    Example:
        ```python
        raise ConfigurationError("timeout_seconds must be >= 1")
        ```
    """


class ErrorKind(str, Enum):
    """Closed set of failure kinds an evaluation can end with.

    Example:
        ```python
        kind = ErrorKind.SYNTAX
        ```
    """

    INVALID_INPUT = "invalid_input"
    DENIED = "denied"
    SYNTAX = "syntax"
    RUNTIME = "runtime"
    PROTOCOL = "protocol"


_SYNTAX_ERROR_TYPES = frozenset({"SyntaxError", "IndentationError", "TabError"})


def classify_error_type(error_type: str | None) -> ErrorKind:
    """Map an interpreter exception class name onto an `ErrorKind`.

    Records without an exception name can only come from a broken
    subprocess exchange, so they classify as `PROTOCOL`.

    Example:
        ```python
        assert classify_error_type("IndentationError") is ErrorKind.SYNTAX
        assert classify_error_type("ZeroDivisionError") is ErrorKind.RUNTIME
        ```
    """
    if not error_type:
        return ErrorKind.PROTOCOL
    if error_type in _SYNTAX_ERROR_TYPES:
        return ErrorKind.SYNTAX
    return ErrorKind.RUNTIME
