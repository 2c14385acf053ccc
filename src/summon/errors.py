"""
Task error type and stable error codes.

A TaskError is terminal for the Task it occurs in. Interpreters wrap
exceptions raised by real I/O into a TaskError with a stable ``code`` so
callers can branch on the code instead of the exception class; the original
message is kept verbatim and its traceback is kept in ``stack``.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Literal, Mapping


# Effect-performance errors
FILE_NOT_FOUND: Final[str] = "FILE_NOT_FOUND"
PERMISSION_DENIED: Final[str] = "PERMISSION_DENIED"
FILE_EXISTS: Final[str] = "FILE_EXISTS"
IS_A_DIRECTORY: Final[str] = "IS_A_DIRECTORY"
NOT_A_DIRECTORY: Final[str] = "NOT_A_DIRECTORY"
IO_ERROR: Final[str] = "IO_ERROR"
ENCODING_ERROR: Final[str] = "ENCODING_ERROR"
COMMAND_NOT_FOUND: Final[str] = "COMMAND_NOT_FOUND"
EXEC_FAILED: Final[str] = "EXEC_FAILED"
NO_PROMPT_HANDLER: Final[str] = "NO_PROMPT_HANDLER"
PROMPT_FAILED: Final[str] = "PROMPT_FAILED"
TEMPLATE_RENDER_FAILED: Final[str] = "TEMPLATE_RENDER_FAILED"

# Interpreter-internal errors
RACE_EMPTY: Final[str] = "RACE_EMPTY"
INVALID_TASK: Final[str] = "INVALID_TASK"
CONTINUATION_RAISED: Final[str] = "CONTINUATION_RAISED"


def _empty_context() -> Mapping[str, object]:
    return MappingProxyType({})


@dataclass(frozen=True)
class TaskError:
    """Structured failure of a Task.

    Attributes:
        code: Stable identifier for programmatic handling (e.g. "FILE_NOT_FOUND").
        message: Human-readable description, the original exception text when wrapped.
        context: Extra details such as the effect kind and path involved.
        stack: Formatted traceback of the wrapped exception, if any.
        cause: The wrapped exception itself. Excluded from equality.
        kind: Discriminator for pattern matching. Always "TaskError".
    """

    code: str
    message: str
    context: Mapping[str, object] = field(default_factory=_empty_context)
    stack: str | None = None
    cause: BaseException | None = field(default=None, compare=False, repr=False)
    kind: Literal["TaskError"] = "TaskError"

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class TaskExecutionError(Exception):
    """Raised by the unwrapping helpers when a Task finished with a Failure.

    Attributes:
        error: The TaskError the Task failed with.
        code: Shortcut for ``error.code``.
    """

    def __init__(self, error: TaskError) -> None:
        super().__init__(str(error))
        self.error = error
        self.code = error.code


def task_error(code: str, message: str, **context: object) -> TaskError:
    """Build a TaskError with an immutable context mapping."""
    return TaskError(code=code, message=message, context=MappingProxyType(dict(context)))


def wrap_exception(code: str, exc: BaseException, **context: object) -> TaskError:
    """Re-wrap an exception as a TaskError, keeping its message and traceback."""
    return TaskError(
        code=code,
        message=str(exc) or type(exc).__name__,
        context=MappingProxyType(dict(context)),
        stack="".join(traceback.format_exception(exc)),
        cause=exc,
    )


def code_for_os_error(exc: OSError) -> str:
    """Map an OSError subclass to its stable error code."""
    match exc:
        case FileNotFoundError():
            return FILE_NOT_FOUND
        case PermissionError():
            return PERMISSION_DENIED
        case FileExistsError():
            return FILE_EXISTS
        case IsADirectoryError():
            return IS_A_DIRECTORY
        case NotADirectoryError():
            return NOT_A_DIRECTORY
        case _:
            return IO_ERROR


def code_for_exception(exc: Exception) -> str:
    """Stable code for any exception raised while performing an I/O effect."""
    match exc:
        case OSError():
            return code_for_os_error(exc)
        case UnicodeError():
            return ENCODING_ERROR
        case _:
            return IO_ERROR


__all__ = [
    "TaskError",
    "TaskExecutionError",
    "task_error",
    "wrap_exception",
    "code_for_os_error",
    "code_for_exception",
    "FILE_NOT_FOUND",
    "PERMISSION_DENIED",
    "FILE_EXISTS",
    "IS_A_DIRECTORY",
    "NOT_A_DIRECTORY",
    "IO_ERROR",
    "ENCODING_ERROR",
    "COMMAND_NOT_FOUND",
    "EXEC_FAILED",
    "NO_PROMPT_HANDLER",
    "PROMPT_FAILED",
    "TEMPLATE_RENDER_FAILED",
    "RACE_EMPTY",
    "INVALID_TASK",
    "CONTINUATION_RAISED",
]
