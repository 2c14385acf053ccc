"""
Primitive Tasks: one Effect each, with the result type of that Effect.

These are the building blocks generators use; everything larger is made
with the combinators.
"""

from __future__ import annotations

import shlex
from typing import Iterable, Mapping

from summon.combinators import ensure
from summon.effects.context import ReadContext, WriteContext
from summon.effects.filesystem import (
    AppendFile,
    CopyDirectory,
    CopyFile,
    DeleteDirectory,
    DeleteFile,
    MakeDir,
    WriteFile,
)
from summon.effects.logging import Log, LogLevel
from summon.effects.process import Exec, ExecOptions, ExecResult
from summon.effects.prompt import Choice, Prompt, PromptDefinition
from summon.effects.query import Exists, Glob, GlobOptions, ReadFile
from summon.task import Task, bind, effect, pure


# =============================================================================
# File system
# =============================================================================


def read_file(path: str) -> Task[str]:
    return effect(ReadFile(path))


def write_file(path: str, content: str) -> Task[None]:
    return effect(WriteFile(path, content))


def append_file(path: str, content: str, *, create_if_missing: bool = True) -> Task[None]:
    return effect(AppendFile(path, content, create_if_missing=create_if_missing))


def mkdir(path: str, recursive: bool = True) -> Task[None]:
    return effect(MakeDir(path, recursive=recursive))


def copy_file(source: str, dest: str) -> Task[None]:
    return effect(CopyFile(source, dest))


def copy_directory(source: str, dest: str) -> Task[None]:
    return effect(CopyDirectory(source, dest))


def delete_file(path: str) -> Task[None]:
    return effect(DeleteFile(path))


def delete_directory(path: str) -> Task[None]:
    return effect(DeleteDirectory(path))


def exists(path: str) -> Task[bool]:
    return effect(Exists(path))


def glob(pattern: str, cwd: str = ".", ignore: Iterable[str] = ()) -> Task[list[str]]:
    """Files under ``cwd`` matching ``pattern``, as sorted POSIX paths relative to ``cwd``."""
    return effect(Glob(pattern, GlobOptions(cwd=cwd, ignore=tuple(ignore))))


# =============================================================================
# Processes
# =============================================================================


def exec_(
    command: str,
    args: Iterable[str] = (),
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
) -> Task[ExecResult]:
    """Run ``command`` without a shell."""
    options = ExecOptions(cwd=cwd, env=tuple(sorted((env or {}).items())))
    return effect(Exec(command, tuple(args), options))


def exec_simple(command_line: str, cwd: str | None = None) -> Task[ExecResult]:
    """Run a command line split with shell quoting rules (no shell is started)."""
    command, *args = shlex.split(command_line)
    return exec_(command, args, cwd)


# =============================================================================
# Prompts
# =============================================================================


def prompt(definition: PromptDefinition) -> Task[object]:
    return effect(Prompt(definition))


def prompt_text(name: str, message: str, default: str | None = None) -> Task[str]:
    return prompt(PromptDefinition(name=name, message=message, type="text", default=default))


def prompt_confirm(name: str, message: str, default: bool = False) -> Task[bool]:
    return prompt(PromptDefinition(name=name, message=message, type="confirm", default=default))


def prompt_select(
    name: str,
    message: str,
    choices: Iterable[Choice],
    default: str | None = None,
) -> Task[str]:
    return prompt(
        PromptDefinition(
            name=name, message=message, type="select", choices=tuple(choices), default=default
        )
    )


def prompt_multiselect(
    name: str,
    message: str,
    choices: Iterable[Choice],
    default: list[str] | None = None,
) -> Task[list[str]]:
    return prompt(
        PromptDefinition(
            name=name, message=message, type="multiselect", choices=tuple(choices), default=default
        )
    )


# =============================================================================
# Logging
# =============================================================================


def log(level: LogLevel, message: str) -> Task[None]:
    return effect(Log(level, message))


def debug(message: str) -> Task[None]:
    return log("debug", message)


def info(message: str) -> Task[None]:
    return log("info", message)


def warn(message: str) -> Task[None]:
    return log("warn", message)


def error(message: str) -> Task[None]:
    return log("error", message)


# =============================================================================
# Context
# =============================================================================


def get_context(key: str) -> Task[object]:
    """Value stored under ``key``, or None."""
    return effect(ReadContext(key))


def set_context(key: str, value: object) -> Task[None]:
    return effect(WriteContext(key, value))


def with_context(key: str, value: object, task: Task[object]) -> Task[object]:
    """Run ``task`` with ``key`` set to ``value``, then restore the previous value."""
    return bind(
        get_context(key),
        lambda previous: bind(
            set_context(key, value), lambda _: ensure(task, set_context(key, previous))
        ),
    )


# =============================================================================
# Pure
# =============================================================================


noop: Task[None] = pure(None)


def succeed(value: object) -> Task[object]:
    return pure(value)


__all__ = [
    "read_file",
    "write_file",
    "append_file",
    "mkdir",
    "copy_file",
    "copy_directory",
    "delete_file",
    "delete_directory",
    "exists",
    "glob",
    "exec_",
    "exec_simple",
    "prompt",
    "prompt_text",
    "prompt_confirm",
    "prompt_select",
    "prompt_multiselect",
    "log",
    "debug",
    "info",
    "warn",
    "error",
    "get_context",
    "set_context",
    "with_context",
    "noop",
    "succeed",
]
