"""Human-readable descriptions of effects, used by logs and dry-run reports."""

from __future__ import annotations

from typing import Never

from summon.effects.concurrency import Parallel, Race
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
from summon.effects.logging import Log
from summon.effects.process import Exec
from summon.effects.prompt import Prompt
from summon.effects.query import Exists, Glob, ReadFile
from summon.effects.types import Effect


def assert_never(value: Never) -> Never:
    """Type-safe exhaustiveness check for pattern matching.

    Use this in the default case of match statements so that adding an
    Effect variant without handling it is reported by mypy.
    """
    raise AssertionError(f"Unhandled case: {value!r}")


def describe_effect(effect: Effect) -> str:
    """One-line description of ``effect``."""
    match effect:
        case WriteFile(path=path, content=content):
            return f"Write {path} ({len(content.encode('utf-8'))} bytes)"
        case AppendFile(path=path, content=content):
            return f"Append to {path} ({len(content.encode('utf-8'))} bytes)"
        case MakeDir(path=path):
            return f"Create directory {path}"
        case CopyFile(source=source, dest=dest):
            return f"Copy {source} -> {dest}"
        case CopyDirectory(source=source, dest=dest):
            return f"Copy directory {source} -> {dest}"
        case DeleteFile(path=path):
            return f"Delete {path}"
        case DeleteDirectory(path=path):
            return f"Delete directory {path}"
        case ReadFile(path=path):
            return f"Read {path}"
        case Exists(path=path):
            return f"Check exists {path}"
        case Glob(pattern=pattern, options=options):
            return f"Glob {pattern} in {options.cwd}"
        case Exec(command=command, args=args):
            return "Run " + " ".join((command, *args))
        case Prompt(definition=definition):
            return f"Prompt {definition.name}: {definition.message}"
        case Log(level=level, message=message):
            return f"[{level}] {message}"
        case ReadContext(key=key):
            return f"Read context {key}"
        case WriteContext(key=key):
            return f"Write context {key}"
        case Parallel(tasks=tasks):
            return f"Parallel ({len(tasks)} tasks)"
        case Race(tasks=tasks):
            return f"Race ({len(tasks)} tasks)"
        case _:
            assert_never(effect)


def is_write_effect(effect: Effect) -> bool:
    """True for effects that change the file system."""
    return isinstance(
        effect,
        (WriteFile, AppendFile, MakeDir, CopyFile, CopyDirectory, DeleteFile, DeleteDirectory),
    )


def affected_paths(effect: Effect) -> tuple[str, ...]:
    """Paths an effect creates, changes or removes; empty for non-writes."""
    match effect:
        case WriteFile(path=path) | AppendFile(path=path) | MakeDir(path=path):
            return (path,)
        case DeleteFile(path=path) | DeleteDirectory(path=path):
            return (path,)
        case CopyFile(dest=dest) | CopyDirectory(dest=dest):
            return (dest,)
        case _:
            return ()


__all__ = ["assert_never", "describe_effect", "is_write_effect", "affected_paths"]
