"""
Plain-text rendering of dry-run effect lists.

Only Effects that would change something are shown; reads, logs, prompts and
composition Effects are omitted. Example output:

    ├─ Create dir    src/components/Button
    ├─ Create file   src/components/Button/Button.tsx
    └─ Append to     src/components/index.ts
"""

from __future__ import annotations

from typing import Final, Iterable

from summon.effects.concurrency import Parallel, Race
from summon.effects.context import ReadContext, WriteContext
from summon.effects.describe import assert_never
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


LABEL_WIDTH: Final[int] = 14


def is_visible_effect(effect: Effect) -> bool:
    """True for Effects shown in a dry-run preview."""
    return isinstance(
        effect,
        (
            WriteFile,
            AppendFile,
            MakeDir,
            CopyFile,
            CopyDirectory,
            DeleteFile,
            DeleteDirectory,
            Exec,
        ),
    )


def effect_label(effect: Effect) -> str:
    match effect:
        case WriteFile():
            return "Create file"
        case AppendFile():
            return "Append to"
        case MakeDir():
            return "Create dir"
        case CopyFile():
            return "Copy file"
        case CopyDirectory():
            return "Copy dir"
        case DeleteFile():
            return "Delete file"
        case DeleteDirectory():
            return "Delete dir"
        case Exec():
            return "Run"
        case ReadFile() | Exists() | Glob():
            return "Read"
        case Prompt():
            return "Prompt"
        case Log():
            return "Log"
        case ReadContext() | WriteContext():
            return "Context"
        case Parallel():
            return "Parallel"
        case Race():
            return "Race"
        case _:
            assert_never(effect)


def effect_payload(effect: Effect) -> str:
    match effect:
        case WriteFile(path=path) | AppendFile(path=path) | MakeDir(path=path):
            return path
        case DeleteFile(path=path) | DeleteDirectory(path=path) | ReadFile(path=path):
            return path
        case Exists(path=path):
            return path
        case CopyFile(source=source, dest=dest) | CopyDirectory(source=source, dest=dest):
            return f"{source} -> {dest}"
        case Exec(command=command, args=args):
            return " ".join((command, *args))
        case Glob(pattern=pattern):
            return pattern
        case Prompt(definition=definition):
            return definition.name
        case Log(message=message):
            return message
        case ReadContext(key=key) | WriteContext(key=key):
            return key
        case Parallel(tasks=tasks) | Race(tasks=tasks):
            return f"{len(tasks)} tasks"
        case _:
            assert_never(effect)


def format_effect_line(effect: Effect, is_last: bool) -> str:
    branch = "└─" if is_last else "├─"
    return f"{branch} {effect_label(effect):<{LABEL_WIDTH}}{effect_payload(effect)}"


def format_effect_tree(effects: Iterable[Effect]) -> str:
    """Tree of visible Effects, one per line; empty string when there are none."""
    visible = [eff for eff in effects if is_visible_effect(eff)]
    return "\n".join(
        format_effect_line(eff, index == len(visible) - 1) for index, eff in enumerate(visible)
    )


__all__ = [
    "LABEL_WIDTH",
    "is_visible_effect",
    "effect_label",
    "effect_payload",
    "format_effect_line",
    "format_effect_tree",
]
