"""
Master Effect union.

Type Safety:
    - Union types define the closed set of effect variants
    - Interpreters match on it with assert_never in the default branch
"""

from __future__ import annotations

from typing import Final

from summon.effects.concurrency import ConcurrencyEffect, Parallel, Race
from summon.effects.context import ContextEffect, ReadContext, WriteContext
from summon.effects.filesystem import (
    AppendFile,
    CopyDirectory,
    CopyFile,
    DeleteDirectory,
    DeleteFile,
    FileSystemEffect,
    MakeDir,
    WriteFile,
)
from summon.effects.logging import Log, LoggingEffect
from summon.effects.process import Exec, ProcessEffect
from summon.effects.prompt import Prompt, PromptEffect
from summon.effects.query import Exists, Glob, QueryEffect, ReadFile


Effect = (
    FileSystemEffect
    | QueryEffect
    | ProcessEffect
    | PromptEffect
    | LoggingEffect
    | ContextEffect
    | ConcurrencyEffect
)

# Effects a dry run records and resolves with a placeholder instead of performing.
MUTATING_EFFECTS: Final[tuple[type, ...]] = (
    WriteFile,
    AppendFile,
    MakeDir,
    CopyFile,
    CopyDirectory,
    DeleteFile,
    DeleteDirectory,
    Exec,
    Prompt,
)

# Effects whose result depends on external state.
READ_EFFECTS: Final[tuple[type, ...]] = (ReadFile, Exists, Glob)

ALL_EFFECTS: Final[tuple[type, ...]] = (
    *MUTATING_EFFECTS,
    *READ_EFFECTS,
    Log,
    ReadContext,
    WriteContext,
    Parallel,
    Race,
)


__all__ = ["Effect", "MUTATING_EFFECTS", "READ_EFFECTS", "ALL_EFFECTS"]
