"""
Effect ADT - immutable descriptions of every side effect a Task can request.

This package re-exports all effect types and the master Effect union.

Type Safety:
    - All effect types are frozen dataclasses (immutable)
    - Literal discriminators enable exhaustive pattern matching
    - Union types define closed sets of effect variants
"""

from __future__ import annotations

from summon.effects.concurrency import ConcurrencyEffect, Parallel, Race
from summon.effects.context import ContextEffect, ReadContext, WriteContext
from summon.effects.describe import (
    affected_paths,
    assert_never,
    describe_effect,
    is_write_effect,
)
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
from summon.effects.logging import Log, LoggingEffect, LogLevel
from summon.effects.process import Exec, ExecOptions, ExecResult, ProcessEffect
from summon.effects.prompt import (
    Choice,
    Prompt,
    PromptDefinition,
    PromptEffect,
    PromptType,
    check_answer,
    placeholder_answer,
)
from summon.effects.query import Exists, Glob, GlobOptions, QueryEffect, ReadFile
from summon.effects.types import ALL_EFFECTS, MUTATING_EFFECTS, READ_EFFECTS, Effect


__all__ = [
    # Master union
    "Effect",
    "ALL_EFFECTS",
    "MUTATING_EFFECTS",
    "READ_EFFECTS",
    # File system
    "FileSystemEffect",
    "WriteFile",
    "AppendFile",
    "MakeDir",
    "CopyFile",
    "CopyDirectory",
    "DeleteFile",
    "DeleteDirectory",
    # Queries
    "QueryEffect",
    "ReadFile",
    "Exists",
    "Glob",
    "GlobOptions",
    # Process
    "ProcessEffect",
    "Exec",
    "ExecOptions",
    "ExecResult",
    # Prompt
    "PromptEffect",
    "Prompt",
    "PromptDefinition",
    "PromptType",
    "Choice",
    "check_answer",
    "placeholder_answer",
    # Logging
    "LoggingEffect",
    "Log",
    "LogLevel",
    # Context
    "ContextEffect",
    "ReadContext",
    "WriteContext",
    # Concurrency
    "ConcurrencyEffect",
    "Parallel",
    "Race",
    # Utilities
    "assert_never",
    "describe_effect",
    "is_write_effect",
    "affected_paths",
]
