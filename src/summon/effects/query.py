"""
Query Effect ADTs.

Read-only effects: they never change the world, but their results depend on
it, so the dry-run interpreter substitutes deterministic defaults for them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class ReadFile:
    """Read a file as UTF-8 text."""

    path: str
    kind: Literal["ReadFile"] = "ReadFile"


@dataclass(frozen=True)
class Exists:
    """Check whether a file or directory exists."""

    path: str
    kind: Literal["Exists"] = "Exists"


@dataclass(frozen=True)
class GlobOptions:
    """Options for a Glob effect.

    Attributes:
        cwd: Directory the pattern is matched against; results are relative to it.
        ignore: Patterns whose matches are dropped from the result.
    """

    cwd: str = "."
    ignore: tuple[str, ...] = ()


@dataclass(frozen=True)
class Glob:
    """Find files matching ``pattern`` (``**`` recurses).

    Attributes:
        pattern: Glob pattern, e.g. ``"**/*.tmpl"``.
        options: Base directory and ignore patterns.
        kind: Discriminator for pattern matching. Always "Glob".
    """

    pattern: str
    options: GlobOptions = field(default_factory=GlobOptions)
    kind: Literal["Glob"] = "Glob"


QueryEffect = ReadFile | Exists | Glob


__all__ = ["ReadFile", "Exists", "Glob", "GlobOptions", "QueryEffect"]
