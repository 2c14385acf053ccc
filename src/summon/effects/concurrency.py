"""
Composition Effect ADTs.

Parallel and Race wrap sub-Tasks rather than describing I/O; interpreters
walk them recursively. Both require at least one sub-Task.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from summon.task import Task


@dataclass(frozen=True)
class Parallel:
    """Run all ``tasks`` concurrently; results keep input order."""

    tasks: tuple[Task[object], ...]
    kind: Literal["Parallel"] = "Parallel"

    def __post_init__(self) -> None:
        if not self.tasks:
            raise ValueError("Parallel requires at least one task")


@dataclass(frozen=True)
class Race:
    """Run all ``tasks`` concurrently; the first to settle decides the outcome."""

    tasks: tuple[Task[object], ...]
    kind: Literal["Race"] = "Race"

    def __post_init__(self) -> None:
        if not self.tasks:
            raise ValueError("Race requires at least one task")


ConcurrencyEffect = Parallel | Race


__all__ = ["Parallel", "Race", "ConcurrencyEffect"]
