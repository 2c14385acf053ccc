"""Context Effect ADTs: the in-memory key/value scope of one interpretation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ReadContext:
    """Read ``key`` from the task context; resolves to None when unset."""

    key: str
    kind: Literal["ReadContext"] = "ReadContext"


@dataclass(frozen=True)
class WriteContext:
    """Store ``value`` under ``key`` for the rest of the interpretation."""

    key: str
    value: object
    kind: Literal["WriteContext"] = "WriteContext"


ContextEffect = ReadContext | WriteContext


__all__ = ["ReadContext", "WriteContext", "ContextEffect"]
