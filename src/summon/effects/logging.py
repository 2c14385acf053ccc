"""
Logging Effect ADTs.

Log effects carry no state change, so every interpreter performs them,
dry-run included.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


LogLevel = Literal["debug", "info", "warn", "error"]


@dataclass(frozen=True)
class Log:
    """Request to emit a log message.

    Attributes:
        level: One of "debug", "info", "warn", "error".
        message: Log message payload.
        kind: Discriminator for pattern matching. Always "Log".
    """

    level: LogLevel
    message: str
    kind: Literal["Log"] = "Log"


LoggingEffect = Log


__all__ = ["Log", "LogLevel", "LoggingEffect"]
