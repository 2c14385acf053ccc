"""
Execution listeners: the progress boundary between interpreters and UIs.

Interpreters publish three lifecycle callbacks and know nothing else about
presentation. A terminal UI, a test harness, or the standard logging module
subscribes by implementing ExecutionListener.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

from summon.effects.describe import describe_effect
from summon.effects.logging import LogLevel
from summon.effects.types import Effect


TASK_LOGGER_NAME = "summon.task"

_LEVELS: dict[LogLevel, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class ExecutionListener(Protocol):
    """Observer of one interpretation.

    ``on_effect_complete`` is only called for effects that succeeded; a failed
    effect is reported through the Task's ``Failure`` instead.
    """

    def on_effect_start(self, effect: Effect) -> None:
        ...

    def on_effect_complete(self, effect: Effect, duration_ms: float) -> None:
        ...

    def on_log(self, level: LogLevel, message: str) -> None:
        ...


class NullListener:
    """Listener that ignores every event."""

    def on_effect_start(self, effect: Effect) -> None:
        return None

    def on_effect_complete(self, effect: Effect, duration_ms: float) -> None:
        return None

    def on_log(self, level: LogLevel, message: str) -> None:
        return None


class LoggingListener:
    """Forward Log effects to the standard logging module.

    Effect start/complete events are emitted at DEBUG level on the same logger.
    """

    def __init__(self, logger_name: str = TASK_LOGGER_NAME) -> None:
        self._logger = logging.getLogger(logger_name)

    def on_effect_start(self, effect: Effect) -> None:
        self._logger.debug("start: %s", describe_effect(effect))

    def on_effect_complete(self, effect: Effect, duration_ms: float) -> None:
        self._logger.debug("done: %s (%.1f ms)", describe_effect(effect), duration_ms)

    def on_log(self, level: LogLevel, message: str) -> None:
        self._logger.log(_LEVELS[level], message)


class CompositeListener:
    """Fan every event out to several listeners, in order."""

    def __init__(self, *listeners: ExecutionListener) -> None:
        self._listeners = listeners

    def on_effect_start(self, effect: Effect) -> None:
        for listener in self._listeners:
            listener.on_effect_start(effect)

    def on_effect_complete(self, effect: Effect, duration_ms: float) -> None:
        for listener in self._listeners:
            listener.on_effect_complete(effect, duration_ms)

    def on_log(self, level: LogLevel, message: str) -> None:
        for listener in self._listeners:
            listener.on_log(level, message)


# ========== Recorded events ==========


@dataclass(frozen=True)
class EffectStarted:
    effect: Effect
    kind: Literal["EffectStarted"] = "EffectStarted"


@dataclass(frozen=True)
class EffectCompleted:
    effect: Effect
    duration_ms: float
    kind: Literal["EffectCompleted"] = "EffectCompleted"


@dataclass(frozen=True)
class LogEmitted:
    level: LogLevel
    message: str
    kind: Literal["LogEmitted"] = "LogEmitted"


ExecutionEvent = EffectStarted | EffectCompleted | LogEmitted


class RecordingListener:
    """Listener that keeps every event in arrival order, for tests.

    Attributes:
        events: All recorded events.
    """

    def __init__(self) -> None:
        self.events: list[ExecutionEvent] = []

    def on_effect_start(self, effect: Effect) -> None:
        self.events.append(EffectStarted(effect))

    def on_effect_complete(self, effect: Effect, duration_ms: float) -> None:
        self.events.append(EffectCompleted(effect, duration_ms))

    def on_log(self, level: LogLevel, message: str) -> None:
        self.events.append(LogEmitted(level, message))

    @property
    def started(self) -> list[Effect]:
        return [event.effect for event in self.events if isinstance(event, EffectStarted)]

    @property
    def completed(self) -> list[Effect]:
        return [event.effect for event in self.events if isinstance(event, EffectCompleted)]

    @property
    def logs(self) -> list[tuple[LogLevel, str]]:
        return [(e.level, e.message) for e in self.events if isinstance(e, LogEmitted)]

    def clear(self) -> None:
        self.events.clear()


__all__ = [
    "TASK_LOGGER_NAME",
    "ExecutionListener",
    "NullListener",
    "LoggingListener",
    "CompositeListener",
    "RecordingListener",
    "ExecutionEvent",
    "EffectStarted",
    "EffectCompleted",
    "LogEmitted",
]
