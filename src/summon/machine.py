"""
Task tree walker shared by every interpreter.

The machine reduces a Task to its next leaf Effect, suspends there, and is
resumed with that Effect's ``Result``. It owns the bind/recover semantics so
the live and dry-run interpreters differ only in how they perform a leaf:

    machine = TaskMachine(task)
    step = machine.start()
    while isinstance(step, Suspended):
        step = machine.resume(perform(step.effect))
    return step.result

The walk keeps an explicit frame stack instead of recursing, so long
``sequence`` chains do not grow the Python stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generator, Literal

from summon.effects.types import Effect
from summon.errors import (
    CONTINUATION_RAISED,
    INVALID_TASK,
    TaskError,
    task_error,
    wrap_exception,
)
from summon.result import Failure, Result, Success
from summon.task import Bind, Fail, Perform, Pure, Recover, Task


@dataclass(frozen=True)
class Suspended:
    """The walk reached a leaf Effect and waits for its outcome."""

    effect: Effect
    kind: Literal["Suspended"] = "Suspended"


@dataclass(frozen=True)
class Finished:
    """The walk produced the Task's final outcome."""

    result: Result[object, TaskError]
    kind: Literal["Finished"] = "Finished"


Step = Suspended | Finished


@dataclass(frozen=True)
class _OnSuccess:
    continuation: Callable[[object], Task[object]]


@dataclass(frozen=True)
class _OnFailure:
    handler: Callable[[TaskError], Task[object]]


_Frame = _OnSuccess | _OnFailure

_Walk = Generator[Effect, Result[object, TaskError], Result[object, TaskError]]


def _call(fn: Callable[[object], Task[object]], argument: object) -> Task[object]:
    """Invoke a user continuation; an exception becomes a failed Task."""
    try:
        return fn(argument)
    except Exception as exc:
        return Fail(wrap_exception(CONTINUATION_RAISED, exc))


def _walk(root: Task[object]) -> _Walk:
    frames: list[_Frame] = []
    current: object = root

    while True:
        outcome: Result[object, TaskError]
        match current:
            case Pure(value=value):
                outcome = Success(value)
            case Fail(error=error):
                outcome = Failure(error)
            case Perform(effect=eff):
                outcome = yield eff
            case Bind(task=inner, continuation=continuation):
                frames.append(_OnSuccess(continuation))
                current = inner
                continue
            case Recover(task=inner, handler=handler):
                frames.append(_OnFailure(handler))
                current = inner
                continue
            case _:
                outcome = Failure(
                    task_error(
                        INVALID_TASK,
                        f"Expected a Task, got {type(current).__name__}",
                        value=repr(current),
                    )
                )

        next_task: Task[object] | None = None
        while frames and next_task is None:
            match frames.pop(), outcome:
                case _OnSuccess(continuation=continuation), Success(value=value):
                    next_task = _call(continuation, value)
                case _OnFailure(handler=handler), Failure(error=error):
                    next_task = _call(handler, error)
                case _:
                    pass

        if next_task is None:
            return outcome
        current = next_task


class TaskMachine:
    """Step-wise evaluation of one Task.

    A machine is single use: ``start`` once, then ``resume`` after every
    ``Suspended`` step until a ``Finished`` step is returned.
    """

    def __init__(self, task: Task[object]) -> None:
        self._walk = _walk(task)

    def start(self) -> Step:
        return self._advance(None)

    def resume(self, outcome: Result[object, TaskError]) -> Step:
        return self._advance(outcome)

    def _advance(self, outcome: Result[object, TaskError] | None) -> Step:
        try:
            eff = next(self._walk) if outcome is None else self._walk.send(outcome)
        except StopIteration as stop:
            return Finished(stop.value)
        return Suspended(eff)


__all__ = ["TaskMachine", "Step", "Suspended", "Finished"]
