"""
Task ADT - lazy, composable descriptions of computations over Effects.

A Task is a tree of frozen nodes. Building one never performs I/O and never
calls a continuation; interpreters walk the tree and decide what happens.

Type Safety:
    - All node types are frozen dataclasses (immutable)
    - Literal discriminators enable exhaustive pattern matching
    - Continuations are plain callables stored in ``Bind``/``Recover`` nodes

Example:
    >>> greeting = bind(effect(ReadFile(path="name.txt")), lambda name: pure(f"hi {name}"))
    >>> dry_run_with(greeting, {ReadFile: lambda _: "Ada"}).value
    'hi Ada'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Literal, TypeVar

from summon.effects.types import Effect
from summon.errors import TaskError, task_error


A = TypeVar("A")
B = TypeVar("B")


@dataclass(frozen=True)
class Pure(Generic[A]):
    """A Task that already holds its value."""

    value: A
    kind: Literal["Pure"] = "Pure"


@dataclass(frozen=True)
class Fail:
    """A Task that has failed with ``error``."""

    error: TaskError
    kind: Literal["Fail"] = "Fail"


@dataclass(frozen=True)
class Perform:
    """A Task that performs one Effect and resolves to its result."""

    effect: Effect
    kind: Literal["Perform"] = "Perform"


@dataclass(frozen=True)
class Bind(Generic[A]):
    """Run ``task``, then the Task ``continuation`` builds from its result.

    Attributes:
        task: The Task that runs first.
        continuation: Called with the first result at interpretation time only.
        kind: Discriminator for pattern matching. Always "Bind".
    """

    task: Task[object]
    continuation: Callable[[object], Task[A]]
    kind: Literal["Bind"] = "Bind"


@dataclass(frozen=True)
class Recover(Generic[A]):
    """Run ``task``; if it fails, run the Task ``handler`` builds from the error."""

    task: Task[A]
    handler: Callable[[TaskError], Task[A]]
    kind: Literal["Recover"] = "Recover"


Task = Pure[A] | Fail | Perform | Bind[A] | Recover[A]

TASK_TYPES: tuple[type, ...] = (Pure, Fail, Perform, Bind, Recover)


# =============================================================================
# Constructors
# =============================================================================


def pure(value: A) -> Task[A]:
    """Lift a value into a Task with no effects."""
    return Pure(value)


def effect(eff: Effect) -> Task[object]:
    """Wrap a single Effect. Nothing is performed until interpretation."""
    return Perform(eff)


def fail(error: TaskError) -> Task[A]:
    """A Task that fails with ``error``."""
    return Fail(error)


def fail_with(code: str, message: str, **context: object) -> Task[A]:
    """A Task that fails with a new TaskError."""
    return Fail(task_error(code, message, **context))


def bind(task: Task[A], fn: Callable[[A], Task[B]]) -> Task[B]:
    """Sequential dependency: feed the result of ``task`` into ``fn``.

    ``fn`` is stored, not called, so the returned Task can be inspected or
    discarded without side effects.
    """
    return Bind(task, fn)


def map_task(task: Task[A], fn: Callable[[A], B]) -> Task[B]:
    """Transform the result of ``task`` with a pure function."""
    return Bind(task, lambda value: Pure(fn(value)))


def ap(task_fn: Task[Callable[[A], B]], task_a: Task[A]) -> Task[B]:
    """Apply a function produced by one Task to the value of another."""
    return bind(task_fn, lambda fn: map_task(task_a, fn))


def recover(task: Task[A], handler: Callable[[TaskError], Task[A]]) -> Task[A]:
    """If ``task`` fails, continue with the Task ``handler`` returns."""
    return Recover(task, handler)


def map_error(task: Task[A], fn: Callable[[TaskError], TaskError]) -> Task[A]:
    """Rewrite the error of a failing Task."""
    return Recover(task, lambda error: Fail(fn(error)))


# =============================================================================
# Inspection
# =============================================================================


def is_task(value: object) -> bool:
    return isinstance(value, TASK_TYPES)


def is_pure(task: Task[A]) -> bool:
    return isinstance(task, Pure)


def is_failed(task: Task[A]) -> bool:
    return isinstance(task, Fail)


def has_effects(task: Task[A]) -> bool:
    """True if the visible part of the tree performs an Effect.

    Continuations are never called, so effects produced only by a
    continuation are not detected.
    """
    match task:
        case Perform():
            return True
        case Bind(task=inner) | Recover(task=inner):
            return has_effects(inner)
        case _:
            return False


# =============================================================================
# Fluent builder
# =============================================================================


class TaskBuilder(Generic[A]):
    """Chainable wrapper around a Task.

    Example:
        >>> built = (
        ...     TaskBuilder.of(2)
        ...     .map(lambda n: n * 21)
        ...     .bind(lambda n: pure(str(n)))
        ...     .unwrap()
        ... )
    """

    def __init__(self, task: Task[A]) -> None:
        self._task = task

    @classmethod
    def of(cls, value: B) -> TaskBuilder[B]:
        return TaskBuilder(pure(value))

    def map(self, fn: Callable[[A], B]) -> TaskBuilder[B]:
        return TaskBuilder(map_task(self._task, fn))

    def bind(self, fn: Callable[[A], Task[B]]) -> TaskBuilder[B]:
        return TaskBuilder(bind(self._task, fn))

    def recover(self, handler: Callable[[TaskError], Task[A]]) -> TaskBuilder[A]:
        return TaskBuilder(recover(self._task, handler))

    def map_error(self, fn: Callable[[TaskError], TaskError]) -> TaskBuilder[A]:
        return TaskBuilder(map_error(self._task, fn))

    def tap(self, fn: Callable[[A], Task[object]]) -> TaskBuilder[A]:
        """Run ``fn``'s Task for its effects and keep the current value."""
        return TaskBuilder(bind(self._task, lambda value: map_task(fn(value), lambda _: value)))

    def and_then(self, next_task: Task[B]) -> TaskBuilder[B]:
        """Discard the current value and continue with ``next_task``."""
        return TaskBuilder(bind(self._task, lambda _: next_task))

    def unwrap(self) -> Task[A]:
        return self._task


def task(value: Task[A]) -> TaskBuilder[A]:
    return TaskBuilder(value)


__all__ = [
    "Task",
    "Pure",
    "Fail",
    "Perform",
    "Bind",
    "Recover",
    "TASK_TYPES",
    "pure",
    "effect",
    "fail",
    "fail_with",
    "bind",
    "map_task",
    "ap",
    "recover",
    "map_error",
    "is_task",
    "is_pure",
    "is_failed",
    "has_effects",
    "TaskBuilder",
    "task",
]
