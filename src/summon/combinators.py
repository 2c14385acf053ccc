"""
Task combinators.

Pure functions that build larger Tasks from smaller ones. None of them run
anything; ordering and failure semantics are realised by the interpreters.

Sequencing (``sequence``, ``traverse``) starts each Task only after the
previous one succeeded and stops at the first failure. ``parallel`` and
``race`` wrap their inputs in a single composition Effect.
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from summon.effects.concurrency import Parallel, Race
from summon.errors import RACE_EMPTY, TaskError
from summon.result import Failure, Result, Success
from summon.task import Task, bind, effect, fail, fail_with, map_task, pure, recover


A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")


# =============================================================================
# Sequencing
# =============================================================================


def sequence(tasks: Iterable[Task[A]]) -> Task[list[A]]:
    """Run ``tasks`` left to right, collecting results; stop at the first failure."""
    items = tuple(tasks)

    def step(index: int, collected: list[A]) -> Task[list[A]]:
        if index == len(items):
            return pure(collected)
        return bind(items[index], lambda value: step(index + 1, [*collected, value]))

    return step(0, [])


def sequence_(tasks: Iterable[Task[object]]) -> Task[None]:
    """``sequence`` that discards the results."""
    return map_task(sequence(tasks), lambda _: None)


def traverse(items: Iterable[A], fn: Callable[[A, int], Task[B]]) -> Task[list[B]]:
    """Map each item (with its index) to a Task and ``sequence`` them."""
    return sequence(fn(item, index) for index, item in enumerate(items))


def traverse_(items: Iterable[A], fn: Callable[[A, int], Task[object]]) -> Task[None]:
    return sequence_(fn(item, index) for index, item in enumerate(items))


# =============================================================================
# Concurrency
# =============================================================================


def parallel(tasks: Iterable[Task[A]]) -> Task[list[A]]:
    """Run ``tasks`` concurrently; results keep input order.

    An empty input succeeds immediately with ``[]``.
    """
    items = tuple(tasks)
    if not items:
        return pure([])
    return effect(Parallel(items))


def parallel_n(limit: int, tasks: Iterable[Task[A]]) -> Task[list[A]]:
    """Run ``tasks`` in parallel batches of at most ``limit``, batches in sequence."""
    if limit < 1:
        raise ValueError(f"parallel_n: limit must be >= 1, got {limit}")
    items = tuple(tasks)
    batches = [parallel(items[start : start + limit]) for start in range(0, len(items), limit)]
    return map_task(
        sequence(batches), lambda results: [value for batch in results for value in batch]
    )


def race(tasks: Iterable[Task[A]]) -> Task[A]:
    """The first of ``tasks`` to settle, success or failure, decides the outcome.

    Racing nothing is a malformed Task and fails with ``RACE_EMPTY``.
    """
    items = tuple(tasks)
    if not items:
        return fail_with(RACE_EMPTY, "Cannot race an empty list of tasks")
    return effect(Race(items))


# =============================================================================
# Conditionals
# =============================================================================


def when(condition: bool, task: Task[object]) -> Task[object]:
    return task if condition else pure(None)


def unless(condition: bool, task: Task[object]) -> Task[object]:
    return pure(None) if condition else task


def if_else(condition: bool, on_true: Task[A], on_false: Task[A]) -> Task[A]:
    return on_true if condition else on_false


def when_m(condition: Task[bool], task: Task[object]) -> Task[object]:
    """``when`` with a condition computed by a Task."""
    return bind(condition, lambda value: when(value, task))


def if_else_m(condition: Task[bool], on_true: Task[A], on_false: Task[A]) -> Task[A]:
    return bind(condition, lambda value: if_else(value, on_true, on_false))


# =============================================================================
# Error handling
# =============================================================================


def retry(task: Task[A], max_attempts: int) -> Task[A]:
    """Re-run ``task`` after a failure, up to ``max_attempts`` runs in total."""
    if max_attempts <= 1:
        return task
    return recover(task, lambda _error: retry(task, max_attempts - 1))


def or_else(primary: Task[A], fallback: Task[A]) -> Task[A]:
    return recover(primary, lambda _error: fallback)


def optional(task: Task[A]) -> Task[A | None]:
    """The Task's value, or None if it fails."""
    return recover(map_task(task, lambda value: value), lambda _error: pure(None))


def attempt(task: Task[A]) -> Task[Result[A, TaskError]]:
    """Capture the outcome of ``task`` as a ``Result`` instead of failing."""
    return recover(
        map_task(task, lambda value: Success(value)),
        lambda error: pure(Failure(error)),
    )


def fold(
    task: Task[A],
    on_success: Callable[[A], B],
    on_failure: Callable[[TaskError], B],
) -> Task[B]:
    """Turn both outcomes of ``task`` into a value; the result never fails."""
    return recover(map_task(task, on_success), lambda error: pure(on_failure(error)))


# =============================================================================
# Resources
# =============================================================================


def bracket(
    acquire: Task[R],
    use: Callable[[R], Task[A]],
    release: Callable[[R], Task[object]],
) -> Task[A]:
    """Acquire, use, release. ``release`` runs whether or not ``use`` fails."""

    def with_resource(resource: R) -> Task[A]:
        return recover(
            bind(use(resource), lambda value: map_task(release(resource), lambda _: value)),
            lambda error: bind(release(resource), lambda _: fail(error)),
        )

    return bind(acquire, with_resource)


def ensure(task: Task[A], cleanup: Task[object]) -> Task[A]:
    """Run ``cleanup`` after ``task`` on both success and failure."""
    return recover(
        bind(task, lambda value: map_task(cleanup, lambda _: value)),
        lambda error: bind(cleanup, lambda _: fail(error)),
    )


# =============================================================================
# Utilities
# =============================================================================


def tap(task: Task[A], fn: Callable[[A], Task[object]]) -> Task[A]:
    """Run ``fn``'s Task for its effects and keep ``task``'s value."""
    return bind(task, lambda value: map_task(fn(value), lambda _: value))


def tap_error(task: Task[A], fn: Callable[[TaskError], Task[object]]) -> Task[A]:
    """Run ``fn``'s Task on failure and keep the original error."""
    return recover(task, lambda error: bind(fn(error), lambda _: fail(error)))


def zip_tasks(*tasks: Task[object]) -> Task[tuple[object, ...]]:
    """Run ``tasks`` in sequence and return their values as a tuple."""
    return map_task(sequence(tasks), tuple)


__all__ = [
    "sequence",
    "sequence_",
    "traverse",
    "traverse_",
    "parallel",
    "parallel_n",
    "race",
    "when",
    "unless",
    "if_else",
    "when_m",
    "if_else_m",
    "retry",
    "or_else",
    "optional",
    "attempt",
    "fold",
    "bracket",
    "ensure",
    "tap",
    "tap_error",
    "zip_tasks",
]
