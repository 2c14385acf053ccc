"""
Result type for explicit error handling.

Interpreters never raise for failures that belong to the Task being run;
they return ``Success`` or ``Failure`` and let the caller pattern match.

Usage:
    >>> match run_result:
    ...     case Success(value):
    ...         print(f"Done: {value}")
    ...     case Failure(error):
    ...         print(f"{error.code}: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar


T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Represents a successful result containing a value of type T."""

    value: T


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Represents a failed result containing an error of type E."""

    error: E


Result = Success[T] | Failure[E]


def collect_results(results: list[Result[T, E]]) -> Result[list[T], E]:
    """
    Collect a list of Results into a Result of list.

    The first Failure in list order wins, regardless of which one
    was produced first in time.

    Args:
        results: List of Result values to collect

    Returns:
        Success(list of values) if all succeed, or first Failure
    """
    first_failure = next((result for result in results if isinstance(result, Failure)), None)
    return (
        first_failure
        if isinstance(first_failure, Failure)
        else Success([result.value for result in results if isinstance(result, Success)])
    )
