"""
Tests for Task combinators, checked through the dry-run interpreter.
"""

from __future__ import annotations

import pytest

from summon.combinators import (
    attempt,
    bracket,
    ensure,
    fold,
    if_else,
    if_else_m,
    optional,
    or_else,
    parallel,
    parallel_n,
    race,
    retry,
    sequence,
    sequence_,
    tap,
    tap_error,
    traverse,
    traverse_,
    unless,
    when,
    when_m,
    zip_tasks,
)
from summon.dry_run import dry_run, dry_run_with
from summon.effects import AppendFile, Exists, Log, Parallel, ReadFile, WriteFile
from summon.errors import TaskError
from summon.primitives import append_file, exists, info, read_file, write_file
from summon.result import Failure, Success
from summon.task import Task, fail_with, pure
from tests.helpers import expect_failure, expect_success


class TestSequencing:
    """Tests for sequence and traverse."""

    def test_sequence_collects_in_order(self) -> None:
        assert expect_success(dry_run(sequence([pure(1), pure(2), pure(3)])).result) == [1, 2, 3]

    def test_sequence_empty(self) -> None:
        assert expect_success(dry_run(sequence([])).result) == []

    def test_sequence_stops_at_first_failure(self) -> None:
        """With b failing: a runs, b fails, c never starts."""
        a = write_file("a.txt", "a")
        b = fail_with("B_FAILED", "b broke")
        c = write_file("c.txt", "c")

        preview = dry_run(sequence([a, b, c]))

        assert expect_failure(preview.result).code == "B_FAILED"
        assert preview.effects == (WriteFile("a.txt", "a"),)

    def test_sequence_underscore_discards(self) -> None:
        assert expect_success(dry_run(sequence_([pure(1), pure(2)])).result) is None

    def test_traverse_passes_index(self) -> None:
        built = traverse(["a", "b"], lambda item, index: pure(f"{index}:{item}"))
        assert expect_success(dry_run(built).result) == ["0:a", "1:b"]

    def test_traverse_underscore_effects(self) -> None:
        preview = dry_run(traverse_(["x", "y"], lambda item, _i: write_file(item, item)))
        assert preview.effects == (WriteFile("x", "x"), WriteFile("y", "y"))


class TestConcurrency:
    """Dry-run behaviour of parallel, parallel_n and race."""

    def test_parallel_results_in_input_order(self) -> None:
        built = parallel([pure("a"), pure("b"), pure("c")])
        assert expect_success(dry_run(built).result) == ["a", "b", "c"]

    def test_parallel_effects_flattened_in_declaration_order(self) -> None:
        first = write_file("1.txt", "")
        second = write_file("2.txt", "")
        preview = dry_run(parallel([first, second]))
        assert preview.effects == (
            Parallel((first, second)),
            WriteFile("1.txt", ""),
            WriteFile("2.txt", ""),
        )

    def test_parallel_first_failure_by_declaration(self) -> None:
        """Every branch is evaluated; the earliest declared failure wins."""
        built = parallel(
            [pure(1), fail_with("FIRST", "one"), write_file("x", ""), fail_with("SECOND", "two")]
        )
        preview = dry_run(built)
        assert expect_failure(preview.result).code == "FIRST"
        assert WriteFile("x", "") in preview.effects

    def test_parallel_n_batches(self) -> None:
        built = parallel_n(2, [pure(n) for n in range(5)])
        preview = dry_run(built)
        assert expect_success(preview.result) == [0, 1, 2, 3, 4]
        assert sum(1 for eff in preview.effects if isinstance(eff, Parallel)) == 3

    def test_parallel_n_rejects_zero(self) -> None:
        with pytest.raises(ValueError):
            parallel_n(0, [pure(1)])

    def test_race_settles_with_first_declared(self) -> None:
        preview = dry_run(race([pure("first"), pure("second")]))
        assert expect_success(preview.result) == "first"


class TestConditionals:
    """Tests for when/unless/if_else and their monadic forms."""

    def test_when(self) -> None:
        assert dry_run(when(True, write_file("a", ""))).effects == (WriteFile("a", ""),)
        assert dry_run(when(False, write_file("a", ""))).effects == ()

    def test_unless(self) -> None:
        assert dry_run(unless(True, write_file("a", ""))).effects == ()
        assert dry_run(unless(False, write_file("a", ""))).effects == (WriteFile("a", ""),)

    def test_if_else(self) -> None:
        assert expect_success(dry_run(if_else(False, pure("yes"), pure("no"))).result) == "no"

    def test_when_m_follows_does_not_exist_branch(self) -> None:
        """Exists resolves to False in a plain dry run."""
        preview = dry_run(when_m(exists("index.ts"), write_file("index.ts", "")))
        assert preview.effects == (Exists("index.ts"),)

    def test_if_else_m_with_mock(self) -> None:
        built = if_else_m(
            exists("index.ts"), append_file("index.ts", "x"), write_file("index.ts", "x")
        )
        preview = dry_run_with(built, {Exists: lambda _: True})
        assert preview.effects == (Exists("index.ts"), AppendFile("index.ts", "x"))


class TestErrorHandling:
    """Tests for retry, or_else, optional, attempt and fold."""

    def test_retry_reruns_until_success(self) -> None:
        outcomes = iter([Failure(_error("FLAKY")), Failure(_error("FLAKY")), Success("data")])
        preview = dry_run_with(retry(read_file("a"), 3), {ReadFile: lambda _: next(outcomes)})
        assert expect_success(preview.result) == "data"
        assert len(preview.effects) == 3

    def test_retry_gives_up(self) -> None:
        preview = dry_run_with(
            retry(read_file("a"), 2), {ReadFile: lambda _: Failure(_error("DOWN"))}
        )
        assert expect_failure(preview.result).code == "DOWN"
        assert len(preview.effects) == 2

    def test_or_else(self) -> None:
        built = or_else(fail_with("E", "x"), pure("fallback"))
        assert expect_success(dry_run(built).result) == "fallback"

    def test_optional(self) -> None:
        assert expect_success(dry_run(optional(fail_with("E", "x"))).result) is None
        assert expect_success(dry_run(optional(pure(3))).result) == 3

    def test_attempt_captures_result(self) -> None:
        success = expect_success(dry_run(attempt(pure(1))).result)
        failure = expect_success(dry_run(attempt(fail_with("E", "x"))).result)
        assert success == Success(1)
        assert isinstance(failure, Failure)
        assert failure.error.code == "E"

    def test_fold(self) -> None:
        built = fold(fail_with("E", "x"), lambda value: f"ok {value}", lambda error: error.code)
        assert expect_success(dry_run(built).result) == "E"


class TestResources:
    """Tests for bracket and ensure."""

    def test_bracket_releases_after_failure(self) -> None:
        built: Task[object] = bracket(
            pure("lock"),
            lambda _lock: fail_with("USE_FAILED", "boom"),
            lambda lock: write_file(f"{lock}.released", ""),
        )
        preview = dry_run(built)
        assert expect_failure(preview.result).code == "USE_FAILED"
        assert preview.effects == (WriteFile("lock.released", ""),)

    def test_bracket_returns_use_value(self) -> None:
        built = bracket(pure(2), lambda n: pure(n * 10), lambda _n: info("released"))
        preview = dry_run(built)
        assert expect_success(preview.result) == 20
        assert preview.effects == (Log("info", "released"),)

    def test_ensure_runs_cleanup_on_success_and_failure(self) -> None:
        cleanup = write_file("cleanup", "")
        ok = dry_run(ensure(pure(1), cleanup))
        bad = dry_run(ensure(fail_with("E", "x"), cleanup))
        assert expect_success(ok.result) == 1
        assert expect_failure(bad.result).code == "E"
        assert ok.effects == bad.effects == (WriteFile("cleanup", ""),)


class TestUtilities:
    """Tests for tap, tap_error and zip_tasks."""

    def test_tap(self) -> None:
        preview = dry_run(tap(pure("x"), lambda value: info(f"got {value}")))
        assert expect_success(preview.result) == "x"
        assert preview.effects == (Log("info", "got x"),)

    def test_tap_error_keeps_error(self) -> None:
        preview = dry_run(tap_error(fail_with("E", "x"), lambda error: info(error.code)))
        assert expect_failure(preview.result).code == "E"
        assert preview.effects == (Log("info", "E"),)

    def test_zip_tasks(self) -> None:
        assert expect_success(dry_run(zip_tasks(pure(1), pure("a"))).result) == (1, "a")


def _error(code: str) -> TaskError:
    return TaskError(code=code, message=code.lower())
