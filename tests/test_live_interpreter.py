"""
Tests for the live interpreter against a real temporary directory.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

from summon.combinators import parallel, race, sequence, sequence_
from summon.context import TaskContext
from summon.dry_run import dry_run
from summon.effects import (
    AppendFile,
    ExecResult,
    MakeDir,
    Parallel,
    PromptDefinition,
    ReadFile,
    WriteFile,
)
from summon.errors import (
    COMMAND_NOT_FOUND,
    CONTINUATION_RAISED,
    ENCODING_ERROR,
    EXEC_FAILED,
    FILE_NOT_FOUND,
    IO_ERROR,
    NO_PROMPT_HANDLER,
    PROMPT_FAILED,
    TaskExecutionError,
)
from summon.interpreter import LiveInterpreter, run_task
from summon.listeners import EffectCompleted, EffectStarted, LogEmitted, RecordingListener
from summon.primitives import (
    append_file,
    copy_directory,
    copy_file,
    delete_directory,
    delete_file,
    exec_,
    exists,
    get_context,
    glob,
    info,
    mkdir,
    prompt,
    prompt_text,
    read_file,
    set_context,
    write_file,
)
from summon.task import Task, bind, fail_with, pure
from summon.testing import ScriptedPromptHandler
from tests.helpers import BrokenPromptHandler, expect_failure, expect_success


class DelayedPromptHandler:
    """Answers each prompt with its own name after a per-prompt delay.

    A prompt whose delay is negative raises EOFError after ``abs(delay)``.
    """

    def __init__(self, delays: dict[str, float]) -> None:
        self.delays = delays
        self.finished: list[str] = []

    async def ask(self, definition: PromptDefinition) -> object:
        delay = self.delays.get(definition.name, 0.0)
        await asyncio.sleep(abs(delay))
        self.finished.append(definition.name)
        if delay < 0:
            raise EOFError(f"{definition.name} closed")
        return definition.name


def _ask(name: str) -> Task[object]:
    return prompt(PromptDefinition(name=name, message=f"{name}?"))


class TestFileSystem:
    """File-system effects performed for real under ``cwd``."""

    @pytest.mark.asyncio
    async def test_write_and_read(self, workspace: Path) -> None:
        interpreter = LiveInterpreter(cwd=workspace)
        built = bind(write_file("src/a.txt", "hello"), lambda _: read_file("src/a.txt"))

        result = await interpreter.run(built)

        assert expect_success(result) == "hello"
        assert (workspace / "src" / "a.txt").read_text(encoding="utf-8") == "hello"

    @pytest.mark.asyncio
    async def test_append_creates_missing_file(self, workspace: Path) -> None:
        interpreter = LiveInterpreter(cwd=workspace)
        await interpreter.run(append_file("index.ts", "one\n"))
        await interpreter.run(append_file("index.ts", "two\n"))
        assert (workspace / "index.ts").read_text(encoding="utf-8") == "one\ntwo\n"

    @pytest.mark.asyncio
    async def test_append_without_create_fails_on_missing(self, workspace: Path) -> None:
        interpreter = LiveInterpreter(cwd=workspace)
        result = await interpreter.run(append_file("index.ts", "x", create_if_missing=False))
        assert expect_failure(result).code == FILE_NOT_FOUND
        assert not (workspace / "index.ts").exists()

    @pytest.mark.asyncio
    async def test_read_missing_file(self, workspace: Path) -> None:
        """The OS error is wrapped with a stable code, its message and traceback."""
        result = await LiveInterpreter(cwd=workspace).run(read_file("missing.txt"))

        error = expect_failure(result)
        assert error.code == FILE_NOT_FOUND
        assert "missing.txt" in error.message
        assert error.stack is not None and "FileNotFoundError" in error.stack
        assert error.context["effect"] == "ReadFile"
        assert isinstance(error.cause, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_mkdir_exists_copy_delete(self, workspace: Path) -> None:
        interpreter = LiveInterpreter(cwd=workspace)
        built = sequence(
            [
                mkdir("a/b"),
                write_file("a/b/file.txt", "data"),
                copy_file("a/b/file.txt", "copy/file.txt"),
                copy_directory("a", "a2"),
                delete_file("a/b/file.txt"),
                exists("a/b/file.txt"),
                exists("copy/file.txt"),
                exists("a2/b/file.txt"),
            ]
        )

        values = expect_success(await interpreter.run(built))
        assert isinstance(values, list)

        assert values[-3:] == [False, True, True]
        assert (workspace / "a" / "b").is_dir()

    @pytest.mark.asyncio
    async def test_delete_directory_tolerates_missing(self, workspace: Path) -> None:
        (workspace / "gone").mkdir()
        (workspace / "gone" / "x").write_text("x", encoding="utf-8")
        interpreter = LiveInterpreter(cwd=workspace)

        expect_success(await interpreter.run(delete_directory("gone")))
        expect_success(await interpreter.run(delete_directory("gone")))

        assert not (workspace / "gone").exists()

    @pytest.mark.asyncio
    async def test_delete_missing_file_fails(self, workspace: Path) -> None:
        result = await LiveInterpreter(cwd=workspace).run(delete_file("nope"))
        assert expect_failure(result).code == FILE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_glob_sorted_with_ignore(self, workspace: Path) -> None:
        for relative in ("b/c.ts", "a.ts", "b/d.md", "node_modules/x.ts"):
            target = workspace / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("", encoding="utf-8")

        result = await LiveInterpreter(cwd=workspace).run(
            glob("**/*.ts", ignore=["node_modules/**"])
        )

        assert expect_success(result) == ["a.ts", "b/c.ts"]

    @pytest.mark.asyncio
    async def test_undecodable_file_is_encoding_error(self, workspace: Path) -> None:
        (workspace / "logo.bin").write_bytes(b"\xff\xfe\x00")

        error = expect_failure(await LiveInterpreter(cwd=workspace).run(read_file("logo.bin")))

        assert error.code == ENCODING_ERROR
        assert dict(error.context) == {"effect": "ReadFile", "path": "logo.bin"}
        assert isinstance(error.cause, UnicodeDecodeError)

    @pytest.mark.asyncio
    async def test_absolute_glob_pattern_is_io_error(self, workspace: Path) -> None:
        error = expect_failure(await LiveInterpreter(cwd=workspace).run(glob("/etc/*")))
        assert error.code == IO_ERROR
        assert error.cause is not None


class TestProcess:
    """Exec effects spawn real processes without a shell."""

    @pytest.mark.asyncio
    async def test_captures_output(self, workspace: Path) -> None:
        result = await LiveInterpreter(cwd=workspace).run(
            exec_(sys.executable, ["-c", "import sys; print('out'); sys.exit(3)"])
        )
        value = expect_success(result)
        assert isinstance(value, ExecResult)
        assert value.stdout.strip() == "out"
        assert value.exit_code == 3
        assert not value.ok

    @pytest.mark.asyncio
    async def test_env_is_merged(self, workspace: Path) -> None:
        result = await LiveInterpreter(cwd=workspace).run(
            exec_(
                sys.executable,
                ["-c", "import os; print(os.environ['SUMMON_TEST_VALUE'])"],
                env={"SUMMON_TEST_VALUE": "42"},
            )
        )
        value = expect_success(result)
        assert isinstance(value, ExecResult)
        assert value.stdout.strip() == "42"

    @pytest.mark.asyncio
    async def test_missing_command(self, workspace: Path) -> None:
        result = await LiveInterpreter(cwd=workspace).run(
            exec_("summon-command-that-does-not-exist")
        )
        error = expect_failure(result)
        assert error.code == COMMAND_NOT_FOUND
        assert error.context["command"] == "summon-command-that-does-not-exist"

    @pytest.mark.asyncio
    async def test_unspawnable_arguments(self, workspace: Path) -> None:
        """An argument the OS cannot accept fails the Task instead of raising."""
        result = await LiveInterpreter(cwd=workspace).run(
            exec_(sys.executable, ["-c", "print(1)\x00"])
        )
        error = expect_failure(result)
        assert error.code == EXEC_FAILED
        assert error.context["command"] == sys.executable


class TestPrompts:
    """Prompt effects go through the injected PromptHandler."""

    @pytest.mark.asyncio
    async def test_without_handler(self, workspace: Path) -> None:
        result = await LiveInterpreter(cwd=workspace).run(prompt_text("name", "Name?"))
        assert expect_failure(result).code == NO_PROMPT_HANDLER

    @pytest.mark.asyncio
    async def test_scripted_answers(self, workspace: Path) -> None:
        handler = ScriptedPromptHandler({"name": "Button"})
        interpreter = LiveInterpreter(cwd=workspace, prompt_handler=handler)
        assert expect_success(await interpreter.run(prompt_text("name", "Name?"))) == "Button"
        assert handler.asked == ["name"]

    @pytest.mark.asyncio
    async def test_invalid_answer(self, workspace: Path) -> None:
        handler = ScriptedPromptHandler({"name": 12})
        interpreter = LiveInterpreter(cwd=workspace, prompt_handler=handler)
        result = await interpreter.run(prompt_text("name", "Name?"))
        assert expect_failure(result).code == PROMPT_FAILED

    @pytest.mark.asyncio
    async def test_handler_exception_is_prompt_failure(self, workspace: Path) -> None:
        interpreter = LiveInterpreter(cwd=workspace, prompt_handler=BrokenPromptHandler())

        error = expect_failure(await interpreter.run(prompt_text("name", "Name?")))

        assert error.code == PROMPT_FAILED
        assert error.message == "terminal went away"
        assert error.context["prompt"] == "name"


class TestSequencingLive:
    """Sequential composition is fail-fast with no rollback."""

    @pytest.mark.asyncio
    async def test_sequence_with_failing_middle(self, workspace: Path) -> None:
        built = sequence_(
            [
                write_file("a.txt", "a"),
                read_file("does-not-exist.txt"),
                write_file("c.txt", "c"),
            ]
        )

        error = expect_failure(await LiveInterpreter(cwd=workspace).run(built))

        assert error.code == FILE_NOT_FOUND
        assert (workspace / "a.txt").exists()
        assert not (workspace / "c.txt").exists()

    @pytest.mark.asyncio
    async def test_raising_continuation(self, workspace: Path) -> None:
        def explode(_value: object) -> Task[object]:
            raise ValueError("bad continuation")

        result = await LiveInterpreter(cwd=workspace).run(bind(pure(1), explode))
        assert expect_failure(result).code == CONTINUATION_RAISED


class TestParallelLive:
    """Parallel branches run concurrently; results keep input order."""

    @pytest.mark.asyncio
    async def test_results_in_input_order(self, workspace: Path) -> None:
        handler = DelayedPromptHandler({"slow": 0.2, "fast": 0.0})
        interpreter = LiveInterpreter(cwd=workspace, prompt_handler=handler)

        result = await interpreter.run(parallel([_ask("slow"), _ask("fast")]))

        assert expect_success(result) == ["slow", "fast"]
        assert handler.finished == ["fast", "slow"]

    @pytest.mark.asyncio
    async def test_first_failure_by_declaration_after_all_settle(self, workspace: Path) -> None:
        """The late failure of branch 0 wins over the early failure of branch 1."""
        handler = DelayedPromptHandler({"late": -0.05})
        interpreter = LiveInterpreter(cwd=workspace, prompt_handler=handler)
        built = parallel([_ask("late"), read_file("missing.txt"), write_file("done.txt", "")])

        error = expect_failure(await interpreter.run(built))

        assert error.code == PROMPT_FAILED
        assert error.context["prompt"] == "late"
        assert (workspace / "done.txt").exists()

    @pytest.mark.asyncio
    async def test_decode_failure_waits_for_siblings(self, workspace: Path) -> None:
        (workspace / "logo.bin").write_bytes(b"\xff\xfe")
        interpreter = LiveInterpreter(cwd=workspace)

        result = await interpreter.run(
            parallel([read_file("logo.bin"), write_file("done.txt", "ok")])
        )

        assert expect_failure(result).code == ENCODING_ERROR
        assert (workspace / "done.txt").read_text(encoding="utf-8") == "ok"


class TestRaceLive:
    """The first branch to settle decides; losers finish in the background."""

    @pytest.mark.asyncio
    async def test_fastest_wins_and_loser_keeps_running(self, workspace: Path) -> None:
        handler = DelayedPromptHandler({"slow": 0.2, "fast": 0.0})
        interpreter = LiveInterpreter(cwd=workspace, prompt_handler=handler)
        built = race(
            [bind(_ask("slow"), lambda _: write_file("slow.txt", "")), _ask("fast")]
        )

        result = await interpreter.run(built)

        assert expect_success(result) == "fast"
        await interpreter.drain()
        assert handler.finished == ["fast", "slow"]
        assert (workspace / "slow.txt").exists()

    @pytest.mark.asyncio
    async def test_fast_failure_wins(self, workspace: Path) -> None:
        handler = DelayedPromptHandler({"slow": 0.2})
        interpreter = LiveInterpreter(cwd=workspace, prompt_handler=handler)

        result = await interpreter.run(race([_ask("slow"), read_file("missing.txt")]))

        assert expect_failure(result).code == FILE_NOT_FOUND
        await interpreter.drain()


class TestListenerAndContext:
    """Listener notifications and the shared context."""

    @pytest.mark.asyncio
    async def test_start_and_complete_events(self, workspace: Path) -> None:
        listener = RecordingListener()
        interpreter = LiveInterpreter(cwd=workspace, listener=listener)

        await interpreter.run(sequence_([mkdir("src"), info("made"), read_file("nope")]))

        kinds = [type(event) for event in listener.events]
        assert kinds == [
            EffectStarted,
            EffectCompleted,
            EffectStarted,
            LogEmitted,
            EffectCompleted,
            EffectStarted,
        ]
        assert listener.completed == [MakeDir("src"), listener.started[1]]
        durations = [e.duration_ms for e in listener.events if isinstance(e, EffectCompleted)]
        assert all(duration >= 0 for duration in durations)

    @pytest.mark.asyncio
    async def test_dry_run_effects_match_live_order(self, workspace: Path) -> None:
        """Without read-dependent branches, dry and live runs see the same effects."""
        built = sequence_(
            [
                mkdir("src"),
                write_file("src/index.ts", "export {};\n"),
                read_file("src/index.ts"),
                append_file("src/index.ts", "// end\n"),
            ]
        )
        listener = RecordingListener()

        await LiveInterpreter(cwd=workspace, listener=listener).run(built)

        assert tuple(listener.started) == dry_run(built).effects
        assert isinstance(listener.started[-1], AppendFile)

    @pytest.mark.asyncio
    async def test_parallel_is_reported_once(self, workspace: Path) -> None:
        listener = RecordingListener()
        built = parallel([write_file("a", ""), write_file("b", "")])
        await LiveInterpreter(cwd=workspace, listener=listener).run(built)
        assert isinstance(listener.started[0], Parallel)
        assert set(listener.started[1:]) == {WriteFile("a", ""), WriteFile("b", "")}

    @pytest.mark.asyncio
    async def test_context_is_shared(self, workspace: Path) -> None:
        context = TaskContext({"name": "Button"})
        interpreter = LiveInterpreter(cwd=workspace, context=context)
        built = bind(get_context("name"), lambda name: set_context("seen", f"{name}!"))

        expect_success(await interpreter.run(built))

        assert context.read("seen") == "Button!"


class TestRunTask:
    """run_task unwraps the value or raises."""

    @pytest.mark.asyncio
    async def test_returns_value(self, workspace: Path) -> None:
        value = await run_task(
            bind(write_file("a.txt", "x"), lambda _: read_file("a.txt")), cwd=workspace
        )
        assert value == "x"

    @pytest.mark.asyncio
    async def test_raises_on_failure(self, workspace: Path) -> None:
        with pytest.raises(TaskExecutionError) as raised:
            await run_task(fail_with("BOOM", "nope"), cwd=workspace)
        assert raised.value.code == "BOOM"

    @pytest.mark.asyncio
    async def test_read_file_effect_type(self, workspace: Path) -> None:
        listener = RecordingListener()
        (workspace / "x").write_text("1", encoding="utf-8")
        await run_task(read_file("x"), cwd=workspace, listener=listener)
        assert listener.started == [ReadFile("x")]

    @pytest.mark.asyncio
    async def test_raises_task_error_for_decode_failure(self, workspace: Path) -> None:
        (workspace / "logo.bin").write_bytes(b"\xff\xfe")
        with pytest.raises(TaskExecutionError) as raised:
            await run_task(read_file("logo.bin"), cwd=workspace)
        assert raised.value.code == ENCODING_ERROR

    @pytest.mark.asyncio
    async def test_race_losers_finish_before_returning(self, workspace: Path) -> None:
        """Every effect of a losing branch has run by the time run_task returns."""
        loser = sequence_(
            [
                exec_(sys.executable, ["-c", "import time; time.sleep(0.3)"]),
                write_file("late.txt", "late"),
            ]
        )

        await run_task(race([loser, info("fast")]), cwd=workspace)

        assert (workspace / "late.txt").read_text(encoding="utf-8") == "late"
