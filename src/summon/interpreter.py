"""
Live Interpreter - performs Effects against the real world.

The interpreter is the ONLY place where side effects are executed. Generators
and combinators produce Task values; this module walks them, performs each
leaf Effect, and resolves to a ``Result``.

Sub-interpreters each handle one family of Effects and return
``Result[object, TaskError]``. ``LiveInterpreter`` routes leaf Effects to
them and handles ``Parallel``/``Race`` itself by running sub-Tasks through
fresh TaskMachines on the same event loop.

Failure semantics:
    - A failing Effect fails its immediate Task; bind/sequence stop there.
    - ``Parallel`` waits for every branch to settle, then reports the first
      failure in declaration order.
    - ``Race`` settles with the first branch to finish. Losing branches keep
      running in the background and their results are discarded.
    - Nothing is rolled back: effects performed before a failure stay done.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import time
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Mapping, Protocol

from summon.context import TaskContext
from summon.effects.concurrency import Parallel, Race
from summon.effects.context import ContextEffect, ReadContext, WriteContext
from summon.effects.describe import assert_never
from summon.effects.filesystem import (
    AppendFile,
    CopyDirectory,
    CopyFile,
    DeleteDirectory,
    DeleteFile,
    FileSystemEffect,
    MakeDir,
    WriteFile,
)
from summon.effects.logging import Log, LoggingEffect
from summon.effects.process import Exec, ExecResult
from summon.effects.prompt import Prompt, PromptDefinition, check_answer
from summon.effects.query import Exists, Glob, QueryEffect, ReadFile
from summon.effects.types import ALL_EFFECTS, Effect
from summon.errors import (
    COMMAND_NOT_FOUND,
    EXEC_FAILED,
    INVALID_TASK,
    NO_PROMPT_HANDLER,
    PROMPT_FAILED,
    TaskError,
    TaskExecutionError,
    code_for_exception,
    task_error,
    wrap_exception,
)
from summon.listeners import ExecutionListener, LoggingListener
from summon.machine import Finished, Suspended, TaskMachine
from summon.result import Failure, Result, Success, collect_results
from summon.task import Task


logger = logging.getLogger(__name__)


class PromptHandler(Protocol):
    """Answers Prompt effects; implemented by terminal UIs and tests."""

    async def ask(self, definition: PromptDefinition) -> object:
        ...


def _consume_race_loser(task: asyncio.Task[Result[object, TaskError]]) -> None:
    """Retrieve a losing race branch's outcome so it is never reported as unhandled."""
    if task.cancelled():
        return
    match task.exception():
        case None:
            logger.debug("discarded race branch result: %r", task.result())
        case exc:
            logger.debug("race branch raised after losing: %r", exc)


# =============================================================================
# Sub-interpreters
# =============================================================================


class FileSystemInterpreter:
    """Interpreter for file-system and query effects.

    Relative paths are resolved against ``cwd``. Blocking calls run in a
    worker thread via ``asyncio.to_thread`` so concurrent branches interleave.
    """

    def __init__(self, cwd: Path) -> None:
        self._cwd = cwd

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self._cwd / candidate

    async def interpret(self, effect: FileSystemEffect | QueryEffect) -> Result[object, TaskError]:
        """Execute a file-system effect; any exception becomes a TaskError with a stable code."""
        try:
            return Success(await asyncio.to_thread(self._perform, effect))
        except Exception as exc:
            return Failure(
                wrap_exception(
                    code_for_exception(exc),
                    exc,
                    effect=effect.kind,
                    path=getattr(effect, "path", getattr(effect, "source", "")),
                )
            )

    def _perform(self, effect: FileSystemEffect | QueryEffect) -> object:
        match effect:
            case WriteFile(path=path, content=content):
                target = self.resolve(path)
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
                return None
            case AppendFile(path=path, content=content, create_if_missing=create):
                target = self.resolve(path)
                if not create and not target.exists():
                    raise FileNotFoundError(2, "No such file or directory", str(target))
                target.parent.mkdir(parents=True, exist_ok=True)
                with target.open("a", encoding="utf-8") as handle:
                    handle.write(content)
                return None
            case MakeDir(path=path, recursive=recursive):
                self.resolve(path).mkdir(parents=recursive, exist_ok=True)
                return None
            case CopyFile(source=source, dest=dest):
                target = self.resolve(dest)
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(self.resolve(source), target)
                return None
            case CopyDirectory(source=source, dest=dest):
                shutil.copytree(self.resolve(source), self.resolve(dest), dirs_exist_ok=True)
                return None
            case DeleteFile(path=path):
                self.resolve(path).unlink()
                return None
            case DeleteDirectory(path=path):
                target = self.resolve(path)
                if target.exists():
                    shutil.rmtree(target)
                return None
            case ReadFile(path=path):
                return self.resolve(path).read_text(encoding="utf-8")
            case Exists(path=path):
                return self.resolve(path).exists()
            case Glob(pattern=pattern, options=options):
                return self._glob(pattern, self.resolve(options.cwd), options.ignore)
            case _:
                assert_never(effect)

    @staticmethod
    def _glob(pattern: str, base: Path, ignore: tuple[str, ...]) -> list[str]:
        """Sorted POSIX paths of files under ``base`` matching ``pattern``."""
        if not base.is_dir():
            raise NotADirectoryError(20, "Not a directory", str(base))
        matches = sorted(
            match.relative_to(base).as_posix() for match in base.glob(pattern) if match.is_file()
        )
        return [path for path in matches if not _ignored(path, ignore)]


def _ignored(path: str, patterns: tuple[str, ...]) -> bool:
    for pattern in patterns:
        if fnmatchcase(path, pattern):
            return True
        if pattern.startswith("**/") and fnmatchcase(path, pattern[3:]):
            return True
    return False


class ProcessInterpreter:
    """Interpreter for Exec effects.

    Processes are spawned without a shell. A non-zero exit code is returned
    in ExecResult, not treated as a failure.
    """

    def __init__(self, cwd: Path) -> None:
        self._cwd = cwd

    async def interpret(self, effect: Exec) -> Result[object, TaskError]:
        options = effect.options
        cwd = self._cwd if options.cwd is None else self._cwd / options.cwd
        env = {**os.environ, **dict(options.env)} if options.env else None
        try:
            process = await asyncio.create_subprocess_exec(
                effect.command,
                *effect.args,
                cwd=cwd,
                env=env,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except FileNotFoundError as exc:
            return Failure(wrap_exception(COMMAND_NOT_FOUND, exc, command=effect.command))
        except Exception as exc:
            return Failure(wrap_exception(EXEC_FAILED, exc, command=effect.command))

        return Success(
            ExecResult(
                stdout=stdout.decode("utf-8", errors="replace"),
                stderr=stderr.decode("utf-8", errors="replace"),
                exit_code=process.returncode if process.returncode is not None else 0,
            )
        )


class PromptInterpreter:
    """Interpreter for Prompt effects; delegates to a PromptHandler."""

    def __init__(self, handler: PromptHandler | None) -> None:
        self._handler = handler

    async def interpret(self, effect: Prompt) -> Result[object, TaskError]:
        definition = effect.definition
        if self._handler is None:
            return Failure(
                task_error(
                    NO_PROMPT_HANDLER,
                    "No prompt handler provided for interactive prompts",
                    prompt=definition.name,
                )
            )
        try:
            answer = await self._handler.ask(definition)
        except (Exception, KeyboardInterrupt) as exc:
            return Failure(wrap_exception(PROMPT_FAILED, exc, prompt=definition.name))

        match check_answer(definition, answer):
            case None:
                return Success(answer)
            case message:
                return Failure(task_error(PROMPT_FAILED, message, prompt=definition.name))


class LoggingInterpreter:
    """Interpreter for Log effects; forwards them to the listener's ``on_log``."""

    def __init__(self, listener: ExecutionListener) -> None:
        self._listener = listener

    async def interpret(self, effect: LoggingEffect) -> Result[object, TaskError]:
        match effect:
            case Log(level=level, message=message):
                self._listener.on_log(level, message)
                return Success(None)
            case _:
                assert_never(effect)


class ContextInterpreter:
    """Interpreter for context effects over a shared TaskContext."""

    def __init__(self, context: TaskContext) -> None:
        self._context = context

    async def interpret(self, effect: ContextEffect) -> Result[object, TaskError]:
        match effect:
            case ReadContext(key=key):
                return Success(self._context.read(key))
            case WriteContext(key=key, value=value):
                self._context.write(key, value)
                return Success(None)
            case _:
                assert_never(effect)


# =============================================================================
# Master interpreter
# =============================================================================


class LiveInterpreter:
    """Master interpreter composing all effect interpreters.

    Routes leaf Effects to the sub-interpreter for their family and reports
    every Effect to the listener: ``on_effect_start`` before it runs and
    ``on_effect_complete`` with the elapsed milliseconds after it succeeds.

    Example:
        >>> interpreter = LiveInterpreter(cwd=Path("/tmp/project"))
        >>> result = await interpreter.run(write_file("README.md", "# hi\\n"))
        >>> match result:
        ...     case Success(_):
        ...         print("done")
        ...     case Failure(error):
        ...         print(error.code)
    """

    def __init__(
        self,
        *,
        listener: ExecutionListener | None = None,
        prompt_handler: PromptHandler | None = None,
        context: TaskContext | None = None,
        cwd: Path | str | None = None,
    ) -> None:
        base = Path(cwd) if cwd is not None else Path.cwd()
        self._listener: ExecutionListener = listener if listener is not None else LoggingListener()
        self._context = context if context is not None else TaskContext()
        self._filesystem = FileSystemInterpreter(base)
        self._process = ProcessInterpreter(base)
        self._prompt = PromptInterpreter(prompt_handler)
        self._logging = LoggingInterpreter(self._listener)
        self._context_interpreter = ContextInterpreter(self._context)
        self._background: set[asyncio.Task[Result[object, TaskError]]] = set()

    @property
    def context(self) -> TaskContext:
        return self._context

    async def run(self, task: Task[object]) -> Result[object, TaskError]:
        """Interpret ``task`` to completion."""
        machine = TaskMachine(task)
        step = machine.start()
        while True:
            match step:
                case Finished(result=result):
                    return result
                case Suspended(effect=eff):
                    step = machine.resume(await self.perform(eff))

    async def perform(self, effect: Effect) -> Result[object, TaskError]:
        """Perform one Effect with listener notifications."""
        if not isinstance(effect, ALL_EFFECTS):
            return Failure(
                task_error(INVALID_TASK, f"Not an effect: {effect!r}", value=repr(effect))
            )

        self._listener.on_effect_start(effect)
        started = time.perf_counter()
        result = await self._route(effect)
        match result:
            case Success(_):
                self._listener.on_effect_complete(effect, (time.perf_counter() - started) * 1000)
            case Failure(error):
                logger.debug("effect %s failed: %s", effect.kind, error)
        return result

    async def _route(self, effect: Effect) -> Result[object, TaskError]:
        match effect:
            case (
                WriteFile()
                | AppendFile()
                | MakeDir()
                | CopyFile()
                | CopyDirectory()
                | DeleteFile()
                | DeleteDirectory()
                | ReadFile()
                | Exists()
                | Glob()
            ):
                return await self._filesystem.interpret(effect)
            case Exec():
                return await self._process.interpret(effect)
            case Prompt():
                return await self._prompt.interpret(effect)
            case Log():
                return await self._logging.interpret(effect)
            case ReadContext() | WriteContext():
                return await self._context_interpreter.interpret(effect)
            case Parallel(tasks=tasks):
                return await self._run_parallel(tasks)
            case Race(tasks=tasks):
                return await self._run_race(tasks)
            case _:
                assert_never(effect)

    async def _run_parallel(self, tasks: tuple[Task[object], ...]) -> Result[object, TaskError]:
        """Start every branch eagerly; results keep declaration order."""
        results = await asyncio.gather(*(self.run(branch) for branch in tasks))
        return collect_results(list(results))

    async def _run_race(self, tasks: tuple[Task[object], ...]) -> Result[object, TaskError]:
        """First branch to settle wins; losers finish in the background."""
        branches = [asyncio.ensure_future(self.run(branch)) for branch in tasks]
        done, _pending = await asyncio.wait(branches, return_when=asyncio.FIRST_COMPLETED)
        winner = next(branch for branch in branches if branch in done)
        for branch in branches:
            if branch is winner:
                continue
            self._background.add(branch)
            branch.add_done_callback(self._background.discard)
            branch.add_done_callback(_consume_race_loser)
        return winner.result()

    async def drain(self) -> None:
        """Wait for race losers still running in the background."""
        while self._background:
            await asyncio.gather(*tuple(self._background), return_exceptions=True)


async def run_task(
    task: Task[object],
    *,
    listener: ExecutionListener | None = None,
    prompt_handler: PromptHandler | None = None,
    context: Mapping[str, object] | None = None,
    cwd: Path | str | None = None,
) -> object:
    """Run ``task`` live and return its value once race losers have finished.

    Raises:
        TaskExecutionError: If the Task fails.
    """
    interpreter = LiveInterpreter(
        listener=listener,
        prompt_handler=prompt_handler,
        context=TaskContext(context),
        cwd=cwd,
    )
    outcome = await interpreter.run(task)
    await interpreter.drain()
    match outcome:
        case Success(value):
            return value
        case Failure(error):
            raise TaskExecutionError(error)


__all__ = [
    "PromptHandler",
    "FileSystemInterpreter",
    "ProcessInterpreter",
    "PromptInterpreter",
    "LoggingInterpreter",
    "ContextInterpreter",
    "LiveInterpreter",
    "run_task",
]
