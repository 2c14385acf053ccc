"""
Dry-run interpreter for previewing and testing Tasks without side effects.

The dry run walks a Task with the same machine as the live interpreter but
performs nothing that touches the outside world. Every Effect is recorded in
program order and resolved with a deterministic stand-in:

    ==================  =====================================
    Effect              Stand-in result
    ==================  =====================================
    file mutations      None
    Exec                ExecResult(stdout="", stderr="", 0)
    Prompt              default, first choice or empty value
    ReadFile            ""
    Exists              False
    Glob                []
    ReadContext         value in the dry-run context, or None
    ==================  =====================================

Because reads resolve to empty/false defaults, a Task that branches on a
read (e.g. "append only if the index exists") dry-runs along the "does not
exist" branch unless a mock is supplied.

``Parallel`` and ``Race`` sub-Tasks are walked one after another in
declaration order, so the effect list is stable for snapshot tests.

Example:
    >>> preview = dry_run_with(
    ...     generate(answers),
    ...     {ReadFile: lambda eff: Path(eff.path).read_text()},
    ... )
    >>> [w.path for w in file_writes(preview.effects)]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, TypeVar

from summon.context import TaskContext
from summon.effects.concurrency import Parallel, Race
from summon.effects.context import ReadContext, WriteContext
from summon.effects.describe import affected_paths, assert_never
from summon.effects.filesystem import (
    AppendFile,
    CopyDirectory,
    CopyFile,
    DeleteDirectory,
    DeleteFile,
    MakeDir,
    WriteFile,
)
from summon.effects.logging import Log
from summon.effects.process import Exec, ExecResult
from summon.effects.prompt import Prompt, placeholder_answer
from summon.effects.query import Exists, Glob, ReadFile
from summon.effects.types import ALL_EFFECTS, Effect
from summon.errors import (
    INVALID_TASK,
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


TEffect = TypeVar("TEffect")

MockHandler = Callable[[Effect], object]
MockRegistry = Mapping[type, MockHandler]


@dataclass(frozen=True)
class DryRunResult:
    """Outcome of a dry run.

    Attributes:
        result: ``Success`` with the Task's value or ``Failure`` with its error.
        effects: Every Effect the Task requested, in program order.
    """

    result: Result[object, TaskError]
    effects: tuple[Effect, ...]

    @property
    def ok(self) -> bool:
        return isinstance(self.result, Success)

    @property
    def value(self) -> object:
        """The Task's value.

        Raises:
            TaskExecutionError: If the Task failed.
        """
        match self.result:
            case Success(value):
                return value
            case Failure(error):
                raise TaskExecutionError(error)

    @property
    def error(self) -> TaskError | None:
        match self.result:
            case Failure(error):
                return error
            case _:
                return None


class DryRunInterpreter:
    """Synchronous interpreter that records Effects instead of performing them.

    Attributes:
        mocks: Handlers keyed by Effect class. A handler receives the Effect and
            returns the resolved value, or a ``Success``/``Failure`` directly.
            Recording is unaffected: mocked Effects are still listed.
    """

    def __init__(
        self,
        mocks: MockRegistry | None = None,
        *,
        listener: ExecutionListener | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        self.mocks: dict[type, MockHandler] = dict(mocks or {})
        self._listener: ExecutionListener = listener if listener is not None else LoggingListener()
        self._initial_context = dict(context or {})
        self._context = TaskContext(self._initial_context)
        self._effects: list[Effect] = []

    def run(self, task: Task[object]) -> DryRunResult:
        """Dry-run ``task`` from a fresh context and effect log."""
        self._context = TaskContext(self._initial_context)
        self._effects = []
        result = self._evaluate(task)
        return DryRunResult(result=result, effects=tuple(self._effects))

    def _evaluate(self, task: Task[object]) -> Result[object, TaskError]:
        machine = TaskMachine(task)
        step = machine.start()
        while True:
            match step:
                case Finished(result=result):
                    return result
                case Suspended(effect=eff):
                    step = machine.resume(self._perform(eff))

    def _perform(self, effect: Effect) -> Result[object, TaskError]:
        if not isinstance(effect, ALL_EFFECTS):
            return Failure(
                task_error(INVALID_TASK, f"Not an effect: {effect!r}", value=repr(effect))
            )
        self._effects.append(effect)

        match effect:
            case Parallel(tasks=tasks):
                return collect_results([self._evaluate(branch) for branch in tasks])
            case Race(tasks=tasks):
                outcomes = [self._evaluate(branch) for branch in tasks]
                return outcomes[0]
            case _:
                pass

        handler = self.mocks.get(type(effect))
        if handler is not None:
            return self._call_mock(handler, effect)
        return self._placeholder(effect)

    @staticmethod
    def _call_mock(handler: MockHandler, effect: Effect) -> Result[object, TaskError]:
        try:
            value = handler(effect)
        except Exception as exc:
            return Failure(wrap_exception(code_for_exception(exc), exc, effect=effect.kind))
        match value:
            case Success() | Failure():
                return value
            case _:
                return Success(value)

    def _placeholder(self, effect: Effect) -> Result[object, TaskError]:
        match effect:
            case (
                WriteFile()
                | AppendFile()
                | MakeDir()
                | CopyFile()
                | CopyDirectory()
                | DeleteFile()
                | DeleteDirectory()
            ):
                return Success(None)
            case Exec():
                return Success(ExecResult(stdout="", stderr="", exit_code=0))
            case Prompt(definition=definition):
                return Success(placeholder_answer(definition))
            case ReadFile():
                return Success("")
            case Exists():
                return Success(False)
            case Glob():
                return Success([])
            case Log(level=level, message=message):
                self._listener.on_log(level, message)
                return Success(None)
            case ReadContext(key=key):
                return Success(self._context.read(key))
            case WriteContext(key=key, value=value):
                self._context.write(key, value)
                return Success(None)
            case Parallel() | Race():
                raise AssertionError("composition effects are walked, not resolved")
            case _:
                assert_never(effect)


def dry_run(task: Task[object], *, listener: ExecutionListener | None = None) -> DryRunResult:
    """Record the Effects ``task`` would perform, with default stand-ins."""
    return DryRunInterpreter(listener=listener).run(task)


def dry_run_with(
    task: Task[object],
    mocks: MockRegistry,
    *,
    listener: ExecutionListener | None = None,
) -> DryRunResult:
    """Dry run where ``mocks`` resolve the listed Effect classes."""
    return DryRunInterpreter(mocks, listener=listener).run(task)


# =============================================================================
# Effect-list utilities
# =============================================================================


def collect_effects(task: Task[object]) -> list[Effect]:
    return list(dry_run(task).effects)


def count_effects(effects: tuple[Effect, ...] | list[Effect]) -> dict[str, int]:
    """Number of Effects per kind, in first-seen order."""
    counts: dict[str, int] = {}
    for eff in effects:
        counts[eff.kind] = counts.get(eff.kind, 0) + 1
    return counts


def filter_effects(
    effects: tuple[Effect, ...] | list[Effect], effect_type: type[TEffect]
) -> list[TEffect]:
    return [eff for eff in effects if isinstance(eff, effect_type)]


def file_writes(effects: tuple[Effect, ...] | list[Effect]) -> list[WriteFile]:
    return filter_effects(effects, WriteFile)


def affected_files(effects: tuple[Effect, ...] | list[Effect]) -> list[str]:
    """Sorted, de-duplicated paths created, changed or removed by ``effects``."""
    return sorted({path for eff in effects for path in affected_paths(eff)})


__all__ = [
    "MockHandler",
    "MockRegistry",
    "DryRunResult",
    "DryRunInterpreter",
    "dry_run",
    "dry_run_with",
    "collect_effects",
    "count_effects",
    "filter_effects",
    "file_writes",
    "affected_files",
]
