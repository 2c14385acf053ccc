"""
Generator definitions and their lifecycle.

A generator is metadata, a list of prompts, a pydantic model for its answers,
and a pure ``generate(answers) -> Task`` function. One invocation moves
through these states:

    Defined          the GeneratorDefinition value itself
    AnswersResolved  prompts satisfied from provided values, a PromptHandler
                     or defaults, then validated per prompt and by the model
    TaskBuilt        ``generate(answers)`` returned a Task
    Interpreted      a live or dry-run interpreter ran the Task

Generators hold no state between invocations; ``generate`` called twice with
equal answers returns Tasks that dry-run to identical effect lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, Literal, Mapping, TypeVar

from pydantic import BaseModel

from summon.dry_run import DryRunInterpreter
from summon.effects.prompt import PromptDefinition, check_answer
from summon.effects.types import Effect
from summon.errors import TaskError
from summon.interpreter import LiveInterpreter, PromptHandler
from summon.listeners import ExecutionListener
from summon.result import Failure, Result, Success
from summon.task import Task
from summon.validation import format_validation_error, validate_model


TAnswers = TypeVar("TAnswers", bound=BaseModel)


@dataclass(frozen=True)
class GeneratorMeta:
    """Descriptive metadata shown by ``summon list`` and ``--help``."""

    name: str
    description: str
    version: str
    author: str | None = None
    help: str | None = None
    examples: tuple[str, ...] = ()


@dataclass(frozen=True)
class GeneratorDefinition(Generic[TAnswers]):
    """A named, versioned producer of Tasks.

    Attributes:
        meta: Name, description, version and help text.
        prompts: Questions whose answers feed ``answers_model``.
        answers_model: Frozen pydantic model the answers are validated into.
        generate: Pure function from answers to the Task that scaffolds them.
    """

    meta: GeneratorMeta
    prompts: tuple[PromptDefinition, ...]
    answers_model: type[TAnswers]
    generate: Callable[[TAnswers], Task[None]]

    @property
    def name(self) -> str:
        return self.meta.name


# ========== Lifecycle states ==========


@dataclass(frozen=True)
class AnswerValidationFailed:
    """Answers were rejected by a prompt validator or by the answers model.

    Attributes:
        generator: Name of the generator.
        messages: One ``field: reason`` line per problem.
        kind: Discriminator for pattern matching. Always "AnswerValidationFailed".
    """

    generator: str
    messages: tuple[str, ...]
    kind: Literal["AnswerValidationFailed"] = "AnswerValidationFailed"

    def __str__(self) -> str:
        return "\n".join(self.messages)


@dataclass(frozen=True)
class AnswersResolved(Generic[TAnswers]):
    generator: GeneratorDefinition[TAnswers]
    answers: TAnswers
    kind: Literal["AnswersResolved"] = "AnswersResolved"


@dataclass(frozen=True)
class TaskBuilt(Generic[TAnswers]):
    generator: GeneratorDefinition[TAnswers]
    answers: TAnswers
    task: Task[None]
    kind: Literal["TaskBuilt"] = "TaskBuilt"


@dataclass(frozen=True)
class Interpreted(Generic[TAnswers]):
    """Final state of one invocation.

    Attributes:
        result: Outcome of the Task.
        effects: Recorded Effects for a dry run; empty for a live run.
        dry_run: Which interpreter ran the Task.
    """

    generator: GeneratorDefinition[TAnswers]
    answers: TAnswers
    result: Result[object, TaskError]
    effects: tuple[Effect, ...]
    dry_run: bool
    kind: Literal["Interpreted"] = "Interpreted"


# ========== Transitions ==========


async def resolve_answers(
    generator: GeneratorDefinition[TAnswers],
    provided: Mapping[str, object],
    prompt_handler: PromptHandler | None = None,
) -> Result[AnswersResolved[TAnswers], AnswerValidationFailed]:
    """Satisfy every prompt, in declaration order.

    For each prompt whose ``when`` holds for the answers so far, the value is
    taken from ``provided``, else asked through ``prompt_handler``, else the
    prompt's default. Values are checked against the prompt, then the whole
    set is validated by ``generator.answers_model``. A handler that raises
    stops resolution with a failure naming the prompt.
    """
    answers: dict[str, object] = {}
    problems: list[str] = []

    for definition in generator.prompts:
        if definition.when is not None and not definition.when(answers):
            continue
        if definition.name in provided:
            value = provided[definition.name]
        elif prompt_handler is not None:
            try:
                value = await prompt_handler.ask(definition)
            except Exception as exc:
                problems.append(f"{definition.name}: prompt failed: {exc}")
                break
        elif definition.default is not None:
            value = definition.default
        else:
            problems.append(f"{definition.name}: a value is required")
            continue

        match check_answer(definition, value):
            case None:
                answers[definition.name] = value
            case message:
                problems.append(message)

    if problems:
        return Failure(AnswerValidationFailed(generator.name, tuple(problems)))

    prompt_names = {definition.name for definition in generator.prompts}
    extras = {key: value for key, value in provided.items() if key not in prompt_names}
    match validate_model(generator.answers_model, {**extras, **answers}):
        case Success(model):
            return Success(AnswersResolved(generator, model))
        case Failure(error):
            messages = tuple(format_validation_error(error).splitlines())
            return Failure(AnswerValidationFailed(generator.name, messages))


def build_task(resolved: AnswersResolved[TAnswers]) -> TaskBuilt[TAnswers]:
    generator = resolved.generator
    return TaskBuilt(generator, resolved.answers, generator.generate(resolved.answers))


async def interpret(
    built: TaskBuilt[TAnswers],
    *,
    dry_run: bool = False,
    listener: ExecutionListener | None = None,
    prompt_handler: PromptHandler | None = None,
    cwd: Path | str | None = None,
) -> Interpreted[TAnswers]:
    """Run a built Task with the live or dry-run interpreter."""
    if dry_run:
        preview = DryRunInterpreter(listener=listener).run(built.task)
        return Interpreted(
            built.generator, built.answers, preview.result, preview.effects, dry_run=True
        )
    interpreter = LiveInterpreter(listener=listener, prompt_handler=prompt_handler, cwd=cwd)
    result = await interpreter.run(built.task)
    await interpreter.drain()
    return Interpreted(built.generator, built.answers, result, (), dry_run=False)


async def invoke_generator(
    generator: GeneratorDefinition[TAnswers],
    provided: Mapping[str, object],
    *,
    dry_run: bool = False,
    listener: ExecutionListener | None = None,
    prompt_handler: PromptHandler | None = None,
    cwd: Path | str | None = None,
) -> Result[Interpreted[TAnswers], AnswerValidationFailed]:
    """Resolve answers, build the Task and interpret it."""
    match await resolve_answers(generator, provided, prompt_handler):
        case Failure(error):
            return Failure(error)
        case Success(resolved):
            built = build_task(resolved)
            return Success(
                await interpret(
                    built,
                    dry_run=dry_run,
                    listener=listener,
                    prompt_handler=prompt_handler,
                    cwd=cwd,
                )
            )


__all__ = [
    "GeneratorMeta",
    "GeneratorDefinition",
    "AnswerValidationFailed",
    "AnswersResolved",
    "TaskBuilt",
    "Interpreted",
    "resolve_answers",
    "build_task",
    "interpret",
    "invoke_generator",
]
