"""
Prompt Effect ADTs.

A Prompt asks the consumer (terminal UI, test harness) for a value matching a
PromptDefinition. The same definitions drive answer resolution for generators
and the CLI flags derived from them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Mapping


PromptType = Literal["text", "confirm", "select", "multiselect"]

AnswerValidator = Callable[[object], bool | str]
PromptCondition = Callable[[Mapping[str, object]], bool]


@dataclass(frozen=True)
class Choice:
    """One option of a select or multiselect prompt."""

    label: str
    value: str


@dataclass(frozen=True)
class PromptDefinition:
    """Description of one question.

    Attributes:
        name: Answer key; also the source of the CLI flag name.
        message: Question text shown to the user.
        type: "text", "confirm", "select" or "multiselect".
        default: Value used when the user gives no input.
        choices: Options for select and multiselect prompts.
        when: Predicate over the answers resolved so far; the prompt is
            skipped when it returns False.
        validate: Returns True, or an error message for rejected input.
        group: Heading the CLI help groups this prompt's flag under.
        positional: Accept the answer as a positional CLI argument.
    """

    name: str
    message: str
    type: PromptType = "text"
    default: object = None
    choices: tuple[Choice, ...] = ()
    when: PromptCondition | None = None
    validate: AnswerValidator | None = None
    group: str | None = None
    positional: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("PromptDefinition: name must be non-empty")
        if self.type in ("select", "multiselect") and not self.choices:
            raise ValueError(f"PromptDefinition {self.name!r}: {self.type} requires choices")

    @property
    def choice_values(self) -> tuple[str, ...]:
        return tuple(choice.value for choice in self.choices)


@dataclass(frozen=True)
class Prompt:
    """Ask the consumer to answer ``definition``."""

    definition: PromptDefinition
    kind: Literal["Prompt"] = "Prompt"


def placeholder_answer(definition: PromptDefinition) -> object:
    """Deterministic stand-in answer.

    The default when there is one, else the first choice of a select, else
    the empty value for the prompt type.
    """
    if definition.default is not None:
        return definition.default
    match definition.type:
        case "text":
            return ""
        case "select":
            return definition.choices[0].value
        case "confirm":
            return False
        case "multiselect":
            return []


def check_answer(definition: PromptDefinition, value: object) -> str | None:
    """Validate ``value`` against ``definition``.

    Returns:
        None when the value is acceptable, otherwise an error message.
    """
    match definition.type:
        case "confirm":
            if not isinstance(value, bool):
                return f"{definition.name}: expected a boolean, got {value!r}"
        case "text":
            if not isinstance(value, str):
                return f"{definition.name}: expected text, got {value!r}"
        case "select":
            if value not in definition.choice_values:
                allowed = ", ".join(definition.choice_values)
                return f"{definition.name}: {value!r} is not one of {allowed}"
        case "multiselect":
            if not isinstance(value, (list, tuple)):
                return f"{definition.name}: expected a list, got {value!r}"
            unknown = [item for item in value if item not in definition.choice_values]
            if unknown:
                return f"{definition.name}: unknown choices {unknown!r}"

    if definition.validate is None:
        return None
    verdict = definition.validate(value)
    if verdict is True:
        return None
    if isinstance(verdict, str):
        return verdict
    return f"{definition.name}: invalid value {value!r}"


PromptEffect = Prompt


__all__ = [
    "Choice",
    "PromptDefinition",
    "PromptType",
    "Prompt",
    "PromptEffect",
    "placeholder_answer",
    "check_answer",
]
