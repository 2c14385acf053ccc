"""
Pieces shared by the React and Svelte component generators.

Both generators take a component path whose last segment is the PascalCase
component name, e.g. ``src/components/Button`` creates ``Button``.
"""

from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import Final, Literal

from pydantic import BaseModel, ConfigDict, model_validator

from summon.combinators import if_else_m
from summon.effects.prompt import PromptDefinition
from summon.primitives import append_file, exists, read_file
from summon.task import Task, bind, pure
from summon.template import kebab_case


Framework = Literal["react", "svelte"]

GENERATOR_VERSION: Final[str] = "0.1.0"
TEMPLATES_DIR: Final[Path] = Path(__file__).parent / "templates"

_PASCAL_CASE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")


def is_pascal_case(value: str) -> bool:
    return _PASCAL_CASE.match(value) is not None


def validate_component_path(value: object) -> bool | str:
    """Prompt validator: True, or the reason the path is rejected."""
    if not isinstance(value, str) or not value.strip():
        return "Component path is required"
    if not is_pascal_case(component_name(value)):
        return "Component name must be in PascalCase (e.g., MyComponent)"
    return True


def component_name(component_path: str) -> str:
    return posixpath.basename(component_path.rstrip("/"))


def parent_dir(component_path: str) -> str:
    return posixpath.dirname(component_path.rstrip("/")) or "."


class ComponentAnswers(BaseModel):
    """Answers common to every component generator.

    Optional features default to off when a caller builds answers directly.
    """

    component_path: str
    with_styles: bool = False
    with_stories: bool = False
    with_ssr_tests: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _validate(self) -> ComponentAnswers:
        """Reject paths whose last segment is not a PascalCase name."""
        verdict = validate_component_path(self.component_path)
        if verdict is not True:
            raise ValueError(verdict)
        return self

    @property
    def name(self) -> str:
        return component_name(self.component_path)

    @property
    def directory(self) -> str:
        return self.component_path.rstrip("/")


def component_path_prompt(framework: Framework) -> PromptDefinition:
    """The positional component path prompt, with a framework-specific default."""
    default = (
        "src/components/MyComponent" if framework == "react" else "src/lib/components/MyComponent"
    )
    return PromptDefinition(
        name="component_path",
        message="Component path:",
        type="text",
        default=default,
        validate=validate_component_path,
        group="Component",
        positional=True,
    )


SHARED_PROMPTS: Final[tuple[PromptDefinition, ...]] = (
    PromptDefinition(
        name="with_styles",
        message="Include styles?",
        type="confirm",
        default=True,
        group="Options",
    ),
    PromptDefinition(
        name="with_stories",
        message="Include Storybook stories?",
        type="confirm",
        default=True,
        group="Options",
    ),
    PromptDefinition(
        name="with_ssr_tests",
        message="Include SSR tests?",
        type="confirm",
        default=True,
        group="Options",
    ),
)


def template_context(answers: ComponentAnswers, framework: Framework) -> dict[str, object]:
    """Variables every component template can use."""
    return {
        "name": answers.name,
        "kebab_name": kebab_case(answers.name),
        "generator_name": f"summon:component-{framework}",
        "version": GENERATOR_VERSION,
        "with_styles": answers.with_styles,
        "with_stories": answers.with_stories,
        "with_ssr_tests": answers.with_ssr_tests,
    }


def template_source(framework: Framework, filename: str) -> str:
    return str(TEMPLATES_DIR / framework / filename)


def append_export_to_parent_index(directory: str, name: str) -> Task[None]:
    """Export the component from ``<directory>/index.ts``.

    An existing index is read first and left alone when it already has the exact
    export line. A missing index is created by the append itself.
    """
    index_path = posixpath.join(directory, "index.ts")
    export_line = f'export * from "./{name}/index.js";\n'

    def _append_unless_exported(content: str) -> Task[None]:
        if export_line.strip() in (line.strip() for line in content.splitlines()):
            return pure(None)
        separator = "" if not content or content.endswith("\n") else "\n"
        return append_file(index_path, separator + export_line)

    return if_else_m(
        exists(index_path),
        bind(read_file(index_path), _append_unless_exported),
        append_file(index_path, export_line, create_if_missing=True),
    )


__all__ = [
    "Framework",
    "GENERATOR_VERSION",
    "TEMPLATES_DIR",
    "ComponentAnswers",
    "is_pascal_case",
    "validate_component_path",
    "component_name",
    "parent_dir",
    "component_path_prompt",
    "SHARED_PROMPTS",
    "template_context",
    "template_source",
    "append_export_to_parent_index",
]
