"""React component generator: ``component/react``."""

from __future__ import annotations

import posixpath

from summon.combinators import sequence_, when
from summon.generator import GeneratorDefinition, GeneratorMeta
from summon.generators.component.shared import (
    GENERATOR_VERSION,
    SHARED_PROMPTS,
    ComponentAnswers,
    append_export_to_parent_index,
    component_path_prompt,
    parent_dir,
    template_context,
    template_source,
)
from summon.primitives import debug, info, mkdir
from summon.task import Task
from summon.template import template


class ReactComponentAnswers(ComponentAnswers):
    """Answers for the React generator; same fields as the shared set."""


def generate(answers: ReactComponentAnswers) -> Task[None]:
    name = answers.name
    directory = answers.directory
    variables = template_context(answers, "react")

    def render(filename: str, dest: str) -> Task[None]:
        source = template_source("react", filename)
        return template(source, posixpath.join(directory, dest), variables)

    return sequence_(
        [
            info(f"Generating React component: {name}"),
            mkdir(directory),
            render("component.tsx.tmpl", f"{name}.tsx"),
            render("types.ts.tmpl", "types.ts"),
            render("index.ts.tmpl", "index.ts"),
            render("test.tsx.tmpl", f"{name}.test.tsx"),
            when(answers.with_ssr_tests, render("ssr.test.tsx.tmpl", f"{name}.ssr.test.tsx")),
            when(answers.with_stories, render("stories.tsx.tmpl", f"{name}.stories.tsx")),
            when(answers.with_styles, render("styles.css.tmpl", "styles.css")),
            debug("Updating parent index.ts with export"),
            append_export_to_parent_index(parent_dir(directory), name),
            info(f"Created {name} component at {directory}"),
        ]
    )


REACT_COMPONENT: GeneratorDefinition[ReactComponentAnswers] = GeneratorDefinition(
    meta=GeneratorMeta(
        name="component/react",
        description="Generate a React component with TypeScript, tests, stories, and styles",
        version=GENERATOR_VERSION,
        help=(
            "Generate a React component with TypeScript, tests, stories, and styles.\n"
            "\n"
            "The component name is the last segment of the path and must be PascalCase:\n"
            "'src/components/Button' creates a 'Button' component and exports it from\n"
            "'src/components/index.ts'."
        ),
        examples=(
            "summon component/react src/components/Button",
            "summon component/react --component-path=src/components/Card --with-stories",
            "summon component/react src/components/Modal --no-with-ssr-tests",
            "summon component/react src/components/Button --dry-run",
        ),
    ),
    prompts=(component_path_prompt("react"), *SHARED_PROMPTS),
    answers_model=ReactComponentAnswers,
    generate=generate,
)


__all__ = ["ReactComponentAnswers", "REACT_COMPONENT", "generate"]
