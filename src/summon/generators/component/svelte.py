"""Svelte 5 component generator: ``component/svelte``.

Styles live in the component's ``<style>`` block rather than a separate
file. Stories are Svelte CSF by default, TypeScript when ``use_ts_stories``.
"""

from __future__ import annotations

import posixpath

from summon.combinators import sequence_, when
from summon.effects.prompt import PromptDefinition
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


class SvelteComponentAnswers(ComponentAnswers):
    use_ts_stories: bool = False


USE_TS_STORIES_PROMPT = PromptDefinition(
    name="use_ts_stories",
    message="Use TypeScript stories format? (otherwise Svelte CSF)",
    type="confirm",
    default=False,
    when=lambda answers: answers.get("with_stories") is True,
    group="Options",
)


def generate(answers: SvelteComponentAnswers) -> Task[None]:
    name = answers.name
    directory = answers.directory
    variables = template_context(answers, "svelte")
    svelte_stories = answers.with_stories and not answers.use_ts_stories
    ts_stories = answers.with_stories and answers.use_ts_stories

    def render(filename: str, dest: str) -> Task[None]:
        source = template_source("svelte", filename)
        return template(source, posixpath.join(directory, dest), variables)

    return sequence_(
        [
            info(f"Generating Svelte component: {name}"),
            debug("Creating component directory"),
            mkdir(directory),
            render("component.svelte.tmpl", f"{name}.svelte"),
            render("types.ts.tmpl", "types.ts"),
            render("index.ts.tmpl", "index.ts"),
            render("test.ts.tmpl", f"{name}.svelte.test.ts"),
            when(answers.with_ssr_tests, render("ssr.test.ts.tmpl", f"{name}.ssr.test.ts")),
            when(svelte_stories, render("stories.svelte.tmpl", f"{name}.stories.svelte")),
            when(ts_stories, render("stories.ts.tmpl", f"{name}.stories.ts")),
            debug("Updating parent index.ts with export"),
            append_export_to_parent_index(parent_dir(directory), name),
            info(f"Created {name} component at {directory}"),
        ]
    )


SVELTE_COMPONENT: GeneratorDefinition[SvelteComponentAnswers] = GeneratorDefinition(
    meta=GeneratorMeta(
        name="component/svelte",
        description="Generate a Svelte 5 component with TypeScript, tests, and stories",
        version=GENERATOR_VERSION,
        help=(
            "Generate a Svelte 5 component with TypeScript, tests, and stories.\n"
            "\n"
            "The component name is the last segment of the path and must be PascalCase:\n"
            "'src/lib/components/Button' creates a 'Button' component."
        ),
        examples=(
            "summon component/svelte src/lib/components/Button",
            "summon component/svelte src/lib/components/Card --with-styles --with-stories",
            "summon component/svelte src/lib/components/Modal --with-stories --use-ts-stories",
        ),
    ),
    prompts=(component_path_prompt("svelte"), *SHARED_PROMPTS, USE_TS_STORIES_PROMPT),
    answers_model=SvelteComponentAnswers,
    generate=generate,
)


__all__ = ["SvelteComponentAnswers", "SVELTE_COMPONENT", "generate"]
