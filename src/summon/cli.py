"""Command-line front end for the built-in generators.

Usage:
    summon list
    summon <generator> [PATH] [--flag ...] [--dry-run] [--yes] [--verbose] [--cwd DIR]

Every prompt of a generator becomes a flag: ``component_path`` is
``--component-path``, a confirm prompt is ``--with-styles/--no-with-styles``,
a multiselect takes a comma-separated list. A prompt marked positional can
also be given as the first argument.

Examples:
    # Preview a React component without touching the disk
    summon component/react src/components/Button --dry-run

    # Generate non-interactively, taking defaults for anything not given
    summon component/svelte src/lib/components/Card --no-with-stories --yes

Exit codes:
    0: Generated (or previewed) successfully
    1: The generator's Task failed
    2: Invalid arguments or answers
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Callable, Mapping, Sequence, TextIO

from pydantic import BaseModel, ValidationError

from summon.config import SummonSettings, configure_logging, load_settings
from summon.effects.logging import LogLevel
from summon.effects.prompt import PromptDefinition
from summon.effects.types import Effect
from summon.errors import TaskError
from summon.format import effect_label, effect_payload, format_effect_tree, is_visible_effect
from summon.generator import GeneratorDefinition, invoke_generator
from summon.generators import GENERATORS
from summon.interpreter import PromptHandler
from summon.listeners import CompositeListener, LoggingListener
from summon.result import Failure, Result, Success
from summon.validation import format_validation_error, validate_model


EXIT_OK = 0
EXIT_TASK_FAILED = 1
EXIT_INVALID = 2

_POSITIONAL_SUFFIX = "_positional"


# =============================================================================
# Console collaborators
# =============================================================================


class ConsolePromptHandler:
    """Ask prompts on the terminal; blocking reads run in a worker thread."""

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_fn
        self._output = output if output is not None else sys.stdout

    async def ask(self, definition: PromptDefinition) -> object:
        return await asyncio.to_thread(self._ask, definition)

    def _ask(self, definition: PromptDefinition) -> object:
        match definition.type:
            case "confirm":
                hint = "Y/n" if definition.default is True else "y/N"
                raw = self._input(f"{definition.message} ({hint}) ").strip().lower()
                if not raw:
                    return bool(definition.default)
                return raw in ("y", "yes", "true", "1")
            case "select" | "multiselect":
                for index, choice in enumerate(definition.choices, start=1):
                    print(f"  {index}) {choice.label}", file=self._output)
                raw = self._input(f"{definition.message} ").strip()
                if not raw:
                    return definition.default
                picked = [self._choice(definition, item) for item in raw.split(",")]
                return picked if definition.type == "multiselect" else picked[0]
            case "text":
                suffix = f" ({definition.default})" if definition.default is not None else ""
                raw = self._input(f"{definition.message}{suffix} ").strip()
                return raw or definition.default

    @staticmethod
    def _choice(definition: PromptDefinition, raw: str) -> str:
        item = raw.strip()
        if item.isdigit() and 1 <= int(item) <= len(definition.choices):
            return definition.choices[int(item) - 1].value
        return item


class ConsoleProgressListener:
    """Print one line per completed file or process Effect."""

    def __init__(self, output: TextIO | None = None) -> None:
        self._output = output if output is not None else sys.stdout

    def on_effect_start(self, effect: Effect) -> None:
        return None

    def on_effect_complete(self, effect: Effect, duration_ms: float) -> None:
        if is_visible_effect(effect):
            print(f"  ✓ {effect_label(effect):<14}{effect_payload(effect)}", file=self._output)

    def on_log(self, level: LogLevel, message: str) -> None:
        return None


# =============================================================================
# Parser
# =============================================================================


def flag_name(prompt_name: str) -> str:
    return "--" + prompt_name.replace("_", "-")


def _comma_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def add_prompt_arguments(
    parser: argparse.ArgumentParser, generator: GeneratorDefinition[BaseModel]
) -> None:
    """Add one flag per prompt, grouped under the prompt's ``group`` heading.

    Flags default to ``SUPPRESS`` so only values actually given reach the
    parsed namespace.
    """
    groups: dict[str, argparse._ArgumentGroup] = {}
    for definition in generator.prompts:
        heading = definition.group or "Options"
        group = groups.get(heading)
        if group is None:
            group = groups[heading] = parser.add_argument_group(heading)

        if definition.positional:
            parser.add_argument(
                definition.name + _POSITIONAL_SUFFIX,
                nargs="?",
                default=None,
                metavar=definition.name.upper(),
                help=definition.message,
            )

        flag = flag_name(definition.name)
        match definition.type:
            case "confirm":
                group.add_argument(
                    flag,
                    dest=definition.name,
                    action=argparse.BooleanOptionalAction,
                    default=argparse.SUPPRESS,
                    help=definition.message,
                )
            case "select":
                group.add_argument(
                    flag,
                    dest=definition.name,
                    choices=definition.choice_values,
                    default=argparse.SUPPRESS,
                    help=definition.message,
                )
            case "multiselect":
                group.add_argument(
                    flag,
                    dest=definition.name,
                    type=_comma_list,
                    default=argparse.SUPPRESS,
                    help=f"{definition.message} (comma-separated)",
                )
            case "text":
                group.add_argument(
                    flag,
                    dest=definition.name,
                    default=argparse.SUPPRESS,
                    help=definition.message,
                )


def provided_answers(
    args: argparse.Namespace, generator: GeneratorDefinition[BaseModel]
) -> dict[str, object]:
    """Answers given on the command line; a flag wins over the positional form."""
    values = vars(args)
    answers: dict[str, object] = {}
    for definition in generator.prompts:
        if definition.name in values:
            answers[definition.name] = values[definition.name]
        elif values.get(definition.name + _POSITIONAL_SUFFIX) is not None:
            answers[definition.name] = values[definition.name + _POSITIONAL_SUFFIX]
    return answers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="summon",
        description="Scaffold project files from generators",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List available generators")

    for generator in GENERATORS.values():
        meta = generator.meta
        epilog = "\n".join(
            part
            for part in (
                meta.help,
                "Examples:\n" + "\n".join(f"  {line}" for line in meta.examples)
                if meta.examples
                else None,
            )
            if part
        )
        sub = subparsers.add_parser(
            meta.name,
            help=meta.description,
            description=meta.description,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=epilog or None,
        )
        add_prompt_arguments(sub, generator)
        sub.add_argument(
            "--dry-run", action="store_true", help="Show what would be written without writing"
        )
        sub.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help="Do not prompt; use defaults for missing answers",
        )
        sub.add_argument("--verbose", "-v", action="store_true", help="Log every effect")
        sub.add_argument("--cwd", default=None, help="Directory to generate into")
    return parser


# =============================================================================
# Commands
# =============================================================================


def cmd_list(output: TextIO) -> int:
    print("Available generators:", file=output)
    width = max(len(name) for name in GENERATORS)
    for name, generator in sorted(GENERATORS.items()):
        print(f"  {name:<{width}}  {generator.meta.description}", file=output)
    return EXIT_OK


def _report_failure(error: TaskError, errors: TextIO) -> int:
    print(f"✗ {error}", file=errors)
    for key, value in error.context.items():
        print(f"  {key}: {value}", file=errors)
    return EXIT_TASK_FAILED


async def cmd_generate(
    generator: GeneratorDefinition[BaseModel],
    provided: dict[str, object],
    settings: SummonSettings,
    *,
    dry_run: bool,
    prompt_handler: PromptHandler | None,
    output: TextIO,
    errors: TextIO,
) -> int:
    """Run one generator end to end and map the outcome to an exit code."""
    listener = CompositeListener(LoggingListener(), ConsoleProgressListener(output))
    outcome = await invoke_generator(
        generator,
        provided,
        dry_run=dry_run,
        listener=listener,
        prompt_handler=prompt_handler,
        cwd=settings.cwd,
    )
    match outcome:
        case Failure(invalid):
            print(f"✗ Invalid answers for {generator.name}:", file=errors)
            for message in invalid.messages:
                print(f"  {message}", file=errors)
            return EXIT_INVALID
        case Success(interpreted) if interpreted.dry_run:
            print(f"Dry run: {generator.name} (no files were written)", file=output)
            tree = format_effect_tree(interpreted.effects)
            if tree:
                print(tree, file=output)
            match interpreted.result:
                case Failure(error):
                    return _report_failure(error, errors)
                case Success(_):
                    return EXIT_OK
        case Success(interpreted):
            match interpreted.result:
                case Failure(error):
                    return _report_failure(error, errors)
                case Success(_):
                    print(f"✓ {generator.name} finished", file=output)
                    return EXIT_OK


def _settings_for(
    args: argparse.Namespace, environ: Mapping[str, str]
) -> Result[SummonSettings, ValidationError]:
    """Environment settings with command-line flags applied on top."""
    match load_settings(environ):
        case Failure(_) as failure:
            return failure
        case Success(settings):
            overrides: dict[str, object] = {}
            if args.verbose:
                overrides["log_level"] = "DEBUG"
            if args.cwd is not None:
                overrides["cwd"] = args.cwd
            if args.yes:
                overrides["interactive"] = False
            return validate_model(SummonSettings, {**settings.model_dump(), **overrides})


def main(
    argv: Sequence[str] | None = None,
    *,
    environ: dict[str, str] | None = None,
    output: TextIO | None = None,
    errors: TextIO | None = None,
    prompt_handler: PromptHandler | None = None,
) -> int:
    """CLI entry point; returns the process exit code."""
    out = output if output is not None else sys.stdout
    err = errors if errors is not None else sys.stderr
    args = build_parser().parse_args(argv)

    if args.command == "list":
        return cmd_list(out)

    match _settings_for(args, os.environ if environ is None else environ):
        case Failure(invalid_settings):
            print("✗ Invalid settings:", file=err)
            print(format_validation_error(invalid_settings), file=err)
            return EXIT_INVALID
        case Success(loaded):
            settings = loaded
    configure_logging(settings)

    generator = GENERATORS[args.command]
    handler = None
    if settings.interactive:
        handler = prompt_handler if prompt_handler is not None else ConsolePromptHandler()
    return asyncio.run(
        cmd_generate(
            generator,
            provided_answers(args, generator),
            settings,
            dry_run=args.dry_run,
            prompt_handler=handler,
            output=out,
            errors=err,
        )
    )


__all__ = [
    "EXIT_OK",
    "EXIT_TASK_FAILED",
    "EXIT_INVALID",
    "ConsolePromptHandler",
    "ConsoleProgressListener",
    "flag_name",
    "add_prompt_arguments",
    "provided_answers",
    "build_parser",
    "cmd_list",
    "cmd_generate",
    "main",
]
