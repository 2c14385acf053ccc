"""Testing utilities for Summon Tasks and generators.

Example:
    >>> preview = dry_run(generate(answers))
    >>> checks = EffectAssertions(preview.effects)
    >>> checks.assert_writes_file("src/components/Button/Button.tsx")
    >>> checks.assert_not_writes_file("src/components/Button/Button.stories.tsx")
"""

from __future__ import annotations

from typing import Mapping

from summon.effects.filesystem import WriteFile
from summon.effects.prompt import PromptDefinition, placeholder_answer
from summon.effects.types import Effect


class EffectAssertions:
    """Assertions over an effect list recorded by a dry run.

    Attributes:
        effects: The recorded Effects, in program order.
    """

    def __init__(self, effects: tuple[Effect, ...] | list[Effect]) -> None:
        self.effects: tuple[Effect, ...] = tuple(effects)

    def assert_effect_sequence(self, expected: list[type[Effect]]) -> None:
        """Assert that recorded effects match expected sequence.

        Args:
            expected: List of expected effect types in order.

        Raises:
            AssertionError: If recorded effects don't match expected.
        """
        actual = [type(e) for e in self.effects]
        match actual == expected:
            case True:
                return
            case False:
                raise AssertionError(f"Expected effect sequence {expected}, got {actual}")

    def assert_effect_count(self, effect_type: type[Effect], count: int) -> None:
        """Assert how many effects of ``effect_type`` were recorded."""
        actual = sum(1 for e in self.effects if isinstance(e, effect_type))
        match actual == count:
            case True:
                return
            case False:
                raise AssertionError(
                    f"Expected {count} {effect_type.__name__} effects, got {actual}"
                )

    def assert_contains_effect(self, effect_type: type[Effect]) -> None:
        first_match = next((e for e in self.effects if isinstance(e, effect_type)), None)
        match first_match:
            case None:
                raise AssertionError(f"No effect of type {effect_type.__name__} recorded")
            case _:
                return

    def writes(self) -> list[WriteFile]:
        return [e for e in self.effects if isinstance(e, WriteFile)]

    def assert_writes_file(self, path: str, content: str | None = None) -> None:
        """Assert a WriteFile to ``path`` was recorded, optionally with ``content``.

        Raises:
            AssertionError: If no matching write was recorded.
        """
        match next((w for w in self.writes() if w.path == path), None):
            case None:
                written = [w.path for w in self.writes()]
                raise AssertionError(f"No write to {path}; writes were {written}")
            case WriteFile(content=actual) if content is not None and actual != content:
                raise AssertionError(f"Write to {path} has unexpected content:\n{actual}")
            case _:
                return

    def assert_not_writes_file(self, path: str) -> None:
        if any(w.path == path for w in self.writes()):
            raise AssertionError(f"Unexpected write to {path}")


class ScriptedPromptHandler:
    """PromptHandler that answers from a fixed mapping.

    Prompts missing from ``answers`` get ``placeholder_answer``. Every
    question asked is kept in ``asked``.
    """

    def __init__(self, answers: Mapping[str, object] | None = None) -> None:
        self._answers = dict(answers or {})
        self.asked: list[str] = []

    async def ask(self, definition: PromptDefinition) -> object:
        self.asked.append(definition.name)
        if definition.name in self._answers:
            return self._answers[definition.name]
        return placeholder_answer(definition)


__all__ = ["EffectAssertions", "ScriptedPromptHandler"]
