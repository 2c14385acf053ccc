"""Component generators for React and Svelte."""

from __future__ import annotations

from summon.generators.component.react import REACT_COMPONENT, ReactComponentAnswers
from summon.generators.component.shared import ComponentAnswers
from summon.generators.component.svelte import SVELTE_COMPONENT, SvelteComponentAnswers


__all__ = [
    "ComponentAnswers",
    "ReactComponentAnswers",
    "SvelteComponentAnswers",
    "REACT_COMPONENT",
    "SVELTE_COMPONENT",
]
