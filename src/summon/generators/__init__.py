"""
Built-in generator catalog.

Maps generator names to their definitions. The CLI builds one sub-command
per entry.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel

from summon.generator import GeneratorDefinition
from summon.generators.component import REACT_COMPONENT, SVELTE_COMPONENT
from summon.result import Failure, Result, Success


GENERATORS: Mapping[str, GeneratorDefinition[BaseModel]] = MappingProxyType(
    {generator.name: generator for generator in (REACT_COMPONENT, SVELTE_COMPONENT)}
)


def get_generator(name: str) -> Result[GeneratorDefinition[BaseModel], str]:
    """Look up a generator by name; the failure carries the known names."""
    match GENERATORS.get(name):
        case None:
            known = ", ".join(sorted(GENERATORS))
            return Failure(f"Unknown generator {name!r}. Available: {known}")
        case generator:
            return Success(generator)


__all__ = ["GENERATORS", "get_generator"]
