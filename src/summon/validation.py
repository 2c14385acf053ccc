"""Helper utilities for pure, Result-based Pydantic validation."""

from __future__ import annotations

from typing import Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from summon.result import Failure, Result, Success


TModel = TypeVar("TModel", bound=BaseModel)

__all__: list[str] = ["validate_model", "format_validation_error"]


def validate_model(
    model_cls: type[TModel], data: Mapping[str, object]
) -> Result[TModel, ValidationError]:
    """
    Construct a Pydantic model and surface validation issues as a Result.

    Pydantic raises on invalid input; the exception is caught here, at the
    boundary, so answer resolution and settings loading stay expression-oriented.
    """
    try:
        return Success(model_cls.model_validate(dict(data)))
    except ValidationError as exc:
        return Failure(exc)


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into ``field: message`` lines."""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        lines.append(f"{location}: {item['msg']}")
    return "\n".join(lines)
