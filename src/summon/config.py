"""
Runtime settings for the command-line front end.

Settings come from ``SUMMON_*`` environment variables and are overridden by
CLI flags. Loading never raises: a bad value is returned as a ``Failure``
carrying the pydantic ValidationError.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from summon.result import Result
from summon.validation import validate_model


LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

ENV_PREFIX = "SUMMON_"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


class SummonSettings(BaseModel):
    """Validated settings for one CLI invocation.

    Attributes:
        log_level: Threshold for the root logging handler.
        interactive: Ask for answers that were not given as flags.
        cwd: Directory generated paths are resolved against.
    """

    log_level: LogLevelName = "INFO"
    interactive: bool = True
    cwd: Path = Field(default_factory=Path.cwd)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: object) -> object:
        match value:
            case str():
                upper = value.strip().upper()
                return "WARNING" if upper == "WARN" else upper
            case _:
                return value


def _parse_flag(raw: str) -> bool | str:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    return raw


def load_settings(environ: Mapping[str, str]) -> Result[SummonSettings, ValidationError]:
    """Build settings from ``SUMMON_LOG_LEVEL``, ``SUMMON_INTERACTIVE`` and ``SUMMON_CWD``."""
    data: dict[str, object] = {}
    if (level := environ.get(f"{ENV_PREFIX}LOG_LEVEL")) is not None:
        data["log_level"] = level
    if (interactive := environ.get(f"{ENV_PREFIX}INTERACTIVE")) is not None:
        data["interactive"] = _parse_flag(interactive)
    if (cwd := environ.get(f"{ENV_PREFIX}CWD")) is not None:
        data["cwd"] = cwd
    return validate_model(SummonSettings, data)


def configure_logging(settings: SummonSettings) -> None:
    """Install a stderr handler on the root logger at ``settings.log_level``."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(message)s",
        force=True,
    )


__all__ = [
    "ENV_PREFIX",
    "LogLevelName",
    "SummonSettings",
    "load_settings",
    "configure_logging",
]
