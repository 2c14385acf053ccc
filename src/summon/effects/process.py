"""Process Effect ADTs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class ExecOptions:
    """Options for spawning a process.

    Attributes:
        cwd: Working directory; the interpreter's own when None.
        env: Extra environment variables as (name, value) pairs, merged over os.environ.
    """

    cwd: str | None = None
    env: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Exec:
    """Run ``command`` with ``args`` without a shell.

    A non-zero exit code is not a failure; it is reported in ExecResult.
    Only a process that cannot be spawned fails the Task.
    """

    command: str
    args: tuple[str, ...] = ()
    options: ExecOptions = field(default_factory=ExecOptions)
    kind: Literal["Exec"] = "Exec"

    def __post_init__(self) -> None:
        if not self.command:
            raise ValueError("Exec: command must be non-empty")


@dataclass(frozen=True)
class ExecResult:
    """Captured output of a finished process."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


ProcessEffect = Exec


__all__ = ["Exec", "ExecOptions", "ExecResult", "ProcessEffect"]
