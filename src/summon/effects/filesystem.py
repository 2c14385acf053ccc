"""
File-system Effect ADTs.

Frozen dataclasses describing every mutation a generator can request on the
file system. None of them perform I/O; the live interpreter does.

Type Safety:
    - All effect types are frozen dataclasses (immutable)
    - Literal discriminators enable exhaustive pattern matching
    - __post_init__ validation rejects empty paths at construction
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


def _require_path(kind: str, name: str, value: str) -> None:
    if not value:
        raise ValueError(f"{kind}: {name} must be a non-empty path")


@dataclass(frozen=True)
class WriteFile:
    """Write ``content`` to ``path``, creating parent directories.

    Attributes:
        path: Destination file path.
        content: Full file content (UTF-8 text).
        kind: Discriminator for pattern matching. Always "WriteFile".
    """

    path: str
    content: str
    kind: Literal["WriteFile"] = "WriteFile"

    def __post_init__(self) -> None:
        _require_path(self.kind, "path", self.path)


@dataclass(frozen=True)
class AppendFile:
    """Append ``content`` to ``path``.

    Attributes:
        path: File to append to.
        content: Text to append.
        create_if_missing: Create an empty file first when ``path`` does not exist.
        kind: Discriminator for pattern matching. Always "AppendFile".
    """

    path: str
    content: str
    create_if_missing: bool = True
    kind: Literal["AppendFile"] = "AppendFile"

    def __post_init__(self) -> None:
        _require_path(self.kind, "path", self.path)


@dataclass(frozen=True)
class MakeDir:
    """Create a directory (and its parents when ``recursive``)."""

    path: str
    recursive: bool = True
    kind: Literal["MakeDir"] = "MakeDir"

    def __post_init__(self) -> None:
        _require_path(self.kind, "path", self.path)


@dataclass(frozen=True)
class CopyFile:
    """Copy a single file, creating the destination's parent directory."""

    source: str
    dest: str
    kind: Literal["CopyFile"] = "CopyFile"

    def __post_init__(self) -> None:
        _require_path(self.kind, "source", self.source)
        _require_path(self.kind, "dest", self.dest)


@dataclass(frozen=True)
class CopyDirectory:
    """Recursively copy a directory tree."""

    source: str
    dest: str
    kind: Literal["CopyDirectory"] = "CopyDirectory"

    def __post_init__(self) -> None:
        _require_path(self.kind, "source", self.source)
        _require_path(self.kind, "dest", self.dest)


@dataclass(frozen=True)
class DeleteFile:
    """Delete a single file. Fails when the file does not exist."""

    path: str
    kind: Literal["DeleteFile"] = "DeleteFile"

    def __post_init__(self) -> None:
        _require_path(self.kind, "path", self.path)


@dataclass(frozen=True)
class DeleteDirectory:
    """Recursively delete a directory. A missing directory is not an error."""

    path: str
    kind: Literal["DeleteDirectory"] = "DeleteDirectory"

    def __post_init__(self) -> None:
        _require_path(self.kind, "path", self.path)


FileSystemEffect = (
    WriteFile | AppendFile | MakeDir | CopyFile | CopyDirectory | DeleteFile | DeleteDirectory
)


__all__ = [
    "WriteFile",
    "AppendFile",
    "MakeDir",
    "CopyFile",
    "CopyDirectory",
    "DeleteFile",
    "DeleteDirectory",
    "FileSystemEffect",
]
