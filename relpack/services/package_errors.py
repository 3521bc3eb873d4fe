"""Error types reported while packaging a variant."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

__all__ = [
    "ArchiveIOError",
    "ArchiveIOWarning",
    "DirectoryContentsError",
    "PackageError",
]


@dataclass(frozen=True, slots=True)
class DirectoryContentsError:
    """An artifact directory does not hold exactly one file.

    ``entries`` is the sorted listing that was actually found.
    """

    directory: Path
    entries: tuple[str, ...]
    reason: Literal["count", "missing", "not_a_directory", "not_a_file"] = "count"

    @property
    def message(self) -> str:
        match self.reason:
            case "missing":
                return f"Artifact directory not found: {self.directory}"
            case "not_a_directory":
                return f"Artifact path is not a directory: {self.directory}"
            case "not_a_file":
                name = self.entries[0]
                return f"Expected a single file in {self.directory}, but {name} is not a file"
            case _:
                return f"Expected a single file in {self.directory}, but got {len(self.entries)}"


@dataclass(frozen=True, slots=True)
class ArchiveIOWarning:
    """Non-fatal condition raised while writing an archive entry."""

    path: Path
    message: str


@dataclass(frozen=True, slots=True)
class ArchiveIOError:
    """Fatal I/O failure while reading a source file or writing an archive."""

    path: Path
    message: str


PackageError = DirectoryContentsError | ArchiveIOError
