"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relpack.core.config import ConfigError
from relpack.core.errors import ErrorCode
from relpack.output.console import Style
from relpack.services.package_errors import (
    ArchiveIOError,
    ArchiveIOWarning,
    DirectoryContentsError,
    PackageError,
)

if TYPE_CHECKING:
    from relpack.output.console import ConsoleProtocol

__all__ = [
    "package_error_exit_code",
    "print_archive_warning",
    "print_config_error",
    "print_package_error",
]


def print_package_error(error: PackageError, console: ConsoleProtocol) -> None:
    """Print a packaging error, including the directory listing when relevant."""
    match error:
        case DirectoryContentsError(reason="missing" | "not_a_directory"):
            console.error(error.message)
        case DirectoryContentsError(entries=entries):
            console.error(error.message)
            if entries:
                console.print(f"found: {', '.join(entries)}", Style.DIM)
            else:
                console.print("found: (empty)", Style.DIM)
            console.print("hint: remove stale build outputs and rebuild this target", Style.DIM)
        case ArchiveIOError(path=path, message=message):
            console.error(f"{path}: {message}")


def print_archive_warning(warning: ArchiveIOWarning, console: ConsoleProtocol) -> None:
    console.warning(f"{warning.path}: {warning.message}")


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)


def package_error_exit_code(error: PackageError) -> int:
    """Get exit code for a packaging error."""
    match error:
        case DirectoryContentsError():
            return int(ErrorCode.BUILD_ERROR)
        case ArchiveIOError():
            return int(ErrorCode.IO_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.IO_ERROR)
