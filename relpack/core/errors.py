"""Exit codes for the relpack CLI.

Every failure the packager can report maps to one of these values. They are
used as process exit codes and should remain stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    - 0: Success
    - 1: User error (bad flags, invalid relpack.toml)
    - 3: Build error (artifact directories in an unexpected state)
    - 5: I/O error (unreadable source file, unwritable archive)
    """

    OK = 0
    USER_ERROR = 1
    BUILD_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
