"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer


def under_root(root: Path, path: Path) -> Path:
    """Interpret a relative CLI path against the packaging root."""
    return path if path.is_absolute() else root / path


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)
