from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relpack.core.config import CONFIG_FILENAME, PackageConfig, load_config
from relpack.core.errors import ErrorCode
from relpack.core.result import Err
from relpack.output.console import ConsoleProtocol, RichConsole
from relpack.output.errors import print_config_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: PackageConfig
    console: ConsoleProtocol


def build_context(root: Path | None = None, config_path: Path | None = None) -> CLIContext:
    """Resolve the packaging root and load its relpack.toml (defaults if absent)."""
    console = RichConsole()
    try:
        resolved = (root or Path.cwd()).expanduser().resolve()
    except OSError as e:
        console.error(f"invalid --root: {e}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if not resolved.is_dir():
        console.error(f"packaging root is not a directory: {resolved}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    path = config_path if config_path is not None else resolved / CONFIG_FILENAME
    if config_path is not None and not path.exists():
        console.error(f"config file not found: {path}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config_result = load_config(path)
    if isinstance(config_result, Err):
        print_config_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(root=resolved, config=config_result.value, console=console)
