from __future__ import annotations

from pathlib import Path

import typer

from relpack.cli.commands._helpers import exit_with_code, under_root
from relpack.cli.context import build_context
from relpack.core.errors import ErrorCode
from relpack.core.result import Err, Ok
from relpack.output.console import Style
from relpack.output.errors import (
    package_error_exit_code,
    print_archive_warning,
    print_package_error,
)
from relpack.services.manifest import generate_manifest
from relpack.services.packaging import package_all, plan_variants, resolve_single_artifact

ROOT_OPTION = typer.Option(None, "--root", help="Packaging root (default: current directory)")
CONFIG_OPTION = typer.Option(None, "--config", help="Config file (default: <root>/relpack.toml)")


def package(
    root: Path | None = ROOT_OPTION,
    config: Path | None = CONFIG_OPTION,
    out: Path | None = typer.Option(None, "--out", help="Output directory for the archives"),
    keep_going: bool = typer.Option(
        False,
        "--keep-going",
        help="Package remaining variants after a failure instead of stopping",
    ),
) -> None:
    """Build one zip archive per (version, platform) variant."""
    ctx = build_context(root, config)
    console = ctx.console

    report = package_all(
        root=ctx.root,
        config=ctx.config,
        console=console,
        out_dir=under_root(ctx.root, out) if out is not None else None,
        keep_going=keep_going,
        on_warning=lambda w: print_archive_warning(w, console),
        on_error=lambda e: print_package_error(e, console),
    )

    console.newline()
    for variant in report.created:
        console.success(str(variant.archive))

    if report.failures:
        total = len(ctx.config.variants())
        summary = f"{len(report.failures)} of {total} variants failed"
        if report.skipped:
            summary += f", {report.skipped} not attempted"
        console.error(summary)
        exit_with_code(package_error_exit_code(report.failures[0].error))


def plan(
    root: Path | None = ROOT_OPTION,
    config: Path | None = CONFIG_OPTION,
) -> None:
    """Show the archives that would be built and check every artifact directory."""
    ctx = build_context(root, config)
    console = ctx.console
    problems = 0

    for variant in plan_variants(ctx.config):
        console.header(variant.archive_name)
        for source, arcname in variant.static_entries:
            state = "" if (ctx.root / source).is_file() else "  (missing)"
            if state:
                problems += 1
            console.print(f"  {source} -> {arcname}{state}", Style.DIM)
        for target, lib_dir in variant.target_dirs:
            match resolve_single_artifact(ctx.root / lib_dir):
                case Ok(artifact):
                    arcname = f"{ctx.config.archive_root}/{target}/{artifact}"
                    console.print(f"  {lib_dir}/{artifact} -> {arcname}", Style.DIM)
                case Err(error):
                    problems += 1
                    print_package_error(error, console)

    console.newline()
    if problems:
        console.error(f"{problems} input(s) not ready")
        exit_with_code(int(ErrorCode.BUILD_ERROR))
    console.success(f"{len(ctx.config.variants())} variant(s) ready to package")


def manifest(
    root: Path | None = ROOT_OPTION,
    config: Path | None = CONFIG_OPTION,
    dist_dir: Path | None = typer.Option(
        None, "--dist-dir", help="Directory holding the archives (default: configured output dir)"
    ),
    out: Path | None = typer.Option(
        None, "--out", help="Manifest path (default: <dist-dir>/manifest.json)"
    ),
) -> None:
    """Write a manifest.json listing the packaged archives with their sha256."""
    ctx = build_context(root, config)
    dist = under_root(ctx.root, dist_dir or Path(ctx.config.output_dir))
    out_path = under_root(ctx.root, out) if out is not None else dist / "manifest.json"

    try:
        written = generate_manifest(dist_dir=dist, config=ctx.config, out_path=out_path)
    except OSError as e:
        ctx.console.error(str(e))
        exit_with_code(int(ErrorCode.IO_ERROR))
    ctx.console.success(str(written))
