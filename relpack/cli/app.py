from __future__ import annotations

import typer

from relpack import __version__
from relpack.cli.commands.package import manifest, package, plan

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
    invoke_without_command=True,
)


app.command()(package)
app.command()(plan)
app.command()(manifest)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    # Bare `relpack` packages the current directory with its defaults.
    if ctx.invoked_subcommand is None:
        package(root=None, config=None, out=None, keep_going=False)


def main() -> None:
    app()
