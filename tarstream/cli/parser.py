"""CLI module for tarstream.

This file contains the Typer application and CLI command handlers. Config
and logging setup live in ``tarstream.cli.runner``.
"""

from typing import Annotated

import typer

from tarstream import __version__
from tarstream.cli.runner import initialize_config
from tarstream.commands import ExtractCommand

app = typer.Typer(
    name="tarstream",
    help="tarstream - Extract tar and tar.gz streams onto a directory tree",
    add_completion=False,
)


def get_version() -> str:
    """Return the application version."""
    version: str = __version__
    return version


def _version_callback(
    ctx: typer.Context, _param: typer.CallbackParam, value: bool
) -> None:
    """Print the version and exit when the eager --version flag is set."""
    if not value or ctx.resilient_parsing:
        return
    typer.echo(get_version())
    raise typer.Exit


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    _show_version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            is_eager=True,
            callback=_version_callback,
            help="Show the application version",
        ),
    ] = False,
) -> None:
    """Allow a global --version option."""
    if ctx.invoked_subcommand is None:
        return


@app.command(name="version")
def version_cmd() -> None:
    """Print the installed package version."""
    typer.echo(get_version())


@app.command()
def extract(
    archive: Annotated[
        str,
        typer.Argument(help="Archive to extract (.tar or .tar.gz), - for stdin"),
    ],
    dest: Annotated[
        str | None,
        typer.Option(
            "--dest",
            "-d",
            help="Destination directory (default: from config)",
        ),
    ] = None,
    no_progress: Annotated[
        bool,
        typer.Option("--no-progress", help="Do not draw a progress bar"),
    ] = False,
) -> None:
    """Extract a tar or tar.gz archive."""
    config = initialize_config()
    command = ExtractCommand(
        config, archive, destination=dest, show_progress=not no_progress
    )
    if not command.execute():
        typer.echo(f"Error: extraction of {archive} failed")
        raise typer.Exit(1)
