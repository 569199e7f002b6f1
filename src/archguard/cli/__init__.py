"""CLI entry point, registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="archguard",
    help="archguard - Architecture rules for Go codebases",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _show_version(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]archguard[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def _root(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_show_version,
        is_eager=True,
    ),
):
    """
    Check layer dependencies, interface implementations and method
    parameter types of a Go project against a rule file.
    """


# Import subcommands to register them
from .check import check as _check  # noqa: F401, E402
from .packages import packages as _packages  # noqa: F401, E402


def main() -> None:
    app()
