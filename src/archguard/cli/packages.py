"""Packages command: show what extraction sees."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..architecture import Architecture, Layer, LayeredArchitecture
from ..config import load_config
from ..exceptions import ArchGuardError
from ..logging_config import setup_logging
from . import app
from ._common import console


@app.command()
def packages(
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        help="Project root to scan",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Rule file; adds the owning layer of each package",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    List the Go packages of a project with their imports and types.

    [bold cyan]Examples:[/bold cyan]

      archguard packages -p ./service

      archguard packages -c .archguard.yml
    """
    logger = setup_logging(verbose=verbose)
    project_root = project.resolve()

    try:
        layered: Optional[LayeredArchitecture] = None
        if config is not None:
            cfg = load_config(config if config.is_absolute() else project_root / config)
            layered = LayeredArchitecture(*(Layer(lc.name, lc.pattern) for lc in cfg.layers))

        architecture = Architecture(project_root)
        architecture.parse_packages()
    except ArchGuardError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Packages in {project_root}")
    table.add_column("Path", style="cyan", no_wrap=True)
    table.add_column("Name")
    if layered is not None:
        table.add_column("Layer", style="magenta", no_wrap=True)
    table.add_column("Structs", justify="right")
    table.add_column("Interfaces", justify="right")
    table.add_column("Imports")

    for path, package in architecture.packages.items():
        row = [path, package.name]
        if layered is not None:
            layer = layered.layer_of(path)
            row.append(layer.name if layer else "-")
        row += [
            str(len(package.structs)),
            str(len(package.interfaces)),
            "\n".join(dict.fromkeys(package.imports)) or "-",
        ]
        table.add_row(*row)

    console.print(table)
    console.print(f"[dim]{len(architecture.packages)} packages[/dim]")
