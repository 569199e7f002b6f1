"""Check command: run every configured rule against a project."""

from pathlib import Path
from typing import Optional

import typer

from ..config import load_config
from ..exceptions import ArchGuardError
from ..logging_config import setup_logging
from . import app
from ._common import console, print_config, resolve_config_path


@app.command()
def check(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Rule file (YAML or TOML), relative to the project unless absolute",
    ),
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        help="Project root to check",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging; print the loaded configuration on failure",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress logging",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        help="Parallel extraction workers",
        min=1,
        max=32,
    ),
):
    """
    Run the architecture rules of a project. Exits 1 on any violation.

    [bold cyan]Examples:[/bold cyan]

      archguard check

      archguard check -p ./service -c rules/archguard.toml

      archguard check --verbose
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    project_root = project.resolve()
    config_path = resolve_config_path(project_root, config)

    try:
        cfg = load_config(config_path)
        result = cfg.run_architecture_tests(project_root, workers=workers)
    except ArchGuardError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)

    if result.passed:
        console.print("[green]Architecture tests passed![/green]")
        return

    console.print("[red]Architecture tests failed![/red]")
    console.print()
    console.print("Violations:")
    for violation in result.violations:
        console.print(f"  - {violation}", markup=False, highlight=False, soft_wrap=True)

    if verbose:
        print_config(cfg)

    raise typer.Exit(1)
