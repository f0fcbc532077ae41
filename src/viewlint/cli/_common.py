"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..exceptions import ConfigurationError
from ..formatters import FORMATTERS, get_formatter
from ..logging_config import setup_logging
from ..models import Outcome

err_console = Console(stderr=True)

FORMAT_HELP = f"Output format: {', '.join(FORMATTERS)}"


def resolve_config(
    config: Optional[Path] = None, verbose: bool = False, quiet: bool = False
) -> AnalysisConfig:
    """Set up logging and build the configuration from CLI options."""
    setup_logging(verbose=verbose, quiet=quiet)
    overrides = {}
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    try:
        return load_config(config_file=config, **overrides)
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2)


def check_format(output_format: str) -> str:
    if output_format not in FORMATTERS:
        err_console.print(
            f"[red]Unknown format {output_format!r}.[/red] Choose from: {', '.join(sorted(FORMATTERS))}"
        )
        raise typer.Exit(2)
    return output_format


def emit(outcome: Outcome, output_format: str, source: Optional[str] = None) -> None:
    """Render a successful outcome, or report a failed one and exit 2."""
    if not outcome.success:
        err_console.print(f"[red]Error:[/red] {outcome.message}")
        for key, value in outcome.context.items():
            err_console.print(f"  [dim]{key}:[/dim] {value}")
        raise typer.Exit(2)
    if outcome.message:
        err_console.print(f"[yellow]{outcome.message}[/yellow]")
    get_formatter(output_format).render(outcome.data, source)
