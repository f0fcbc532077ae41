"""Suggest command: ranked optimization suggestions with a roadmap."""

from pathlib import Path
from typing import Optional

import typer

from .. import api
from . import app
from ._common import FORMAT_HELP, check_format, emit, resolve_config


@app.command()
def suggest(
    path: str = typer.Argument(..., help="Template file or directory"),
    template_type: str = typer.Option(
        "auto", "--type", "-t", help="Template type: auto, blade or antlers"
    ),
    focus: str = typer.Option(
        "all", "--focus", help="Optimization focus: performance, maintainability, security or all"
    ),
    max_suggestions: int = typer.Option(20, "--max", "-n", help="Maximum suggestions to show", min=0),
    no_examples: bool = typer.Option(False, "--no-examples", help="Omit before/after code examples"),
    unranked: bool = typer.Option(False, "--unranked", help="Keep discovery order instead of ranking"),
    output_format: str = typer.Option("rich", "--format", help=FORMAT_HELP),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging"),
):
    """
    Suggest template optimizations.

    [bold cyan]Examples:[/bold cyan]

      viewlint suggest resources/views

      viewlint suggest resources/views --focus performance --max 10

      viewlint suggest page.antlers.html --format json
    """
    check_format(output_format)
    cfg = resolve_config(config, verbose=verbose, quiet=not verbose and output_format != "rich")

    outcome = api.suggest_optimizations(
        path,
        template_type=template_type,
        optimization_focus=focus,
        include_code_examples=not no_examples,
        prioritize_suggestions=not unranked,
        max_suggestions=max_suggestions,
        config=cfg,
    )
    emit(outcome, output_format, source=path)
