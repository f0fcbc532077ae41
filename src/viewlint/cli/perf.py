"""Perf command: performance analysis of one template or a directory."""

from pathlib import Path
from typing import Optional

import typer

from .. import api
from . import app
from ._common import FORMAT_HELP, check_format, emit, resolve_config


@app.command()
def perf(
    path: str = typer.Argument(..., help="Template file or directory"),
    template_type: str = typer.Option(
        "auto", "--type", "-t", help="Template type: auto, blade or antlers"
    ),
    threshold: float = typer.Option(
        50.0, "--threshold", help="Complexity score above which a template is flagged", min=0
    ),
    no_partials: bool = typer.Option(False, "--no-partials", help="Do not list referenced partials"),
    no_caching: bool = typer.Option(False, "--no-caching", help="Skip caching opportunities"),
    no_n_plus_one: bool = typer.Option(False, "--no-n-plus-one", help="Skip N+1 and query-in-loop checks"),
    no_loops: bool = typer.Option(False, "--no-loops", help="Skip nesting and pagination checks"),
    fail_under: Optional[int] = typer.Option(
        None, "--fail-under", help="Exit 1 when the performance score is below this value", min=0, max=100
    ),
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
    Analyze template performance.

    Reports N+1 access, queries inside loops, nested and unpaginated loops,
    complexity, caching opportunities and edge-case risks.

    [bold cyan]Examples:[/bold cyan]

      viewlint perf resources/views

      viewlint perf resources/views/blog --threshold 30 --format json

      viewlint perf resources/views --fail-under 60
    """
    check_format(output_format)
    cfg = resolve_config(config, verbose=verbose, quiet=not verbose and output_format != "rich")

    outcome = api.analyze_performance(
        path,
        template_type=template_type,
        include_partials=not no_partials,
        check_n_plus_one=not no_n_plus_one,
        analyze_loops=not no_loops,
        suggest_caching=not no_caching,
        complexity_threshold=threshold,
        config=cfg,
    )
    emit(outcome, output_format, source=path)
    if fail_under is not None and outcome.data.statistics.performance_score < fail_under:
        raise typer.Exit(1)
