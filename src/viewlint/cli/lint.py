"""Lint command: check one template against the policy."""

from pathlib import Path
from typing import List, Optional

import typer

from .. import api
from ..exceptions import ViewlintError
from ..models import Dialect
from ..scanning import read_template
from . import app
from ._common import FORMAT_HELP, check_format, emit, err_console, resolve_config


def _parse_fields(values: List[str]) -> dict[str, str]:
    fields = {}
    for item in values:
        name, sep, field_type = item.partition("=")
        if not sep or not name or not field_type:
            err_console.print(f"[red]Invalid --field {item!r}[/red], expected NAME=TYPE")
            raise typer.Exit(2)
        fields[name.strip()] = field_type.strip()
    return fields


@app.command()
def lint(
    file: Path = typer.Argument(
        ...,
        help="Template file to lint",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    strict: bool = typer.Option(False, "--strict", help="Enable strict-only rules"),
    template_type: str = typer.Option(
        "auto", "--type", "-t", help="Template type: auto, blade or antlers"
    ),
    field: List[str] = typer.Option(
        [], "--field", "-f", help="Field catalog entry NAME=TYPE (repeatable)"
    ),
    no_fix: bool = typer.Option(False, "--no-fix", help="Do not generate auto-fixes"),
    no_perf: bool = typer.Option(False, "--no-perf", help="Skip the performance section"),
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
    Lint a single template.

    Exits with status 1 when the template has violations.

    [bold cyan]Examples:[/bold cyan]

      viewlint lint resources/views/home.blade.php

      viewlint lint page.antlers.html --strict --field published_at=date

      viewlint lint page.blade.php --format github
    """
    check_format(output_format)
    cfg = resolve_config(config, verbose=verbose, quiet=not verbose and output_format != "rich")

    try:
        source = read_template(file, template_type)
    except ViewlintError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    outcome = api.lint(
        source.text,
        strict_mode=strict,
        auto_fix=not no_fix,
        performance_analysis=not no_perf,
        template_type="auto" if source.dialect == Dialect.UNKNOWN else source.dialect.value,
        fields=_parse_fields(field),
        policy=cfg.policy,
        heuristics=cfg.heuristics,
    )
    emit(outcome, output_format, source=str(file))
    if not outcome.data.ok:
        raise typer.Exit(1)
