"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="viewlint",
    help="viewlint - static analysis for Blade and Antlers page templates",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .lint import lint as _lint  # noqa: F401, E402
from .perf import perf as _perf  # noqa: F401, E402
from .suggest import suggest as _suggest  # noqa: F401, E402


def main() -> None:
    app()
