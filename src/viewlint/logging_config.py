"""
Logging configuration for viewlint.

Log records go to stderr through rich so that machine-readable output on
stdout (json, github annotations) stays clean. Only the ``viewlint`` logger
tree is configured; the root logger is left to the host application.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "viewlint"


def log_level(verbose: bool = False, quiet: bool = False) -> int:
    """quiet wins over verbose; the default shows warnings such as skipped files."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Attach a rich stderr handler to the viewlint logger.

    Calling it again replaces the previous handler, so each CLI invocation
    gets exactly one.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging

    Returns:
        The configured viewlint logger
    """
    level = log_level(verbose, quiet)
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``viewlint`` tree; ``get_logger(__name__)`` in modules."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
