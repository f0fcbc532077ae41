"""Exception hierarchy for viewlint."""

from .analysis import AnalysisError, TemplateNotFoundError, UnreadableFileError
from .base import ViewlintError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidOptimizationFocusError,
    InvalidOptionError,
)

__all__ = [
    "ViewlintError",
    "AnalysisError",
    "TemplateNotFoundError",
    "UnreadableFileError",
    "ConfigurationError",
    "InvalidConfigError",
    "InvalidOptionError",
    "InvalidOptimizationFocusError",
]
