"""Analysis-related exceptions: missing templates, unreadable files."""

from pathlib import Path

from .base import ViewlintError


class AnalysisError(ViewlintError):
    """Base class for analysis-related errors."""
    pass


class TemplateNotFoundError(AnalysisError):
    """Raised when a path resolves to no template at all."""

    def __init__(self, path: str, reason: str = "path does not exist"):
        super().__init__(
            f"Template not found: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class UnreadableFileError(AnalysisError):
    """Raised when a template file exists but cannot be read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot read template: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason
