"""Base formatter interface for viewlint output rendering."""

from abc import ABC, abstractmethod
from typing import Optional, Union

from ..models import AnalysisReport, Finding, LintResult, OptimizationPlan

Result = Union[LintResult, AnalysisReport, OptimizationPlan]


def located_findings(result: Result, source: Optional[str] = None) -> list[tuple[str, Finding]]:
    """(path, finding) pairs for results that carry findings.

    Lint findings have no template path of their own; ``source`` fills it in.
    """
    if isinstance(result, LintResult):
        return [(source or "<inline>", f) for f in result.findings]
    if isinstance(result, AnalysisReport):
        return [(f.template or source or "<inline>", f) for f in result.findings]
    return []


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def render(self, result: Result, source: Optional[str] = None) -> None:
        """Write the formatted result to stdout."""
        print(self.format(result, source))

    @abstractmethod
    def format(self, result: Result, source: Optional[str] = None) -> str:
        """Return formatted string representation of a result."""
