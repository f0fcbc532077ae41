"""GitHub Actions formatter: workflow command annotations."""

from typing import Optional

from ..models import OptimizationPlan, Severity
from .base import BaseFormatter, Result, located_findings

_LEVELS = {
    Severity.CRITICAL: "error",
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
}


def _escape(message: str) -> str:
    """Escape data for a workflow command message."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GithubFormatter(BaseFormatter):
    """Output ``::error`` / ``::warning`` / ``::notice`` annotations."""

    def format(self, result: Result, source: Optional[str] = None) -> str:
        lines: list[str] = []
        if isinstance(result, OptimizationPlan):
            for s in result.suggestions:
                path = s.template_path or source or "<inline>"
                lines.append(f"::notice file={path},line={s.line or 1}::{_escape(f'{s.title} ({s.rule_code})')}")
            return "\n".join(lines)

        for path, f in located_findings(result, source):
            level = _LEVELS[f.severity]
            column = f",col={f.column}" if f.column else ""
            lines.append(f"::{level} file={path},line={f.line}{column}::{_escape(f'[{f.rule_code}] {f.message}')}")
        return "\n".join(lines)
