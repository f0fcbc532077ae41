"""Quiet formatter: one ``path:line:code`` per finding."""

from typing import Optional

from ..models import OptimizationPlan
from .base import BaseFormatter, Result, located_findings


class QuietFormatter(BaseFormatter):
    """Render one line per finding, or per suggestion for optimization plans."""

    def format(self, result: Result, source: Optional[str] = None) -> str:
        if isinstance(result, OptimizationPlan):
            return "\n".join(
                f"{s.template_path or source or '<inline>'}:{s.line or 0}:{s.rule_code}" for s in result.suggestions
            )
        return "\n".join(f"{path}:{f.line}:{f.rule_code}" for path, f in located_findings(result, source))
