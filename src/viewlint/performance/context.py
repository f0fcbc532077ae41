"""Per-template inputs shared by the performance detectors."""

from dataclasses import dataclass, field
from typing import Optional

from ..config import DEFAULT_HEURISTICS, HeuristicConfig
from ..models import Category, Dialect, Finding, Severity, TemplateSource
from ..scanning.blocks import Block, loop_blocks
from ..scanning.lines import LineIndex


@dataclass
class TemplateContext:
    source: TemplateSource
    heuristics: HeuristicConfig = DEFAULT_HEURISTICS
    lines: LineIndex = field(init=False)
    loops: list[Block] = field(init=False)

    def __post_init__(self) -> None:
        self.lines = LineIndex(self.source.text)
        self.loops = loop_blocks(self.source.text, self.source.dialect, self.lines)

    @property
    def text(self) -> str:
        return self.source.text

    @property
    def dialect(self) -> Dialect:
        return self.source.dialect

    def direct_body(self, block: Block, cut: Optional[frozenset] = None) -> str:
        """Loop body with the bodies of nested loops cut out.

        With ``cut``, only nested loops whose name is in ``cut`` are removed.
        """
        text = self.text
        body_start, body_end = block.opener.end, block.closer.start
        parts = []
        cursor = body_start
        for inner in self.loops:
            if inner is block or not block.contains(inner) or inner.start < cursor:
                continue
            if cut is not None and inner.name not in cut:
                continue
            parts.append(text[cursor:inner.start])
            cursor = inner.end
        parts.append(text[cursor:body_end])
        return "".join(parts)

    def finding(
        self,
        rule_code: str,
        severity: Severity,
        message: str,
        offset: int = 0,
        category: Category = Category.PERFORMANCE,
        evidence: Optional[str] = None,
        suggestion: Optional[str] = None,
        **details,
    ) -> Finding:
        return Finding(
            rule_code=rule_code,
            category=category,
            severity=severity,
            line=self.lines.line_of(offset),
            message=message,
            evidence=evidence,
            suggestion=suggestion,
            template=self.source.path,
            details=details,
        )
