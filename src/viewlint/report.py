"""Fold per-template analyses into one report.

``ReportAssembler.add`` does constant work per template beyond copying that
template's findings, so arbitrarily large batches stream through it.
"""

from __future__ import annotations

from collections import Counter

from .config import DEFAULT_HEURISTICS, HeuristicConfig
from .models import (
    AnalysisReport,
    ComplexityMetrics,
    EdgeCase,
    Finding,
    ReportStatistics,
    ReportSummary,
    Severity,
    SkippedFile,
    TemplateAnalysis,
)

STATUS_THRESHOLDS = ((80, "excellent"), (60, "good"), (40, "needs_improvement"))


def performance_score(
    critical: int, total: int, render_time_ms: float, heuristics: HeuristicConfig = DEFAULT_HEURISTICS
) -> int:
    """100 - 20 per critical - 10 per other issue - render-time penalty, floored at 0."""
    h = heuristics
    score = 100 - critical * h.score_critical_penalty - (total - critical) * h.score_issue_penalty
    if render_time_ms > h.very_slow_render_ms:
        score -= h.very_slow_render_penalty
    elif render_time_ms > h.slow_render_ms:
        score -= h.slow_render_penalty
    return max(0, int(score))


def performance_status(score: int) -> str:
    for threshold, status in STATUS_THRESHOLDS:
        if score >= threshold:
            return status
    return "poor"


class ReportAssembler:
    def __init__(self, heuristics: HeuristicConfig = DEFAULT_HEURISTICS):
        self.heuristics = heuristics
        self.templates_analyzed = 0
        self.templates_with_issues = 0
        self.render_time_ms = 0.0
        self.findings: list[Finding] = []
        self.caching: list[Finding] = []
        self.optimizations: list[Finding] = []
        self.metrics: dict[str, ComplexityMetrics] = {}
        self.edge_cases: dict[str, list[EdgeCase]] = {}
        self.partials: dict[str, list[str]] = {}
        self.skipped: list[SkippedFile] = []
        self._critical = Counter()

    def add(self, analysis: TemplateAnalysis) -> None:
        path = analysis.source.path
        self.templates_analyzed += 1
        self.render_time_ms += analysis.estimated_render_time_ms
        self.metrics[path] = analysis.metrics
        self.findings.extend(analysis.issues)
        self.caching.extend(analysis.caching_opportunities)
        self.optimizations.extend(analysis.optimizations)
        if analysis.issues:
            self.templates_with_issues += 1
        if analysis.edge_cases:
            self.edge_cases[path] = list(analysis.edge_cases)
        if analysis.partials:
            self.partials[path] = list(analysis.partials)
        self._critical.update(f.rule_code for f in analysis.issues if f.severity == Severity.CRITICAL)

    def skip(self, path: str, reason: str) -> None:
        self.skipped.append(SkippedFile(path, reason))

    def recommendations(self, statistics: ReportStatistics) -> list[str]:
        recommendations = []
        if statistics.critical_issues > 0:
            recommendations.append("Fix critical performance issues immediately to prevent slow page loads")
        if self.caching:
            recommendations.append("Implement suggested caching strategies to improve performance")
        if statistics.estimated_render_time_ms > self.heuristics.slow_render_ms:
            recommendations.append("Consider breaking down complex templates into smaller components")
        if len(self.optimizations) > 5:
            recommendations.append("Address optimization opportunities to improve maintainability")
        return recommendations

    def build(self) -> AnalysisReport:
        critical = sum(self._critical.values())
        total = len(self.findings)
        render_time = round(self.render_time_ms, 1)
        score = performance_score(critical, total, render_time, self.heuristics)
        statistics = ReportStatistics(
            total_issues=total,
            critical_issues=critical,
            performance_score=score,
            estimated_render_time_ms=render_time,
        )
        summary = ReportSummary(
            status=performance_status(score),
            templates_with_issues=self.templates_with_issues,
            most_critical_issues=[code for code, _ in self._critical.most_common(3)],
            estimated_total_render_time=f"{render_time:g}ms",
        )
        return AnalysisReport(
            templates_analyzed=self.templates_analyzed,
            findings=list(self.findings),
            metrics_by_template=dict(self.metrics),
            statistics=statistics,
            summary=summary,
            caching_opportunities=list(self.caching),
            optimizations=list(self.optimizations),
            edge_cases=dict(self.edge_cases),
            partials_by_template=dict(self.partials),
            recommendations=self.recommendations(statistics),
            skipped=list(self.skipped),
        )
