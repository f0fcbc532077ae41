"""PerformanceAnalyzer: runs every detector over one template."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..config import DEFAULT_HEURISTICS, HeuristicConfig
from ..logging_config import get_logger
from ..metrics import collect_metrics, estimate_render_time
from ..models import Finding, Severity, TemplateAnalysis, TemplateSource
from .caching import find_caching_opportunities
from .context import TemplateContext
from .edge_cases import detect_edge_cases, referenced_partials
from .loops import (
    detect_n_plus_one,
    detect_nested_loops,
    detect_query_in_loop,
    detect_unpaginated_loops,
)
from .patterns import ISSUE_DETECTORS, OPTIMIZATION_DETECTORS

logger = get_logger(__name__)

Detector = Callable[[TemplateContext], list[Finding]]


@dataclass(frozen=True)
class AnalysisOptions:
    check_n_plus_one: bool = True
    analyze_loops: bool = True
    suggest_caching: bool = True
    include_partials: bool = True
    complexity_threshold: float = 50.0

    def __post_init__(self) -> None:
        if self.complexity_threshold < 0:
            raise ValueError("complexity_threshold must be non-negative")


DEFAULT_OPTIONS = AnalysisOptions()


class PerformanceAnalyzer:
    """Analyze templates for performance issues and optimization opportunities.

    The analyzer is stateless between calls; ``analyze`` may be called for
    any number of templates in any order.
    """

    def __init__(self, heuristics: HeuristicConfig = DEFAULT_HEURISTICS):
        self.heuristics = heuristics

    def detectors(self, options: AnalysisOptions) -> list[Detector]:
        """Issue detectors enabled by ``options``, in report order."""
        enabled: list[Detector] = []
        if options.check_n_plus_one:
            enabled += [detect_n_plus_one, detect_query_in_loop]
        if options.analyze_loops:
            enabled += [detect_nested_loops, detect_unpaginated_loops]
        enabled += ISSUE_DETECTORS
        return enabled

    def analyze(
        self, source: TemplateSource, options: AnalysisOptions = DEFAULT_OPTIONS
    ) -> TemplateAnalysis:
        """Analyze a single template.

        Parameters
        ----------
        source : TemplateSource
            Template text with its resolved dialect.
        options : AnalysisOptions
            Which detector groups to run and the complexity threshold.

        Returns
        -------
        TemplateAnalysis
            Issues, caching opportunities, optimizations, edge cases,
            partials and the render-time estimate for this template.
        """
        ctx = TemplateContext(source, self.heuristics)
        metrics = collect_metrics(source.text, source.dialect, self.heuristics)

        issues: list[Finding] = []
        if metrics.score > options.complexity_threshold:
            issues.append(
                ctx.finding(
                    "high_complexity",
                    Severity.WARNING,
                    f"Template complexity score ({metrics.score}) exceeds threshold "
                    f"({options.complexity_threshold})",
                    suggestion="Break the template into smaller partials or components",
                    score=metrics.score,
                    factors=list(metrics.factors),
                )
            )
        for detector in self.detectors(options):
            issues.extend(detector(ctx))

        caching = find_caching_opportunities(ctx) if options.suggest_caching else []
        optimizations = [f for detector in OPTIMIZATION_DETECTORS for f in detector(ctx)]
        partials = referenced_partials(source.text, source.dialect) if options.include_partials else []

        analysis = TemplateAnalysis(
            source=source,
            metrics=metrics,
            issues=issues,
            caching_opportunities=caching,
            optimizations=optimizations,
            edge_cases=detect_edge_cases(source.text, source.dialect, source.path, self.heuristics),
            partials=partials,
            estimated_render_time_ms=estimate_render_time(metrics, issues, self.heuristics),
        )
        logger.debug(
            f"{source.path}: {len(issues)} issues, {len(optimizations)} optimizations, "
            f"~{analysis.estimated_render_time_ms}ms"
        )
        return analysis
