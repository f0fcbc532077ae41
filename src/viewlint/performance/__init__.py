"""Performance and edge-case detectors."""

from .analyzer import DEFAULT_OPTIONS, AnalysisOptions, PerformanceAnalyzer
from .caching import find_caching_opportunities
from .context import TemplateContext
from .edge_cases import detect_edge_cases, referenced_partials, template_name
from .loops import (
    detect_n_plus_one,
    detect_nested_loops,
    detect_query_in_loop,
    detect_unpaginated_loops,
)
from .patterns import ISSUE_DETECTORS, OPTIMIZATION_DETECTORS

__all__ = [
    "AnalysisOptions",
    "DEFAULT_OPTIONS",
    "ISSUE_DETECTORS",
    "OPTIMIZATION_DETECTORS",
    "PerformanceAnalyzer",
    "TemplateContext",
    "detect_edge_cases",
    "detect_n_plus_one",
    "detect_nested_loops",
    "detect_query_in_loop",
    "detect_unpaginated_loops",
    "find_caching_opportunities",
    "referenced_partials",
    "template_name",
]
