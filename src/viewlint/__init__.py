"""
viewlint - static analysis for CMS page templates

Lints Blade and Antlers templates against a configurable policy, flags
performance anti-patterns (N+1 access, queries in loops, nested and
unpaginated loops, excess complexity) and turns the findings into ranked
optimization suggestions with mechanical fixes where one exists.
"""

__version__ = "0.1.0"

from .api import analyze_performance, lint, suggest_optimizations
from .config import AnalysisConfig, HeuristicConfig, LintPolicy, load_config
from .engine import RuleEngine
from .models import Dialect, Finding, Outcome, Severity

__all__ = [
    "lint",  # Main entry points
    "analyze_performance",
    "suggest_optimizations",
    "RuleEngine",  # Advanced usage (reusable engine)
    "AnalysisConfig",
    "HeuristicConfig",
    "LintPolicy",
    "load_config",
    "Dialect",
    "Finding",
    "Outcome",
    "Severity",
]
