"""Structural metrics: complexity score, factors and render-time estimate.

The render-time estimate is an order-of-magnitude heuristic for ranking
templates against each other. It is not a measurement and should not be
read as one; all of its weights live in ``HeuristicConfig``.
"""

import re
from typing import Iterable

from .config import DEFAULT_HEURISTICS, HeuristicConfig
from .models import ComplexityMetrics, Dialect, Finding, Severity
from .scanning.dialects import get_dialect_config


def complexity_score(
    line_count: int,
    tag_count: int,
    conditional_count: int,
    loop_count: int,
    heuristics: HeuristicConfig = DEFAULT_HEURISTICS,
) -> float:
    """min(lines / 10, 20) + tags * 0.5 + conditionals * 2 + loops * 3 (default weights)."""
    h = heuristics
    return (
        min(line_count / h.score_line_divisor, h.score_line_cap)
        + tag_count * h.score_tag_weight
        + conditional_count * h.score_conditional_weight
        + loop_count * h.score_loop_weight
    )


def complexity_factors(
    line_count: int,
    tag_count: int,
    conditional_count: int,
    loop_count: int,
    include_count: int,
    heuristics: HeuristicConfig = DEFAULT_HEURISTICS,
) -> tuple[str, ...]:
    h = heuristics
    factors = []
    if tag_count > h.factor_tag_count:
        factors.append(f"High tag count ({tag_count})")
    if conditional_count > h.factor_conditional_count:
        factors.append(f"Many conditionals ({conditional_count})")
    if loop_count > h.factor_loop_count:
        factors.append(f"Multiple loops ({loop_count})")
    if line_count > h.factor_line_count:
        factors.append(f"Long template ({line_count} lines)")
    if include_count > h.factor_include_count:
        factors.append(f"Many includes ({include_count})")
    return tuple(factors)


def collect_metrics(
    text: str, dialect: Dialect, heuristics: HeuristicConfig = DEFAULT_HEURISTICS
) -> ComplexityMetrics:
    """Count structure in one template.

    Unknown dialects only contribute their line count.
    """
    line_count = text.count("\n") + 1
    cfg = get_dialect_config(dialect)
    if cfg is None:
        tags = conditionals = loops = includes = 0
    else:
        tags = len(re.findall(cfg.tag_pattern, text, re.DOTALL))
        conditionals = len(re.findall(cfg.conditional_pattern, text))
        loops = len(re.findall(cfg.loop_pattern, text))
        includes = len(re.findall(cfg.include_pattern, text))

    return ComplexityMetrics(
        line_count=line_count,
        tag_count=tags,
        conditional_count=conditionals,
        loop_count=loops,
        include_count=includes,
        score=round(complexity_score(line_count, tags, conditionals, loops, heuristics), 2),
        factors=complexity_factors(line_count, tags, conditionals, loops, includes, heuristics),
    )


def estimate_render_time(
    metrics: ComplexityMetrics,
    findings: Iterable[Finding] = (),
    heuristics: HeuristicConfig = DEFAULT_HEURISTICS,
) -> float:
    """Heuristic render cost in milliseconds.

    base + loops * 5 + conditionals * 1 + tags * 0.1, plus 50 per critical
    and 20 per warning finding (default weights).
    """
    h = heuristics
    estimate = (
        h.render_base_ms
        + metrics.loop_count * h.render_loop_ms
        + metrics.conditional_count * h.render_conditional_ms
        + metrics.tag_count * h.render_tag_ms
    )
    for finding in findings:
        if finding.severity == Severity.CRITICAL:
            estimate += h.render_critical_penalty_ms
        elif finding.severity == Severity.WARNING:
            estimate += h.render_warning_penalty_ms
    return round(estimate, 1)
