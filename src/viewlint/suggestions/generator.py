"""Turn findings into deduplicated, ranked suggestions and a roadmap."""

from __future__ import annotations

import hashlib
from collections import Counter
from typing import Iterable, Optional

from ..exceptions import InvalidOptimizationFocusError
from ..logging_config import get_logger
from ..models import (
    Finding,
    Level,
    OptimizationPlan,
    Roadmap,
    Suggestion,
    SuggestionStatistics,
)
from .table import FOCUS_CATEGORIES, template_for

logger = get_logger(__name__)

ROADMAP_LIMIT = 5


def check_focus(focus: str) -> frozenset:
    """Return the categories selected by ``focus`` or raise before any work."""
    try:
        return FOCUS_CATEGORIES[focus]
    except KeyError:
        raise InvalidOptimizationFocusError(focus, FOCUS_CATEGORIES) from None


def suggestion_id(rule_code: str, pattern_text: str, template_path: Optional[str]) -> str:
    digest = hashlib.md5(f"{pattern_text}\0{template_path or ''}".encode("utf-8")).hexdigest()
    return f"{rule_code}_{digest[:12]}"


class SuggestionGenerator:
    """Map findings to suggestions through the fixed rule table.

    Args:
        include_code_examples: Attach before/after snippets and an explanation
    """

    def __init__(self, include_code_examples: bool = True):
        self.include_code_examples = include_code_examples

    def suggest(self, finding: Finding) -> Optional[Suggestion]:
        """Zero or one suggestion for a single finding."""
        entry = template_for(finding.rule_code)
        if entry is None:
            return None
        pattern_text = finding.rule_code
        if entry.scope == "snippet":
            pattern_text += f"\0{finding.evidence or finding.line}"
        examples = self.include_code_examples
        return Suggestion(
            id=suggestion_id(finding.rule_code, pattern_text, finding.template),
            rule_code=finding.rule_code,
            title=entry.title,
            description=finding.message,
            category=entry.category,
            impact=entry.impact,
            effort=entry.effort,
            template_path=finding.template,
            line=finding.line,
            before_snippet=entry.before if examples else None,
            after_snippet=entry.after if examples else None,
            explanation=entry.explanation if examples else None,
            estimated_time_saved_ms=entry.time_saved_ms,
        )

    def generate(self, findings: Iterable[Finding]) -> list[Suggestion]:
        """Suggestions in first-seen order; duplicates raise ``occurrences``."""
        by_id: dict[str, Suggestion] = {}
        for finding in findings:
            suggestion = self.suggest(finding)
            if suggestion is None:
                continue
            existing = by_id.get(suggestion.id)
            if existing is None:
                by_id[suggestion.id] = suggestion
            else:
                existing.occurrences += 1
        return list(by_id.values())


def rank_suggestions(
    suggestions: Iterable[Suggestion], max_suggestions: Optional[int] = None
) -> list[Suggestion]:
    """Sort by impact x effort weight, highest first; ties keep input order.

    Truncation happens after sorting, never before.
    """
    ranked = sorted(suggestions, key=lambda s: s.rank, reverse=True)
    if max_suggestions is not None:
        ranked = ranked[:max_suggestions]
    return ranked


def build_roadmap(suggestions: Iterable[Suggestion], limit: int = ROADMAP_LIMIT) -> Roadmap:
    roadmap = Roadmap()
    for s in suggestions:
        if s.impact == Level.HIGH and s.effort == Level.LOW:
            phase = roadmap.immediate
        elif (s.impact == Level.HIGH and s.effort == Level.MEDIUM) or (
            s.impact == Level.MEDIUM and s.effort == Level.LOW
        ):
            phase = roadmap.short_term
        else:
            phase = roadmap.long_term
        if len(phase) < limit:
            phase.append(s.title)
    return roadmap


def categorize(suggestions: Iterable[Suggestion]) -> dict[str, list[Suggestion]]:
    categories: dict[str, list[Suggestion]] = {}
    for s in suggestions:
        categories.setdefault(s.category.value, []).append(s)
    return categories


def optimization_potential(high_impact: int, quick_wins: int, total: int) -> str:
    if high_impact >= 3:
        return "high"
    if quick_wins >= 5:
        return "medium"
    if total >= 10:
        return "low"
    return "minimal"


def suggestion_statistics(suggestions: list[Suggestion]) -> SuggestionStatistics:
    high_impact = sum(1 for s in suggestions if s.impact == Level.HIGH)
    quick_wins = sum(1 for s in suggestions if s.is_quick_win)
    counts = Counter(s.category.value for s in suggestions)
    return SuggestionStatistics(
        total_suggestions=len(suggestions),
        high_impact=high_impact,
        quick_wins=quick_wins,
        estimated_time_saved_ms=sum(s.estimated_time_saved_ms * s.occurrences for s in suggestions),
        optimization_potential=optimization_potential(high_impact, quick_wins, len(suggestions)),
        top_categories=[name for name, _ in counts.most_common(3)],
    )


def build_plan(
    findings: Iterable[Finding],
    templates_analyzed: int,
    focus: str = "all",
    include_code_examples: bool = True,
    prioritize: bool = True,
    max_suggestions: Optional[int] = 20,
) -> OptimizationPlan:
    """Generate, filter, rank and summarize suggestions for a set of findings.

    Statistics and categories cover every suggestion that passed the focus
    filter; the suggestion list and roadmap cover the ranked, truncated list.
    """
    categories = check_focus(focus)
    generated = SuggestionGenerator(include_code_examples).generate(findings)
    selected = [s for s in generated if s.category in categories]

    if prioritize:
        shown = rank_suggestions(selected, max_suggestions)
    else:
        shown = selected[:max_suggestions] if max_suggestions is not None else list(selected)

    logger.debug(f"{len(generated)} suggestions, {len(selected)} match focus '{focus}', {len(shown)} shown")
    return OptimizationPlan(
        templates_analyzed=templates_analyzed,
        focus=focus,
        suggestions=shown,
        categories=categorize(selected),
        roadmap=build_roadmap(shown),
        statistics=suggestion_statistics(selected),
    )
