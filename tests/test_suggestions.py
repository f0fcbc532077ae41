"""Tests for suggestion generation, ranking and the roadmap."""

import pytest

from viewlint.exceptions import InvalidOptimizationFocusError
from viewlint.models import Category, Finding, Level, Severity, Suggestion
from viewlint.suggestions import (
    SUGGESTION_TABLE,
    SuggestionGenerator,
    build_plan,
    build_roadmap,
    categorize,
    check_focus,
    rank_suggestions,
    suggestion_id,
    suggestion_statistics,
)
from viewlint.suggestions.generator import optimization_potential


def _finding(code, template="views/a.html", line=1, evidence=None, severity=Severity.WARNING):
    return Finding(code, Category.PERFORMANCE, severity, line, f"{code} message", evidence=evidence, template=template)


def _suggestion(title, impact, effort, category=Category.PERFORMANCE, time_saved=0):
    return Suggestion(
        id=title,
        rule_code=title,
        title=title,
        description="",
        category=category,
        impact=impact,
        effort=effort,
        estimated_time_saved_ms=time_saved,
    )


class TestSuggestionTable:
    def test_every_entry_has_a_known_scope(self):
        assert all(entry.scope in ("template", "snippet") for entry in SUGGESTION_TABLE.values())

    def test_n_plus_one_is_cheap_and_high_impact(self):
        entry = SUGGESTION_TABLE["n_plus_one"]
        assert (entry.impact, entry.effort) == (Level.HIGH, Level.LOW)


class TestFocus:
    def test_known_focus(self):
        assert check_focus("performance") == frozenset({Category.PERFORMANCE})
        assert Category.POLICY in check_focus("maintainability")
        assert check_focus("all") == frozenset(Category)

    def test_unknown_focus(self):
        with pytest.raises(InvalidOptimizationFocusError) as exc_info:
            check_focus("speed")
        assert exc_info.value.details["option"] == "optimization_focus"
        assert "security" in exc_info.value.details["allowed"]


class TestSuggestionGenerator:
    def test_maps_through_table(self):
        suggestion = SuggestionGenerator().suggest(_finding("static_caching"))
        assert suggestion.title == "Cache static header/footer/navigation content"
        assert suggestion.impact == Level.MEDIUM
        assert suggestion.before_snippet is not None
        assert suggestion.id.startswith("static_caching_")

    def test_no_examples(self):
        suggestion = SuggestionGenerator(include_code_examples=False).suggest(_finding("static_caching"))
        assert suggestion.before_snippet is None
        assert suggestion.after_snippet is None
        assert suggestion.explanation is None

    def test_unmapped_rule(self):
        assert SuggestionGenerator().suggest(_finding("component_naming")) is None

    def test_template_scope_deduplicates(self):
        """Two findings of a per-template rule in one file are one suggestion."""
        findings = [_finding("long_template", line=1), _finding("long_template", line=1)]
        suggestions = SuggestionGenerator().generate(findings)
        assert len(suggestions) == 1
        assert suggestions[0].occurrences == 2

    def test_template_scope_per_file(self):
        findings = [_finding("long_template", "a.html"), _finding("long_template", "b.html")]
        assert len(SuggestionGenerator().generate(findings)) == 2

    def test_snippet_scope_keeps_distinct_evidence(self):
        findings = [
            _finding("n_plus_one", line=3, evidence="{{ collection:blog }}"),
            _finding("n_plus_one", line=9, evidence="{{ collection:news }}"),
            _finding("n_plus_one", line=3, evidence="{{ collection:blog }}"),
        ]
        suggestions = SuggestionGenerator().generate(findings)
        assert [s.occurrences for s in suggestions] == [2, 1]

    def test_id_is_deterministic(self):
        assert suggestion_id("x", "p", "a.html") == suggestion_id("x", "p", "a.html")
        assert suggestion_id("x", "p", "a.html") != suggestion_id("x", "p", "b.html")
        assert len(suggestion_id("x", "p", None)) == len("x_") + 12


class TestRanking:
    def test_stable_for_equal_ranks(self):
        a = _suggestion("a", Level.MEDIUM, Level.MEDIUM)
        b = _suggestion("b", Level.MEDIUM, Level.MEDIUM)
        c = _suggestion("c", Level.HIGH, Level.LOW)
        assert rank_suggestions([a, b, c]) == [c, a, b]

    def test_truncates_after_sorting(self):
        low = _suggestion("low", Level.LOW, Level.HIGH)
        high = _suggestion("high", Level.HIGH, Level.LOW)
        assert rank_suggestions([low, high], max_suggestions=1) == [high]
        assert rank_suggestions([low, high], max_suggestions=0) == []


class TestRoadmap:
    def test_phases(self):
        roadmap = build_roadmap(
            [
                _suggestion("now", Level.HIGH, Level.LOW),
                _suggestion("soon", Level.HIGH, Level.MEDIUM),
                _suggestion("quick", Level.MEDIUM, Level.LOW),
                _suggestion("later", Level.LOW, Level.HIGH),
            ]
        )
        assert roadmap.immediate == ["now"]
        assert roadmap.short_term == ["soon", "quick"]
        assert roadmap.long_term == ["later"]

    def test_phase_limit(self):
        items = [_suggestion(str(i), Level.HIGH, Level.LOW) for i in range(8)]
        assert len(build_roadmap(items).immediate) == 5


class TestStatistics:
    def test_counts(self):
        suggestions = [
            _suggestion("a", Level.HIGH, Level.LOW, time_saved=500),
            _suggestion("b", Level.MEDIUM, Level.LOW, Category.SECURITY, time_saved=100),
            _suggestion("c", Level.LOW, Level.LOW, Category.SECURITY),
        ]
        suggestions[0].occurrences = 2
        stats = suggestion_statistics(suggestions)
        assert stats.total_suggestions == 3
        assert stats.high_impact == 1
        assert stats.quick_wins == 2
        assert stats.estimated_time_saved_ms == 1100
        assert stats.top_categories == ["security", "performance"]

    @pytest.mark.parametrize(
        "high,quick,total,expected",
        [(3, 0, 3, "high"), (0, 5, 5, "medium"), (0, 0, 10, "low"), (1, 1, 2, "minimal")],
    )
    def test_potential(self, high, quick, total, expected):
        assert optimization_potential(high, quick, total) == expected

    def test_categorize(self):
        suggestions = [
            _suggestion("a", Level.HIGH, Level.LOW),
            _suggestion("b", Level.LOW, Level.LOW, Category.SECURITY),
        ]
        assert {k: [s.title for s in v] for k, v in categorize(suggestions).items()} == {
            "performance": ["a"],
            "security": ["b"],
        }


class TestBuildPlan:
    def _findings(self):
        return [
            _finding("static_caching"),
            _finding("n_plus_one", evidence="{{ collection:blog }}"),
            Finding("unescaped_output", Category.SECURITY, Severity.ERROR, 2, "raw", evidence="{!! $x !!}"),
            _finding("long_template"),
        ]

    def test_focus_filters(self):
        plan = build_plan(self._findings(), templates_analyzed=1, focus="security")
        assert [s.rule_code for s in plan.suggestions] == ["unescaped_output"]
        assert list(plan.categories) == ["security"]

    def test_ranked_and_truncated(self):
        plan = build_plan(self._findings(), templates_analyzed=1, max_suggestions=2)
        assert [s.rule_code for s in plan.suggestions] == ["n_plus_one", "unescaped_output"]
        # statistics cover every suggestion that matched the focus
        assert plan.statistics.total_suggestions == 4

    def test_unranked(self):
        plan = build_plan(self._findings(), templates_analyzed=1, prioritize=False)
        assert [s.rule_code for s in plan.suggestions] == [
            "static_caching",
            "n_plus_one",
            "unescaped_output",
            "long_template",
        ]

    def test_roadmap_follows_shown_list(self):
        plan = build_plan(self._findings(), templates_analyzed=1, max_suggestions=1)
        assert plan.roadmap.immediate == ["Add eager loading"]
        assert plan.roadmap.short_term == []

    def test_invalid_focus(self):
        with pytest.raises(InvalidOptimizationFocusError):
            build_plan([], templates_analyzed=0, focus="fast")
