"""Tests for report assembly and the performance score."""

import pytest

from viewlint.config import HeuristicConfig
from viewlint.models import Dialect, TemplateSource
from viewlint.performance import PerformanceAnalyzer
from viewlint.report import ReportAssembler, performance_score, performance_status

N_PLUS_ONE = '{{ collection:blog limit="5" }}\n{{ author:name }}\n{{ /collection:blog }}'
CLEAN = "<main><h1>{{ title }}</h1></main>"


def _analysis(text, path, dialect=Dialect.ANTLERS):
    return PerformanceAnalyzer().analyze(TemplateSource(path=path, dialect=dialect, text=text))


class TestPerformanceScore:
    def test_perfect(self):
        assert performance_score(0, 0, 0.0) == 100

    def test_penalties(self):
        assert performance_score(1, 3, 0.0) == 100 - 20 - 2 * 10

    def test_render_time_penalties(self):
        assert performance_score(0, 0, 500.0) == 100
        assert performance_score(0, 0, 600.0) == 85
        assert performance_score(0, 0, 1200.0) == 70

    def test_floor(self):
        assert performance_score(10, 20, 2000.0) == 0

    def test_custom_weights(self):
        heuristics = HeuristicConfig(score_critical_penalty=5, score_issue_penalty=1)
        assert performance_score(2, 4, 0.0, heuristics) == 100 - 10 - 2

    @pytest.mark.parametrize(
        "score,status",
        [(100, "excellent"), (80, "excellent"), (79, "good"), (60, "good"),
         (59, "needs_improvement"), (40, "needs_improvement"), (39, "poor"), (0, "poor")],
    )
    def test_status(self, score, status):
        assert performance_status(score) == status


class TestReportAssembler:
    def test_empty_report(self):
        report = ReportAssembler().build()
        assert report.templates_analyzed == 0
        assert report.statistics.performance_score == 100
        assert report.summary.status == "excellent"
        assert report.summary.estimated_total_render_time == "0ms"
        assert report.recommendations == []

    def test_statistics_are_sums(self):
        first = _analysis(N_PLUS_ONE, "views/blog.antlers.html")
        second = _analysis(CLEAN, "views/home.antlers.html")
        assembler = ReportAssembler()
        assembler.add(first)
        assembler.add(second)
        report = assembler.build()

        assert report.templates_analyzed == 2
        assert report.statistics.total_issues == len(first.issues) + len(second.issues)
        assert report.statistics.critical_issues == first.critical_count
        assert report.statistics.estimated_render_time_ms == pytest.approx(
            first.estimated_render_time_ms + second.estimated_render_time_ms
        )
        assert report.summary.templates_with_issues == 1
        assert report.summary.most_critical_issues == ["n_plus_one"]
        assert set(report.metrics_by_template) == {"views/blog.antlers.html", "views/home.antlers.html"}

    def test_findings_keep_template_path(self):
        assembler = ReportAssembler()
        assembler.add(_analysis(N_PLUS_ONE, "views/blog.antlers.html"))
        report = assembler.build()
        assert all(f.template == "views/blog.antlers.html" for f in report.findings)

    def test_skipped_files_not_counted(self):
        assembler = ReportAssembler()
        assembler.add(_analysis(CLEAN, "views/home.antlers.html"))
        assembler.skip("views/locked.antlers.html", "Permission denied")
        report = assembler.build()
        assert report.templates_analyzed == 1
        assert report.skipped[0].reason == "Permission denied"

    def test_recommendations(self):
        assembler = ReportAssembler()
        assembler.add(_analysis(N_PLUS_ONE, "views/blog.antlers.html"))
        recommendations = assembler.build().recommendations
        assert recommendations[0].startswith("Fix critical performance issues")
        assert any("caching" in r for r in recommendations)

    def test_slow_render_recommendation(self):
        heuristics = HeuristicConfig(render_base_ms=600.0)
        assembler = ReportAssembler(heuristics)
        analysis = PerformanceAnalyzer(heuristics).analyze(
            TemplateSource(path="a.html", dialect=Dialect.UNKNOWN, text="<p>x</p>")
        )
        assembler.add(analysis)
        report = assembler.build()
        assert report.statistics.performance_score == 85
        assert "Consider breaking down complex templates into smaller components" in report.recommendations

    def test_partials_and_edge_cases(self):
        assembler = ReportAssembler()
        assembler.add(_analysis("{{ partial:card }}\n{{ body | raw }}", "views/_card.antlers.html"))
        report = assembler.build()
        assert report.partials_by_template == {"views/_card.antlers.html": ["card"]}
        kinds = [c.kind for c in report.edge_cases["views/_card.antlers.html"]]
        assert kinds == ["potential_recursion", "xss_risk"]
