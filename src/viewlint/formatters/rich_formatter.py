"""Rich terminal formatter for viewlint."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import AnalysisReport, Finding, LintResult, OptimizationPlan, Severity
from .base import BaseFormatter, Result, located_findings

console = Console()

_SEVERITY_STYLE = {
    Severity.CRITICAL: "red bold",
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}

_STATUS_STYLE = {
    "excellent": "green",
    "good": "green",
    "needs_improvement": "yellow",
    "poor": "red",
}


def _severity_label(severity: Severity) -> str:
    style = _SEVERITY_STYLE[severity]
    return f"[{style}]{severity.value}[/{style}]"


def _findings_table(rows: list[tuple[str, Finding]], show_path: bool) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=True)
    if show_path:
        table.add_column("Template", overflow="fold")
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Rule", style="bold")
    table.add_column("Message")
    for path, f in rows:
        cells = [str(f.line), _severity_label(f.severity), f.rule_code, escape(f.message)]
        if show_path:
            cells.insert(0, escape(path))
        table.add_row(*cells)
    return table


class RichFormatter(BaseFormatter):
    """Rich terminal output: summary panel plus finding tables."""

    def render(self, result: Result, source: Optional[str] = None) -> None:
        if isinstance(result, LintResult):
            self._render_lint(result, source)
        elif isinstance(result, AnalysisReport):
            self._render_report(result, source)
        elif isinstance(result, OptimizationPlan):
            self._render_plan(result)

    def format(self, result: Result, source: Optional[str] = None) -> str:
        # Rich output goes directly to console; return empty string
        self.render(result, source)
        return ""

    def _render_lint(self, result: LintResult, source: Optional[str]) -> None:
        status = "[green]OK[/green]" if result.ok else "[red]FAILED[/red]"
        console.print(
            Panel(
                f"{status}  dialect: [bold]{result.dialect.value}[/bold]  "
                f"lines: {result.stats.lines_analyzed}  "
                f"violations: {result.stats.violation_count}  warnings: {result.stats.warning_count}",
                title=f"[bold cyan]{escape(source or 'viewlint')}[/bold cyan]",
                expand=False,
            )
        )
        rows = located_findings(result, source)
        if rows:
            console.print(_findings_table(rows, show_path=False))

        if result.suggestions:
            console.print()
            console.print("[bold]Fixes:[/bold]")
            for fix in result.suggestions:
                if fix.kind == "replacement":
                    original, replacement = escape(fix.original or ""), escape(fix.replacement or "")
                    console.print(f"  line {fix.line}: [red]{original}[/red] -> [green]{replacement}[/green]")
                else:
                    console.print(f"  line {fix.line}: {escape(fix.description)}")

        if result.performance_analysis:
            perf = result.performance_analysis
            console.print()
            console.print(
                f"[bold]Complexity:[/bold] {perf.metrics.score}  "
                f"[bold]Estimated render:[/bold] ~{perf.estimated_render_time_ms}ms"
            )
            for factor in perf.metrics.factors:
                console.print(f"  [dim]- {escape(factor)}[/dim]")

        for case in result.edge_cases or []:
            console.print(f"[yellow]edge case[/yellow] {case.kind} (line {case.line}): {escape(case.message)}")

    def _render_report(self, report: AnalysisReport, source: Optional[str]) -> None:
        stats = report.statistics
        style = _STATUS_STYLE.get(report.summary.status, "white")
        console.print(
            Panel(
                f"score: [{style}]{stats.performance_score}[/{style}] ({report.summary.status})  "
                f"templates: {report.templates_analyzed}  issues: {stats.total_issues}  "
                f"critical: {stats.critical_issues}  render: ~{report.summary.estimated_total_render_time}",
                title="[bold cyan]Performance[/bold cyan]",
                expand=False,
            )
        )
        rows = located_findings(report, source)
        if rows:
            console.print(_findings_table(rows, show_path=True))

        if report.caching_opportunities or report.optimizations:
            console.print()
            console.print("[bold]Opportunities:[/bold]")
            for f in [*report.caching_opportunities, *report.optimizations]:
                console.print(f"  [cyan]{f.rule_code}[/cyan] {escape(str(f.template))}:{f.line} {escape(f.message)}")

        for path, cases in report.edge_cases.items():
            for case in cases:
                console.print(f"[yellow]edge case[/yellow] {escape(path)}:{case.line} {case.kind}: {escape(case.message)}")

        for skipped in report.skipped:
            console.print(f"[dim]skipped {escape(skipped.path)}: {escape(skipped.reason)}[/dim]")

        if report.recommendations:
            console.print()
            console.print("[bold]Recommendations:[/bold]")
            for rec in report.recommendations:
                console.print(f"  - {rec}")

    def _render_plan(self, plan: OptimizationPlan) -> None:
        stats = plan.statistics
        console.print(
            Panel(
                f"suggestions: {stats.total_suggestions}  high impact: {stats.high_impact}  "
                f"quick wins: {stats.quick_wins}  potential: {stats.optimization_potential}",
                title=f"[bold cyan]Optimizations ({plan.focus})[/bold cyan]",
                expand=False,
            )
        )
        if plan.suggestions:
            table = Table(show_header=True, show_lines=False, pad_edge=True)
            table.add_column("#", justify="right")
            table.add_column("Suggestion", style="bold")
            table.add_column("Impact")
            table.add_column("Effort")
            table.add_column("Where", overflow="fold")
            table.add_column("x", justify="right")
            for i, s in enumerate(plan.suggestions, start=1):
                where = f"{s.template_path}:{s.line}" if s.line else (s.template_path or "")
                table.add_row(str(i), escape(s.title), s.impact.value, s.effort.value, escape(where), str(s.occurrences))
            console.print(table)

        for label, items in (
            ("Immediate", plan.roadmap.immediate),
            ("Short term", plan.roadmap.short_term),
            ("Long term", plan.roadmap.long_term),
        ):
            if items:
                console.print(f"[bold]{label}:[/bold]")
                for title in items:
                    console.print(f"  - {escape(title)}")
