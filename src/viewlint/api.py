"""Public API for viewlint.

Every operation returns an ``Outcome``. Errors raised inside the engine
(``ViewlintError`` and its subclasses) are converted into
``Outcome(success=False, message, context)`` here and never escape.

Example:
    >>> from viewlint import lint, analyze_performance, suggest_optimizations
    >>>
    >>> outcome = lint("@php echo 1; @endphp", template_type="blade")
    >>> outcome.data.ok
    False
    >>>
    >>> report = analyze_performance("resources/views")
    >>> report.data.statistics.performance_score
    85
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Mapping, Optional

from .config import (
    DEFAULT_CONFIG,
    DEFAULT_HEURISTICS,
    DEFAULT_POLICY,
    AnalysisConfig,
    HeuristicConfig,
    LintPolicy,
)
from .engine import RuleEngine
from .exceptions import InvalidConfigError, TemplateNotFoundError, ViewlintError
from .logging_config import get_logger
from .models import Category, Finding, Outcome, PerformanceSummary, TemplateSource
from .performance import AnalysisOptions, PerformanceAnalyzer, detect_edge_cases
from .report import ReportAssembler
from .scanning import CollectionResult, classify_dialect, collect_templates, parse_template_type
from .suggestions import SuggestionGenerator, build_plan, check_focus, generate_fixes, rank_suggestions

logger = get_logger(__name__)

INLINE_PATH = "<inline>"
_TEMPLATE_MARKERS = ("\n", "{{", "@", "<")

# Lint categories that feed optimization suggestions. Performance findings
# come from the analyzer instead.
SUGGESTION_LINT_CATEGORIES = frozenset({Category.SECURITY, Category.ACCESSIBILITY, Category.POLICY})


def _guarded(operation: str, func: Callable[[], Outcome]) -> Outcome:
    try:
        return func()
    except ViewlintError as e:
        logger.debug(f"{operation} failed: {e}")
        return Outcome(success=False, message=e.message, context=dict(e.details))


def looks_like_template(value: str) -> bool:
    return any(marker in value for marker in _TEMPLATE_MARKERS)


def inline_source(text: str, hint: Optional[str] = "auto") -> TemplateSource:
    return TemplateSource(
        path=INLINE_PATH,
        dialect=classify_dialect(None, text, hint),
        text=text,
        size_bytes=len(text.encode("utf-8")),
    )


def gather_sources(path_or_text: str, config: AnalysisConfig, hint: Optional[str]) -> CollectionResult:
    """Collect an existing path, or wrap template text as a single inline source.

    Raises:
        TemplateNotFoundError: If the value is neither a path nor template text.
    """
    if "\n" not in path_or_text:
        try:
            return collect_templates(path_or_text, config=config, hint=hint)
        except TemplateNotFoundError:
            if not looks_like_template(path_or_text):
                raise
    return CollectionResult(sources=[inline_source(path_or_text, hint)])


def lint(
    template: str,
    strict_mode: bool = False,
    auto_fix: bool = True,
    performance_analysis: bool = True,
    template_type: str = "auto",
    fields: Optional[Mapping[str, str]] = None,
    policy: Optional[LintPolicy] = None,
    heuristics: Optional[HeuristicConfig] = None,
) -> Outcome:
    """Lint one template's text.

    Args:
        template: Template source text
        strict_mode: Enable strict-only rules
        auto_fix: Attach mechanical fixes as ``result.suggestions``
        performance_analysis: Attach metrics, performance issues and edge cases
        template_type: "auto", "auto-detect", "blade" or "antlers"
        fields: Optional field catalog (field handle -> field type)
        policy: Lint policy (defaults to ``DEFAULT_POLICY``)
        heuristics: Thresholds (defaults to ``DEFAULT_HEURISTICS``)

    Returns:
        Outcome whose ``data`` is a ``LintResult``
    """

    def run() -> Outcome:
        dialect = classify_dialect(None, template, template_type)
        engine = RuleEngine(policy or DEFAULT_POLICY, heuristics or DEFAULT_HEURISTICS, strict_mode)
        result = engine.lint(template, dialect, fields)

        if auto_fix:
            result.suggestions = generate_fixes(template, result.findings)
        if performance_analysis:
            source = TemplateSource(INLINE_PATH, dialect, template, len(template.encode("utf-8")))
            analysis = PerformanceAnalyzer(engine.heuristics).analyze(source)
            result.performance_analysis = PerformanceSummary(
                metrics=analysis.metrics,
                issues=analysis.issues,
                optimizations=analysis.optimizations,
                estimated_render_time_ms=analysis.estimated_render_time_ms,
            )
            result.edge_cases = detect_edge_cases(template, dialect, None, engine.heuristics)

        logger.debug(
            f"Lint ({dialect.value}): {len(result.violations)} violations, {len(result.warnings)} warnings"
        )
        return Outcome(success=True, data=result)

    return _guarded("lint", run)


def _analysis_options(**kwargs) -> AnalysisOptions:
    try:
        return AnalysisOptions(**kwargs)
    except ValueError as e:
        raise InvalidConfigError("complexity_threshold", kwargs.get("complexity_threshold"), str(e))


def analyze_performance(
    path_or_text: str,
    template_type: str = "auto",
    include_partials: bool = True,
    check_n_plus_one: bool = True,
    analyze_loops: bool = True,
    suggest_caching: bool = True,
    complexity_threshold: float = 50,
    config: Optional[AnalysisConfig] = None,
) -> Outcome:
    """Analyze a template file, a directory of templates or inline template text.

    Returns:
        Outcome whose ``data`` is an ``AnalysisReport``
    """

    def run() -> Outcome:
        cfg = config or DEFAULT_CONFIG
        parse_template_type(template_type)
        options = _analysis_options(
            check_n_plus_one=check_n_plus_one,
            analyze_loops=analyze_loops,
            suggest_caching=suggest_caching,
            include_partials=include_partials,
            complexity_threshold=complexity_threshold,
        )
        collected = gather_sources(path_or_text, cfg, template_type)
        logger.info(f"Analyzing performance of {len(collected.sources)} template(s)")

        analyzer = PerformanceAnalyzer(cfg.heuristics)
        assembler = ReportAssembler(cfg.heuristics)
        for skipped in collected.skipped:
            assembler.skip(skipped.path, skipped.reason)
        for source in collected.sources:
            assembler.add(analyzer.analyze(source, options))

        report = assembler.build()
        generator = SuggestionGenerator(include_code_examples=False)
        report.suggestions = rank_suggestions(
            generator.generate([*report.findings, *report.caching_opportunities, *report.optimizations])
        )
        message = "" if collected.sources else "No templates found at the specified path"
        return Outcome(success=True, data=report, message=message)

    return _guarded("analyze_performance", run)


def _findings_for_suggestions(
    source: TemplateSource, analyzer: PerformanceAnalyzer, engine: RuleEngine
) -> list[Finding]:
    analysis = analyzer.analyze(source)
    lint_findings = [
        replace(f, template=source.path)
        for f in engine.check(source.text, source.dialect)
        if f.category in SUGGESTION_LINT_CATEGORIES
    ]
    return [*analysis.issues, *analysis.caching_opportunities, *analysis.optimizations, *lint_findings]


def suggest_optimizations(
    path_or_text: str,
    template_type: str = "auto",
    optimization_focus: str = "all",
    include_code_examples: bool = True,
    prioritize_suggestions: bool = True,
    max_suggestions: Optional[int] = 20,
    config: Optional[AnalysisConfig] = None,
) -> Outcome:
    """Suggest ranked optimizations for templates.

    ``optimization_focus`` is validated before any template is read.

    Returns:
        Outcome whose ``data`` is an ``OptimizationPlan``
    """

    def run() -> Outcome:
        cfg = config or DEFAULT_CONFIG
        check_focus(optimization_focus)
        parse_template_type(template_type)
        if max_suggestions is not None and max_suggestions < 0:
            raise InvalidConfigError("max_suggestions", max_suggestions, "must be non-negative")

        collected = gather_sources(path_or_text, cfg, template_type)
        logger.info(f"Suggesting optimizations for {len(collected.sources)} template(s)")

        analyzer = PerformanceAnalyzer(cfg.heuristics)
        engine = RuleEngine(cfg.policy, cfg.heuristics)
        findings = [
            f for source in collected.sources for f in _findings_for_suggestions(source, analyzer, engine)
        ]

        plan = build_plan(
            findings,
            templates_analyzed=len(collected.sources),
            focus=optimization_focus,
            include_code_examples=include_code_examples,
            prioritize=prioritize_suggestions,
            max_suggestions=max_suggestions,
        )
        plan.skipped = list(collected.skipped)
        message = "" if collected.sources else "No templates found at the specified path"
        return Outcome(success=True, data=plan, message=message)

    return _guarded("suggest_optimizations", run)
