"""Data models shared by the rule engine, detectors and report assembler."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class Dialect(str, Enum):
    BLADE = "blade"  # directive-embedding: @if, @foreach, {!! !!}
    ANTLERS = "antlers"  # tag-bracket: {{ collection:x }} ... {{ /collection:x }}
    UNKNOWN = "unknown"


class Severity(str, Enum):
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Category(str, Enum):
    POLICY = "policy"
    PERFORMANCE = "performance"
    SECURITY = "security"
    ACCESSIBILITY = "accessibility"
    MAINTAINABILITY = "maintainability"


class Level(str, Enum):
    """Impact or effort level of a suggestion."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


IMPACT_WEIGHT = {Level.HIGH: 3, Level.MEDIUM: 2, Level.LOW: 1}
EFFORT_WEIGHT = {Level.LOW: 3, Level.MEDIUM: 2, Level.HIGH: 1}


def _plain(value: Any) -> Any:
    """Convert enums, mappings and tuples into JSON-ready values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class TemplateSource:
    path: str  # unique per run; "<inline>" for text passed directly
    dialect: Dialect
    text: str
    size_bytes: int = 0
    mtime: Optional[float] = None

    @property
    def line_count(self) -> int:
        return self.text.count("\n") + 1

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")


@dataclass(frozen=True)
class Finding:
    rule_code: str  # "missing_alt_text", "n_plus_one", ...
    category: Category
    severity: Severity
    line: int  # 1-based
    message: str
    column: Optional[int] = None  # 1-based, when the rule has a precise match
    evidence: Optional[str] = None  # matched text or snippet
    suggestion: Optional[str] = None
    template: Optional[str] = None  # TemplateSource.path
    details: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class EdgeCase:
    """Advisory risk; never part of lint violations."""

    kind: str  # "potential_recursion", "memory_intensive", ...
    message: str
    risk: str  # "warning" | "high" | "critical"
    line: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ComplexityMetrics:
    line_count: int
    tag_count: int
    conditional_count: int
    loop_count: int
    include_count: int
    score: float
    factors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class AutoFix:
    kind: str  # "replacement" | "suggestion"
    rule_code: str
    line: int
    description: str
    original: Optional[str] = None
    replacement: Optional[str] = None
    alternatives: dict[str, str] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class Suggestion:
    id: str  # rule_code + content hash of (pattern text, template path)
    rule_code: str
    title: str
    description: str
    category: Category
    impact: Level
    effort: Level
    template_path: Optional[str] = None
    line: Optional[int] = None
    before_snippet: Optional[str] = None
    after_snippet: Optional[str] = None
    explanation: Optional[str] = None
    estimated_time_saved_ms: int = 0
    occurrences: int = 1

    @property
    def rank(self) -> int:
        return IMPACT_WEIGHT[self.impact] * EFFORT_WEIGHT[self.effort]

    @property
    def is_quick_win(self) -> bool:
        return self.effort == Level.LOW and self.impact != Level.LOW

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass(frozen=True)
class LintStats:
    lines_analyzed: int
    violation_count: int
    warning_count: int


@dataclass
class PerformanceSummary:
    """Performance section attached to a lint result."""

    metrics: ComplexityMetrics
    issues: list[Finding] = field(default_factory=list)
    optimizations: list[Finding] = field(default_factory=list)
    estimated_render_time_ms: float = 0.0


@dataclass
class LintResult:
    ok: bool
    dialect: Dialect
    violations: list[Finding]
    warnings: list[Finding]
    stats: LintStats
    suggestions: Optional[list[AutoFix]] = None
    performance_analysis: Optional[PerformanceSummary] = None
    edge_cases: Optional[list[EdgeCase]] = None

    @property
    def findings(self) -> list[Finding]:
        return [*self.violations, *self.warnings]

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class TemplateAnalysis:
    """Everything the performance analyzer learned about one template."""

    source: TemplateSource
    metrics: ComplexityMetrics
    issues: list[Finding] = field(default_factory=list)
    caching_opportunities: list[Finding] = field(default_factory=list)
    optimizations: list[Finding] = field(default_factory=list)
    edge_cases: list[EdgeCase] = field(default_factory=list)
    partials: list[str] = field(default_factory=list)
    estimated_render_time_ms: float = 0.0

    @property
    def critical_count(self) -> int:
        return sum(1 for f in self.issues if f.severity == Severity.CRITICAL)


@dataclass
class ReportStatistics:
    total_issues: int = 0
    critical_issues: int = 0
    performance_score: int = 100
    estimated_render_time_ms: float = 0.0


@dataclass
class ReportSummary:
    status: str = "excellent"
    templates_with_issues: int = 0
    most_critical_issues: list[str] = field(default_factory=list)
    estimated_total_render_time: str = "0ms"


@dataclass
class SkippedFile:
    path: str
    reason: str


@dataclass
class AnalysisReport:
    templates_analyzed: int
    findings: list[Finding]
    metrics_by_template: dict[str, ComplexityMetrics]
    statistics: ReportStatistics
    summary: ReportSummary
    suggestions: list[Suggestion] = field(default_factory=list)
    caching_opportunities: list[Finding] = field(default_factory=list)
    optimizations: list[Finding] = field(default_factory=list)
    edge_cases: dict[str, list[EdgeCase]] = field(default_factory=dict)
    partials_by_template: dict[str, list[str]] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class Roadmap:
    immediate: list[str] = field(default_factory=list)
    short_term: list[str] = field(default_factory=list)
    long_term: list[str] = field(default_factory=list)


@dataclass
class SuggestionStatistics:
    total_suggestions: int = 0
    high_impact: int = 0
    quick_wins: int = 0
    estimated_time_saved_ms: int = 0
    optimization_potential: str = "minimal"
    top_categories: list[str] = field(default_factory=list)


@dataclass
class OptimizationPlan:
    templates_analyzed: int
    focus: str
    suggestions: list[Suggestion]
    categories: dict[str, list[Suggestion]]
    roadmap: Roadmap
    statistics: SuggestionStatistics
    skipped: list[SkippedFile] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class Outcome:
    """Structured result returned by every public operation."""

    success: bool
    data: Any = None
    message: str = ""
    context: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data.to_dict() if hasattr(self.data, "to_dict") else _plain(self.data)
        if self.message:
            payload["message"] = self.message
        if self.context:
            payload["context"] = dict(self.context)
        return payload
