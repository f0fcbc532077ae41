"""Rule engine: runs line rules, then document rules, over one template.

The engine holds only immutable configuration. Findings are accumulated by
folding each rule application into an immutable ``FindingAccumulator``, so a
single engine can lint any number of templates, in any order, with the
same result for the same input.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from itertools import product
from typing import Mapping, Optional

from .config import DEFAULT_HEURISTICS, DEFAULT_POLICY, HeuristicConfig, LintPolicy
from .logging_config import get_logger
from .models import Dialect, Finding, LintResult, LintStats, Severity
from .rules.base import RuleContext
from .rules.registry import RuleSet, build_rule_set
from .scanning.lines import LineIndex

logger = get_logger(__name__)


@dataclass(frozen=True)
class FindingAccumulator:
    findings: tuple[Finding, ...] = ()

    def add(self, more) -> "FindingAccumulator":
        more = tuple(more)
        if not more:
            return self
        return FindingAccumulator(self.findings + more)


class RuleEngine:
    """Lints template text against a policy.

    Args:
        policy: Injected lint policy
        heuristics: Thresholds used by loop-shape rules
        strict_mode: Enable strict-only rules
    """

    def __init__(
        self,
        policy: LintPolicy = DEFAULT_POLICY,
        heuristics: HeuristicConfig = DEFAULT_HEURISTICS,
        strict_mode: bool = False,
    ):
        self.policy = policy
        self.heuristics = heuristics
        self.strict_mode = strict_mode
        self._rule_sets = {d: build_rule_set(policy, d, strict_mode) for d in Dialect}

    def rules_for(self, dialect: Dialect) -> RuleSet:
        return self._rule_sets[dialect]

    def check(
        self, text: str, dialect: Dialect, fields: Optional[Mapping[str, str]] = None
    ) -> list[Finding]:
        """Return all findings for ``text`` in deterministic order."""
        rules = self.rules_for(dialect)
        lines = text.split("\n")
        numbered = list(enumerate(lines, start=1))

        per_line = reduce(
            lambda acc, item: acc.add(item[1].findings_for(item[0][0], item[0][1])),
            product(numbered, rules.line_rules),
            FindingAccumulator(),
        )

        ctx = RuleContext(
            text=text,
            dialect=dialect,
            lines=LineIndex(text),
            policy=self.policy,
            heuristics=self.heuristics,
            strict=self.strict_mode,
            fields=dict(fields or {}),
        )
        whole = reduce(lambda acc, rule: acc.add(rule.check(ctx)), rules.document_rules, per_line)

        logger.debug(
            f"Checked {len(lines)} lines ({dialect.value}): {len(whole.findings)} findings"
        )
        return list(whole.findings)

    def lint(
        self, text: str, dialect: Dialect, fields: Optional[Mapping[str, str]] = None
    ) -> LintResult:
        """Split findings into violations (errors) and warnings (everything else)."""
        findings = self.check(text, dialect, fields)
        violations = [f for f in findings if f.severity == Severity.ERROR]
        warnings = [f for f in findings if f.severity != Severity.ERROR]
        return LintResult(
            ok=not violations,
            dialect=dialect,
            violations=violations,
            warnings=warnings,
            stats=LintStats(
                lines_analyzed=text.count("\n") + 1,
                violation_count=len(violations),
                warning_count=len(warnings),
            ),
        )
