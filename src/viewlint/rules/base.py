"""Rule protocol and the two rule shapes the engine runs.

A ``LineRule`` is a pure predicate ``(line) -> [Match]`` that the engine
offers every line of a document. A ``DocumentRule`` sees the whole text
once and returns finished Findings. Rules are immutable; anything
policy-dependent is fixed when the rule is constructed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Pattern, Sequence

from ..config import DEFAULT_HEURISTICS, DEFAULT_POLICY, HeuristicConfig, LintPolicy
from ..models import Category, Dialect, Finding, Severity
from ..scanning.lines import LineIndex

ALL_DIALECTS = frozenset({Dialect.BLADE, Dialect.ANTLERS, Dialect.UNKNOWN})
MARKUP_DIALECTS = frozenset({Dialect.BLADE, Dialect.ANTLERS})


@dataclass(frozen=True)
class Match:
    start: int  # 0-based offset within the line
    end: int
    text: str
    message: str


@dataclass(frozen=True)
class RuleContext:
    """Read-only inputs shared by document rules for one lint call."""

    text: str
    dialect: Dialect
    lines: LineIndex
    policy: LintPolicy = DEFAULT_POLICY
    heuristics: HeuristicConfig = DEFAULT_HEURISTICS
    strict: bool = False
    fields: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LinePattern:
    regex: Pattern[str]
    message: str


def patterns(*pairs: tuple[str, str], flags: int = 0) -> tuple[LinePattern, ...]:
    """Compile ``(regex, message)`` pairs."""
    return tuple(LinePattern(re.compile(rx, flags), msg) for rx, msg in pairs)


class LineRule:
    """Single-line rule built from a list of patterns.

    Each pattern contributes at most one match per line (its first
    occurrence), so a line that trips several patterns of the same rule
    yields one finding per pattern.
    """

    code: str
    category: Category
    severity: Severity

    def __init__(
        self,
        code: str,
        category: Category,
        severity: Severity,
        line_patterns: Sequence[LinePattern],
        dialects: frozenset = MARKUP_DIALECTS,
        suggestion: Optional[str] = None,
        unless_line: Optional[str] = None,
    ):
        self.code = code
        self.category = category
        self.severity = severity
        self.line_patterns = tuple(line_patterns)
        self.dialects = dialects
        self.suggestion = suggestion
        self._unless = re.compile(unless_line, re.IGNORECASE) if unless_line else None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.code!r})"

    def matches(self, line: str) -> list[Match]:
        if self._unless is not None and self._unless.search(line):
            return []
        found = []
        for pattern in self.line_patterns:
            m = pattern.regex.search(line)
            if m:
                found.append(Match(m.start(), m.end(), m.group(0), pattern.message))
        return found

    def findings_for(self, line_no: int, line: str) -> tuple[Finding, ...]:
        return tuple(
            Finding(
                rule_code=self.code,
                category=self.category,
                severity=self.severity,
                line=line_no,
                column=m.start + 1,
                message=m.message,
                evidence=m.text,
                suggestion=self.suggestion,
            )
            for m in self.matches(line)
        )


class DocumentRule:
    """Whole-document rule. Subclasses implement ``check``."""

    code: str = ""
    dialects: frozenset = MARKUP_DIALECTS
    strict_only: bool = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.code!r})"

    def check(self, ctx: RuleContext) -> list[Finding]:
        raise NotImplementedError
