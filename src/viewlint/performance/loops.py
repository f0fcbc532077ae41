"""Loop detectors: N+1 access, queries in loops, nesting, pagination."""

import re
from dataclasses import replace
from typing import Optional

from ..models import Dialect, Finding, Severity
from ..rules.base import RuleContext
from ..rules.structure import nested_loop_findings
from .context import TemplateContext

_BLADE_QUERY = re.compile(r"\b(?:Entry|Collection|User|Asset|Term|Taxonomy)::(?:query|all|find|where)\w*\s*\(")
_ANTLERS_QUERY = re.compile(r"\{\{\s*(?:collection|entries|taxonomy|assets|users):")
_BLADE_CAP = re.compile(r"->(?:take|limit)\(\s*(\d+)\s*\)")
_ANTLERS_CAP = re.compile(r"\blimit=[\"'](\d+)[\"']")
_PAGINATION = re.compile(r"paginate|->links\(", re.IGNORECASE)

N_PLUS_ONE_LOOPS = {
    Dialect.BLADE: frozenset({"foreach", "forelse"}),
    Dialect.ANTLERS: frozenset({"collection", "taxonomy"}),
}


def _relationship_pattern(ctx: TemplateContext) -> re.Pattern:
    names = "|".join(re.escape(n) for n in ctx.heuristics.relationship_names)
    if ctx.dialect == Dialect.BLADE:
        return re.compile(rf"\$\w+->({names})\b")
    return re.compile(rf"\{{\{{\s*({names})(?:[.:]|\s*\}}\}})")


def _has_eager_hint(ctx: TemplateContext, opener: str) -> bool:
    return any(marker in opener for marker in ctx.heuristics.eager_load_markers)


def _snippet(text: str, limit: int = 100) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def detect_n_plus_one(ctx: TemplateContext) -> list[Finding]:
    """A loop whose own body touches a relationship without an eager-load hint."""
    loop_names = N_PLUS_ONE_LOOPS.get(ctx.dialect)
    if not loop_names:
        return []
    relationship = _relationship_pattern(ctx)

    findings = []
    for block in ctx.loops:
        if block.name not in loop_names or _has_eager_hint(ctx, block.opener.text):
            continue
        m = relationship.search(ctx.direct_body(block, cut=loop_names))
        if not m:
            continue
        findings.append(
            ctx.finding(
                "n_plus_one",
                Severity.CRITICAL,
                f"Potential N+1 query detected in loop: '{m.group(1)}' is loaded once per item",
                offset=block.start,
                evidence=_snippet(ctx.text[block.start:block.end]),
                suggestion=(
                    'Use eager loading with the with="..." parameter'
                    if ctx.dialect == Dialect.ANTLERS
                    else "Eager load the relationship in the controller with ->with()"
                ),
                relationship=m.group(1),
            )
        )
    return findings


def detect_query_in_loop(ctx: TemplateContext) -> list[Finding]:
    """A data query executed inside a loop body."""
    if ctx.dialect == Dialect.BLADE:
        pattern = _BLADE_QUERY
    elif ctx.dialect == Dialect.ANTLERS:
        pattern = _ANTLERS_QUERY
    else:
        return []

    findings = []
    for m in pattern.finditer(ctx.text):
        # Each query is reported once, whatever the number of loops around it
        if not any(block.opener.end <= m.start() < block.closer.start for block in ctx.loops):
            continue
        findings.append(
            ctx.finding(
                "query_in_loop",
                Severity.CRITICAL,
                "Database query inside loop detected",
                offset=m.start(),
                evidence=_snippet(m.group(0)),
                suggestion="Move the query outside the loop or use eager loading",
            )
        )
    return findings


def detect_nested_loops(ctx: TemplateContext) -> list[Finding]:
    rule_ctx = RuleContext(
        text=ctx.text, dialect=ctx.dialect, lines=ctx.lines, heuristics=ctx.heuristics
    )
    return [replace(f, template=ctx.source.path) for f in nested_loop_findings(rule_ctx)]


def _item_cap(ctx: TemplateContext, opener: str) -> Optional[int]:
    pattern = _BLADE_CAP if ctx.dialect == Dialect.BLADE else _ANTLERS_CAP
    m = pattern.search(opener)
    return int(m.group(1)) if m else None


def detect_unpaginated_loops(ctx: TemplateContext) -> list[Finding]:
    """A loop with a fixed cap above the threshold and no pagination in scope."""
    threshold = ctx.heuristics.pagination_threshold
    findings = []
    for block in ctx.loops:
        cap = _item_cap(ctx, block.opener.text)
        if cap is None or cap <= threshold:
            continue
        if _PAGINATION.search(ctx.text, block.start, block.end):
            continue
        findings.append(
            ctx.finding(
                "unpaginated_loop",
                Severity.WARNING,
                f"Loop renders up to {cap} items without pagination",
                offset=block.start,
                evidence=_snippet(block.opener.text),
                suggestion='Add pagination (paginate="10") to reduce the items rendered per page',
                limit=cap,
            )
        )
    return findings
