"""Whole-document structure rules: block balance, naming, loop shape."""

import re

from ..models import Category, Dialect, Finding, Severity
from ..scanning.blocks import block_tokens, loop_blocks, loop_nests, pair_blocks
from .base import DocumentRule, RuleContext

_COMPONENT_TAG = re.compile(r"<x-([A-Za-z0-9\-_.]+)")
_KEBAB = re.compile(r"^[a-z][a-z0-9\-.]*$")
_PROPERTY_ACCESS = re.compile(r"\$\w+->")
_TAG_OPEN = re.compile(r"(?<!@)\{\{(?!\{)")
_TAG_CLOSE = re.compile(r"\}\}")


def _opener(dialect: Dialect, name: str) -> str:
    return f"@{name}" if dialect == Dialect.BLADE else "{{ " + name + " }}"


def _closer(dialect: Dialect, name: str) -> str:
    return f"@end{name}" if dialect == Dialect.BLADE else "{{ /" + name + " }}"


class BlockBalanceRule(DocumentRule):
    """Every block opener needs a closer of the same name, and vice versa."""

    code = "unclosed_directive"

    def check(self, ctx: RuleContext) -> list[Finding]:
        result = pair_blocks(block_tokens(ctx.text, ctx.dialect, ctx.lines))
        findings = []
        for token in result.unmatched:
            findings.append(
                Finding(
                    rule_code="unmatched_directive",
                    category=Category.MAINTAINABILITY,
                    severity=Severity.ERROR,
                    line=token.line,
                    column=token.column,
                    message=f"{token.text.strip()} has no matching {_opener(ctx.dialect, token.name)}",
                    evidence=token.text,
                )
            )
        for token in result.unclosed:
            findings.append(
                Finding(
                    rule_code="unclosed_directive",
                    category=Category.MAINTAINABILITY,
                    severity=Severity.ERROR,
                    line=token.line,
                    column=token.column,
                    message=f"{_opener(ctx.dialect, token.name)} is never closed with {_closer(ctx.dialect, token.name)}",
                    evidence=token.text[:100],
                )
            )
        return findings


class ComponentNamingRule(DocumentRule):
    code = "component_naming"
    dialects = frozenset({Dialect.BLADE})

    def check(self, ctx: RuleContext) -> list[Finding]:
        findings = []
        for m in _COMPONENT_TAG.finditer(ctx.text):
            name = m.group(1)
            if _KEBAB.match(name):
                continue
            findings.append(
                Finding(
                    rule_code=self.code,
                    category=Category.MAINTAINABILITY,
                    severity=Severity.WARNING,
                    line=ctx.lines.line_of(m.start()),
                    column=ctx.lines.column_of(m.start()),
                    message=f"Component name 'x-{name}' should use kebab-case",
                    evidence=m.group(0),
                )
            )
        return findings


class NestedLoopRule(DocumentRule):
    """One finding per outermost loop that contains other loops."""

    code = "nested_loops"

    def check(self, ctx: RuleContext) -> list[Finding]:
        return nested_loop_findings(ctx)


def nested_loop_findings(ctx: RuleContext) -> list[Finding]:
    findings = []
    for nest in loop_nests(loop_blocks(ctx.text, ctx.dialect, ctx.lines)):
        findings.append(
            Finding(
                rule_code="nested_loops",
                category=Category.PERFORMANCE,
                severity=Severity.WARNING,
                line=nest.outer.line,
                column=nest.outer.opener.column,
                message=(
                    f"Nested loops detected ({len(nest.inner)} inside this loop, depth {nest.depth}). "
                    "Consider flattening the data or moving the grouping into the controller."
                ),
                evidence=nest.outer.opener.text[:100],
                suggestion="Consider optimizing with collection methods or eager loading",
                details={"nested_count": len(nest.inner), "nesting_depth": nest.depth},
            )
        )
    return findings


class LoopPropertyAccessRule(DocumentRule):
    """Heavy ``$item->relation`` access inside a loop hints at lazy loading."""

    code = "n_plus_one"
    dialects = frozenset({Dialect.BLADE})

    def check(self, ctx: RuleContext) -> list[Finding]:
        findings = []
        threshold = ctx.heuristics.property_access_threshold
        for block in loop_blocks(ctx.text, ctx.dialect, ctx.lines):
            if block.name != "foreach":
                continue
            accesses = len(_PROPERTY_ACCESS.findall(block.body(ctx.text)))
            if accesses <= threshold:
                continue
            findings.append(
                Finding(
                    rule_code=self.code,
                    category=Category.PERFORMANCE,
                    severity=Severity.WARNING,
                    line=block.line,
                    message=f"Potential N+1 query: {accesses} property accesses inside a loop",
                    evidence=block.opener.text[:100],
                    suggestion="Use eager loading in the controller",
                    details={"property_accesses": accesses},
                )
            )
        return findings


class UnterminatedTagRule(DocumentRule):
    """A ``{{`` whose ``}}`` never comes before the next ``{{``."""

    code = "unterminated_tag"
    dialects = frozenset({Dialect.ANTLERS})

    def check(self, ctx: RuleContext) -> list[Finding]:
        findings = []
        opens = [m.start() for m in _TAG_OPEN.finditer(ctx.text)]
        for i, start in enumerate(opens):
            limit = opens[i + 1] if i + 1 < len(opens) else len(ctx.text)
            if _TAG_CLOSE.search(ctx.text, start + 2, limit):
                continue
            findings.append(
                Finding(
                    rule_code=self.code,
                    category=Category.MAINTAINABILITY,
                    severity=Severity.ERROR,
                    line=ctx.lines.line_of(start),
                    column=ctx.lines.column_of(start),
                    message="Unclosed Antlers tag: '{{' without a matching '}}'",
                    evidence=ctx.text[start:start + 40].split("\n")[0],
                )
            )
        return findings


STRUCTURE_RULES = [
    BlockBalanceRule(),
    UnterminatedTagRule(),
    ComponentNamingRule(),
    NestedLoopRule(),
    LoopPropertyAccessRule(),
]
