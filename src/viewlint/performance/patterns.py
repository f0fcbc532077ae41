"""Whole-template pattern detectors.

``detect_*`` functions return performance issues (warnings). ``suggest_*``
functions return info-level optimization opportunities; they never count
toward the performance score.
"""

import re
from collections import Counter

from ..models import Category, Dialect, Finding, Severity
from ..scanning.blocks import balanced_end
from ..scanning.dialects import get_dialect_config
from ..scanning.tags import CONTROL_KEYWORDS, iter_tags
from .context import TemplateContext

_BOOLEAN_OPERATOR = re.compile(r"\|\||&&|\?:|\b(?:and|or)\b")
_ANTLERS_CONDITION = re.compile(r"\{\{\s*(?:if|elseif|unless)\s([^}]+)\}\}", re.IGNORECASE)
_BLADE_CONDITION = re.compile(r"@(?:if|elseif|unless)\b")
_PHP_BLOCK = re.compile(r"@php\b(.*?)@endphp", re.DOTALL)
_TEMPLATE_FACADE = re.compile(r"\{\{\s*\\?(Auth|Cache|DB|Log|Storage|Config)::", re.IGNORECASE)
_DYNAMIC_VALUE = re.compile(r"\{\{\s*(?:now|current_date|today|random)\b|\bnow\(\)|\brand\(|Str::random\(")

_INLINE_STYLE = re.compile(r"<style[^>]*>(.*?)</style>", re.DOTALL | re.IGNORECASE)
_INLINE_SCRIPT = re.compile(r"<script(?![^>]*\bsrc=)[^>]*>(.*?)</script>", re.DOTALL | re.IGNORECASE)
_DIV_CLASS = re.compile(r"<div class=\"([^\"]+)\"")
_STYLE_ATTRIBUTE = re.compile(r"<[^>]+\sstyle\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE)
_STRING_LITERAL = re.compile(r"[\"']([^\"'\n]{10,})[\"']")
_LANDMARK = re.compile(r"<(?:header|nav|main|section|article|aside|footer)\b", re.IGNORECASE)
_DIV = re.compile(r"<div\b", re.IGNORECASE)
_INSECURE_HREF = re.compile(r"href\s*=\s*[\"']http://[^\"']+[\"']", re.IGNORECASE)


# Issues


def detect_excessive_partials(ctx: TemplateContext) -> list[Finding]:
    cfg = get_dialect_config(ctx.dialect)
    if cfg is None:
        return []
    includes = list(re.finditer(cfg.include_pattern, ctx.text))
    if len(includes) <= ctx.heuristics.excessive_partials:
        return []
    return [
        ctx.finding(
            "excessive_partials",
            Severity.WARNING,
            f"Found {len(includes)} partial includes",
            offset=includes[0].start(),
            suggestion="Consider combining related partials or using components",
            count=len(includes),
        )
    ]


def _conditions(ctx: TemplateContext):
    """Yield (offset, condition text) for every conditional in the template."""
    if ctx.dialect == Dialect.ANTLERS:
        for m in _ANTLERS_CONDITION.finditer(ctx.text):
            yield m.start(), m.group(1)
    elif ctx.dialect == Dialect.BLADE:
        for m in _BLADE_CONDITION.finditer(ctx.text):
            end = balanced_end(ctx.text, m.end())
            if end > m.end():
                yield m.start(), ctx.text[m.end():end]


def detect_complex_conditionals(ctx: TemplateContext) -> list[Finding]:
    limit = ctx.heuristics.complex_conditional_operators
    findings = []
    for offset, condition in _conditions(ctx):
        operators = len(_BOOLEAN_OPERATOR.findall(condition))
        if operators <= limit:
            continue
        findings.append(
            ctx.finding(
                "complex_conditional",
                Severity.WARNING,
                f"Complex conditional with {operators} boolean operators",
                offset=offset,
                category=Category.MAINTAINABILITY,
                evidence=condition.strip()[:100],
                suggestion="Move the condition into a computed value or view model",
                operators=operators,
            )
        )
    return findings


def detect_inline_php_blocks(ctx: TemplateContext) -> list[Finding]:
    if ctx.dialect != Dialect.BLADE:
        return []
    findings = []
    for m in _PHP_BLOCK.finditer(ctx.text):
        size = len(m.group(1).strip())
        if size <= ctx.heuristics.inline_php_chars:
            continue
        findings.append(
            ctx.finding(
                "excessive_inline_php",
                Severity.WARNING,
                f"Large PHP block in template ({size} characters)",
                offset=m.start(),
                category=Category.MAINTAINABILITY,
                suggestion="Move logic to a view composer, component class or controller",
                size=size,
            )
        )
    return findings


def detect_template_facades(ctx: TemplateContext) -> list[Finding]:
    if ctx.dialect != Dialect.BLADE:
        return []
    matches = list(_TEMPLATE_FACADE.finditer(ctx.text))
    if not matches:
        return []
    names = sorted({m.group(1) for m in matches})
    return [
        ctx.finding(
            "facade_in_template",
            Severity.WARNING,
            f"Direct facade usage in template: {', '.join(names)}",
            offset=matches[0].start(),
            evidence=matches[0].group(0),
            suggestion="Pass the data from the controller or use a view composer",
            facades=names,
        )
    ]


def detect_uncached_dynamic(ctx: TemplateContext) -> list[Finding]:
    matches = list(_DYNAMIC_VALUE.finditer(ctx.text))
    if len(matches) <= ctx.heuristics.dynamic_value_count:
        return []
    return [
        ctx.finding(
            "uncached_dynamic",
            Severity.WARNING,
            "Multiple dynamic content blocks prevent full-page caching",
            offset=matches[0].start(),
            suggestion="Use fragment caching or move dynamic values into a small uncached partial",
            count=len(matches),
        )
    ]


# Optimizations


def _info(ctx: TemplateContext, rule_code: str, message: str, suggestion: str, offset: int = 0,
          category: Category = Category.MAINTAINABILITY, evidence=None, **details) -> Finding:
    return ctx.finding(
        rule_code,
        Severity.INFO,
        message,
        offset=offset,
        category=category,
        evidence=evidence,
        suggestion=suggestion,
        **details,
    )


def suggest_unused_variables(ctx: TemplateContext) -> list[Finding]:
    if ctx.dialect != Dialect.ANTLERS:
        return []
    tags = list(iter_tags(ctx.text))
    assigned = {}
    for tag in tags:
        if tag.is_assignment and tag.head not in assigned:
            assigned[tag.head] = tag.start
    if not assigned:
        return []

    used = set()
    for tag in tags:
        if tag.is_assignment:
            # right-hand side may read other variables
            used.update(re.findall(r"\b\w+\b", tag.rest.split("=", 1)[-1]))
            continue
        used.add(tag.head.split(".")[0].split(":")[0])
        used.update(re.findall(r"\b\w+\b", tag.rest))
        used.update(tag.params.values())

    unused = [name for name in assigned if name not in used and name not in CONTROL_KEYWORDS]
    if not unused:
        return []
    return [
        _info(
            ctx,
            "unused_variables",
            f"Unused variables detected: {', '.join(unused)}",
            "Remove unused variable assignments",
            offset=assigned[unused[0]],
            variables=unused,
        )
    ]


def suggest_external_assets(ctx: TemplateContext) -> list[Finding]:
    """Large inline ``<style>`` and ``<script>`` bodies."""
    findings = []
    limit = ctx.heuristics.inline_block_chars
    for code, pattern, label, target in (
        ("inline_styles", _INLINE_STYLE, "CSS", "external stylesheets"),
        ("inline_scripts", _INLINE_SCRIPT, "JavaScript", "external files"),
    ):
        for m in pattern.finditer(ctx.text):
            size = len(m.group(1))
            if size <= limit:
                continue
            findings.append(
                _info(
                    ctx,
                    code,
                    f"Large inline {label} detected ({size} characters)",
                    f"Move {label} to {target} for better caching",
                    offset=m.start(),
                    category=Category.PERFORMANCE,
                    size=size,
                )
            )
            break
    return findings


def suggest_partials_for_long_template(ctx: TemplateContext) -> list[Finding]:
    line_count = ctx.source.line_count
    if line_count <= ctx.heuristics.long_template_lines:
        return []
    return [
        _info(
            ctx,
            "long_template",
            f"Long template ({line_count} lines) could be split into smaller, reusable partials",
            "Extract repeated sections into partials",
            line_count=line_count,
        )
    ]


def suggest_repeated_markup(ctx: TemplateContext) -> list[Finding]:
    first_seen = {}
    counts = Counter()
    for m in _DIV_CLASS.finditer(ctx.text):
        counts[m.group(1)] += 1
        first_seen.setdefault(m.group(1), m.start())
    findings = []
    for pattern, count in counts.items():
        if count <= ctx.heuristics.repeated_markup_count:
            continue
        findings.append(
            _info(
                ctx,
                "repeated_markup",
                f"Repeated markup pattern '{pattern}' found {count} times",
                "Extract the repeated markup into a component or partial",
                offset=first_seen[pattern],
                pattern=pattern,
                count=count,
            )
        )
    return findings


def suggest_css_classes(ctx: TemplateContext) -> list[Finding]:
    matches = list(_STYLE_ATTRIBUTE.finditer(ctx.text))
    if len(matches) <= ctx.heuristics.inline_style_attributes:
        return []
    return [
        _info(
            ctx,
            "inline_style_attributes",
            f"{len(matches)} inline style attributes found",
            "Extract inline styles to reusable CSS classes",
            offset=matches[0].start(),
            count=len(matches),
        )
    ]


def suggest_repeated_strings(ctx: TemplateContext) -> list[Finding]:
    counts = Counter(m.group(1) for m in _STRING_LITERAL.finditer(ctx.text))
    repeated = sorted(s for s, n in counts.items() if n > ctx.heuristics.repeated_string_count)
    if not repeated:
        return []
    return [
        _info(
            ctx,
            "repeated_strings",
            f"{len(repeated)} string values are repeated more than {ctx.heuristics.repeated_string_count} times",
            "Extract repeated strings to variables",
            offset=ctx.text.find(repeated[0]),
            strings=repeated,
        )
    ]


def suggest_semantic_markup(ctx: TemplateContext) -> list[Finding]:
    div = _DIV.search(ctx.text)
    if not div or _LANDMARK.search(ctx.text):
        return []
    return [
        _info(
            ctx,
            "non_semantic_markup",
            "Template uses generic divs but no semantic landmark elements",
            "Use header, nav, main, section, article, aside or footer where they fit",
            offset=div.start(),
            category=Category.ACCESSIBILITY,
        )
    ]


def suggest_https_links(ctx: TemplateContext) -> list[Finding]:
    matches = list(_INSECURE_HREF.finditer(ctx.text))
    if not matches:
        return []
    return [
        _info(
            ctx,
            "insecure_links",
            f"{len(matches)} link(s) use plain HTTP",
            "Use HTTPS for external links",
            offset=matches[0].start(),
            category=Category.SECURITY,
            evidence=matches[0].group(0),
        )
    ]


ISSUE_DETECTORS = (
    detect_excessive_partials,
    detect_complex_conditionals,
    detect_inline_php_blocks,
    detect_template_facades,
    detect_uncached_dynamic,
)

OPTIMIZATION_DETECTORS = (
    suggest_unused_variables,
    suggest_external_assets,
    suggest_partials_for_long_template,
    suggest_repeated_markup,
    suggest_css_classes,
    suggest_repeated_strings,
    suggest_semantic_markup,
    suggest_https_links,
)
