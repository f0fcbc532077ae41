"""Mechanical fixes for lint findings.

A fixer is a pure ``(matched_text) -> replacement_text`` function paired
with the pattern it applies to. ``generate_fixes`` never edits the
template; it only describes the edit.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..models import AutoFix, Finding
from ..rules.policy import preferred_tag_for

Fixer = Callable[[str], str]


@dataclass(frozen=True)
class FixPattern:
    regex: re.Pattern
    fix: Fixer
    description: str


def _quoted_arg(text: str) -> str:
    m = re.search(r"\(\s*['\"]([^'\"]+)['\"]\s*\)", text)
    return m.group(1) if m else ""


def entries_tag(matched: str) -> str:
    """``Entry::whereCollection('blog')`` -> ``<x-statamic:entries :from="'blog'">``."""
    return f"<x-statamic:entries :from=\"'{_quoted_arg(matched)}'\">"


def collection_tag(matched: str) -> str:
    """``Collection::findByHandle('blog')`` -> ``<x-statamic:collection handle="blog">``."""
    return f'<x-statamic:collection handle="{_quoted_arg(matched)}">'


def taxonomy_tag(matched: str) -> str:
    return f"<x-statamic:taxonomy :from=\"'{_quoted_arg(matched)}'\">"


def add_empty_alt(matched: str) -> str:
    """``<img src="a.jpg">`` -> ``<img src="a.jpg" alt="">``."""
    if matched.endswith("/>"):
        return matched[:-2].rstrip() + ' alt="" />'
    return matched[:-1].rstrip() + ' alt="">'


_ACCESSOR_FIXES = (
    FixPattern(
        re.compile(r"(?:\\?Statamic\\Facades\\)?Entry::whereCollection\(\s*['\"][^'\"]+['\"]\s*\)"),
        entries_tag,
        "Replace facade call with Statamic component",
    ),
    FixPattern(
        re.compile(r"(?:\\?Statamic\\Facades\\)?Collection::findByHandle\(\s*['\"][^'\"]+['\"]\s*\)"),
        collection_tag,
        "Replace facade call with Statamic component",
    ),
    FixPattern(
        re.compile(r"(?:\\?Statamic\\Facades\\)?Taxonomy::findByHandle\(\s*['\"][^'\"]+['\"]\s*\)"),
        taxonomy_tag,
        "Replace facade call with Statamic component",
    ),
)

FIXERS: dict[str, tuple[FixPattern, ...]] = {
    "facade_call": _ACCESSOR_FIXES,
    "prefer_statamic_tags": _ACCESSOR_FIXES,
    "missing_alt_text": (
        FixPattern(
            re.compile(r"<img(?![^>]*\balt=)[^>]*>", re.IGNORECASE),
            add_empty_alt,
            "Add alt attribute for accessibility",
        ),
    ),
}

ALTERNATIVES: dict[str, tuple[str, dict[str, str]]] = {
    "inline_php": (
        "Move PHP logic to a controller or create a Blade component",
        {
            "Controller": "Move data fetching to the controller and pass it to the view",
            "View Composer": "Use a view composer for complex view logic",
            "Component": "Create a Blade component with computed properties",
        },
    ),
    "models_in_view": (
        "Move model queries to a controller or service layer",
        {
            "Controller": "Fetch data in the controller method",
            "View Composer": "Use a view composer for view-specific data",
            "Repository": "Create a repository for data access",
        },
    ),
    "database_calls": (
        "Move database access out of the template",
        {
            "Controller": "Run the query in the controller and pass the result to the view",
            "Service": "Wrap the query in a service class",
        },
    ),
    "http_calls": (
        "Move HTTP requests out of the template",
        {
            "Controller": "Fetch remote data in the controller",
            "Cached service": "Fetch in a service and cache the response",
        },
    ),
    "facade_call": (
        "Replace facade call with an appropriate Statamic component",
        {
            "Entry queries": '<x-statamic:entries :from="collection_name">',
            "Collection data": '<x-statamic:collection handle="collection_name">',
            "Taxonomy terms": '<x-statamic:taxonomy :from="taxonomy_name">',
        },
    ),
}


def fix_for(finding: Finding, line_text: str) -> Optional[AutoFix]:
    """Return the fix for one finding, or None when no fix applies."""
    for fp in FIXERS.get(finding.rule_code, ()):
        m = fp.regex.search(line_text)
        if m:
            return AutoFix(
                kind="replacement",
                rule_code=finding.rule_code,
                line=finding.line,
                description=fp.description,
                original=m.group(0),
                replacement=fp.fix(m.group(0)),
            )

    if finding.rule_code not in ALTERNATIVES:
        return None
    description, alternatives = ALTERNATIVES[finding.rule_code]
    alternatives = dict(alternatives)
    tag = preferred_tag_for(line_text)
    if tag:
        alternatives["Preferred tag"] = tag
    return AutoFix(
        kind="suggestion",
        rule_code=finding.rule_code,
        line=finding.line,
        description=description,
        alternatives=alternatives,
    )


def generate_fixes(text: str, findings: Iterable[Finding]) -> list[AutoFix]:
    """Fixes for every fixable finding, one per (rule, line)."""
    lines = text.split("\n")
    fixes = []
    seen = set()
    for finding in findings:
        key = (finding.rule_code, finding.line)
        if key in seen or not 1 <= finding.line <= len(lines):
            continue
        fix = fix_for(finding, lines[finding.line - 1])
        if fix is not None:
            seen.add(key)
            fixes.append(fix)
    return fixes
