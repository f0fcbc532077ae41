"""Policy rules for directive-embedding templates.

Templates should render data, not fetch it: raw code blocks, privileged
accessor (facade) calls, model queries, database and HTTP access are all
violations. Which of them apply is decided by the injected ``LintPolicy``.
"""

import re
from typing import Optional

from ..config import LintPolicy
from ..models import Category, Dialect, Severity
from .base import LinePattern, LineRule, Match, patterns

BLADE_ONLY = frozenset({Dialect.BLADE})

# Accessor call -> declarative tag that replaces it.
PREFERRED_TAGS = {
    "Entry::whereCollection": "<x-statamic:entries>",
    "Collection::findByHandle": "<x-statamic:collection>",
    "Taxonomy::findByHandle": "<x-statamic:taxonomy>",
    "Asset::whereContainer": "<x-statamic:assets>",
}


class AccessorRule(LineRule):
    """Reports each forbidden accessor at most once per line.

    The patterns of one accessor go from most to least specific
    (``\\X\\Facades\\`` before ``\\X\\``), and only the first hit counts.
    """

    def __init__(self, accessors: tuple[str, ...]):
        self.groups = tuple(self._accessor_patterns(a) for a in accessors)
        super().__init__(
            "facade_call",
            Category.POLICY,
            Severity.ERROR,
            [p for group in self.groups for p in group],
            dialects=BLADE_ONLY,
            suggestion="Use Statamic Blade components or tags instead of calling the accessor directly",
        )

    @staticmethod
    def _accessor_patterns(name: str) -> tuple[LinePattern, ...]:
        n = re.escape(name)
        return patterns(
            (rf"\\{n}\\Facades\\", f"Direct {name} facade call. Use Statamic Blade components instead."),
            (rf"\\{n}\\", f"{name} namespace usage. Use Statamic Blade components instead."),
            (rf"use\s+{n}\\", f"{name} import statement. Use Statamic Blade components instead."),
            (rf"(?<![\w\\$>]){n}::", f"Static {name} accessor call. Use Statamic Blade components instead."),
        )

    def matches(self, line: str) -> list[Match]:
        found = []
        for group in self.groups:
            for pattern in group:
                m = pattern.regex.search(line)
                if m:
                    found.append(Match(m.start(), m.end(), m.group(0), pattern.message))
                    break
        return found


INLINE_PHP = LineRule(
    "inline_php",
    Category.POLICY,
    Severity.ERROR,
    patterns(
        (r"@php\b", "@php directive found. Use Blade components or move logic to controllers."),
        (r"<\?php", "PHP opening tag found. Use Blade components or move logic to controllers."),
        (r"\?>", "PHP closing tag found. Use Blade components or move logic to controllers."),
    ),
    dialects=BLADE_ONLY,
    suggestion="Move the logic into a controller, view composer or component",
)

MODELS_IN_VIEW = LineRule(
    "models_in_view",
    Category.POLICY,
    Severity.ERROR,
    patterns(
        (r"\\App\\Models\\", "Direct model usage in view. Move data fetching to controllers or view composers."),
        (r"\bModel::", "Static model method call. Move data fetching to controllers or view composers."),
        (r"->where\(", "Query builder usage in view. Move data fetching to controllers or view composers."),
        (r"::query\(\)", "Eloquent query in view. Move data fetching to controllers or view composers."),
    ),
    dialects=BLADE_ONLY,
)

DATABASE_CALLS = LineRule(
    "database_calls",
    Category.POLICY,
    Severity.ERROR,
    patterns(
        (r"(?<![\w\\])DB::", "Direct database query in view. Move to controller or service layer."),
        (r"\\DB::", "Database facade usage in view. Move to controller or service layer."),
        (r"->select\(", "Raw SQL select in view. Move to controller or service layer."),
        (r"->insert\(", "Raw SQL insert in view. Move to controller or service layer."),
        (r"->update\(", "Raw SQL update in view. Move to controller or service layer."),
        (r"->delete\(", "Raw SQL delete in view. Move to controller or service layer."),
    ),
    dialects=BLADE_ONLY,
)

HTTP_CALLS = LineRule(
    "http_calls",
    Category.POLICY,
    Severity.ERROR,
    patterns(
        (r"(?<![\w\\])Http::", "HTTP client usage in view. Move HTTP requests to controllers."),
        (r"\\Http::", "HTTP facade usage in view. Move HTTP requests to controllers."),
        (r"\bcurl_", "cURL function usage in view. Move HTTP requests to controllers."),
        (r"\bfile_get_contents\(", "file_get_contents for HTTP in view. Move HTTP requests to controllers."),
    ),
    dialects=BLADE_ONLY,
)

PREFER_STATAMIC_TAGS = LineRule(
    "prefer_statamic_tags",
    Category.POLICY,
    Severity.WARNING,
    patterns(
        *((re.escape(call), f"Use {tag} instead of {call}") for call, tag in PREFERRED_TAGS.items())
    ),
    dialects=BLADE_ONLY,
)

SUGGEST_COMPONENT = LineRule(
    "suggest_component",
    Category.MAINTAINABILITY,
    Severity.WARNING,
    patterns(
        (
            r"<article[^>]*>.*<h[1-6][^>]*>.*</h[1-6]>.*</article>",
            "Consider creating an entry-card component for this article pattern",
        ),
        (
            r"<img[^>]*src=\"[^\"]*glide[^\"]*\"",
            "Consider creating a responsive-image component for Glide images",
        ),
    ),
    dialects=BLADE_ONLY,
)


def policy_rules(policy: LintPolicy) -> list[LineRule]:
    """Return the policy rules enabled by ``policy``, in evaluation order."""
    rules: list[LineRule] = []
    if policy.forbid_inline_code:
        rules.append(INLINE_PHP)
    if policy.forbidden_accessors:
        rules.append(AccessorRule(policy.forbidden_accessors))
    if policy.forbid_models_in_view:
        rules.append(MODELS_IN_VIEW)
    rules.append(DATABASE_CALLS)
    rules.append(HTTP_CALLS)
    if policy.prefer_tags:
        rules.append(PREFER_STATAMIC_TAGS)
    if policy.prefer_components:
        rules.append(SUGGEST_COMPONENT)
    return rules


def preferred_tag_for(text: str) -> Optional[str]:
    for call, tag in PREFERRED_TAGS.items():
        if call in text:
            return tag
    return None
