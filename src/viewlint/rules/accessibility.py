"""Accessibility rules over plain HTML markup, shared by every dialect."""

import re

from ..models import Category, Severity
from .base import ALL_DIALECTS, LineRule, patterns

MISSING_ALT_TEXT = LineRule(
    "missing_alt_text",
    Category.ACCESSIBILITY,
    Severity.WARNING,
    patterns((r"<img(?![^>]*\balt=)[^>]*>", "Image missing alt attribute. Add alt text for accessibility.")),
    dialects=ALL_DIALECTS,
)

NON_DESCRIPTIVE_LINK = LineRule(
    "non_descriptive_link",
    Category.ACCESSIBILITY,
    Severity.WARNING,
    patterns(
        (
            r"<a[^>]*>\s*(click here|read more|more|here)\s*</a>",
            'Link text should be descriptive. Avoid generic phrases like "click here".',
        ),
        flags=re.IGNORECASE,
    ),
    dialects=ALL_DIALECTS,
)

MISSING_FORM_LABEL = LineRule(
    "missing_form_label",
    Category.ACCESSIBILITY,
    Severity.WARNING,
    patterns(
        (
            r"<input(?![^>]*\b(?:id=|type=[\"'](?:hidden|submit|button)[\"']|aria-label=))",
            "Form input should have an associated label for accessibility.",
        )
    ),
    dialects=ALL_DIALECTS,
    unless_line=r"<label",
)

ACCESSIBILITY_RULES = [MISSING_ALT_TEXT, NON_DESCRIPTIVE_LINK, MISSING_FORM_LABEL]
