"""Strict-mode rules: hard-coded URLs, untranslated copy, heavy expressions."""

from ..models import Category, Severity
from .base import ALL_DIALECTS, LineRule, patterns

HARDCODED_URL = LineRule(
    "hardcoded_url",
    Category.MAINTAINABILITY,
    Severity.WARNING,
    patterns((r"https?://[^\s\"']+", "Hardcoded URL found. Consider using config values or relative URLs.")),
    dialects=ALL_DIALECTS,
)

HARDCODED_TEXT = LineRule(
    "hardcoded_text",
    Category.MAINTAINABILITY,
    Severity.WARNING,
    patterns((r">[A-Z][a-z\s]{10,}<", "Consider moving longer text to language files for localization.")),
    dialects=ALL_DIALECTS,
)

COMPLEX_EXPRESSION = LineRule(
    "complex_expression",
    Category.MAINTAINABILITY,
    Severity.WARNING,
    patterns((r"\{\{[^}]{50,}\}\}", "Complex expression in template. Consider moving logic to a controller or computed value.")),
)

STRICT_RULES = [HARDCODED_URL, HARDCODED_TEXT, COMPLEX_EXPRESSION]
