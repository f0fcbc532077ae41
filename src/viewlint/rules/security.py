"""Output-escaping and script-injection rules."""

from ..models import Category, Dialect, Severity
from .base import MARKUP_DIALECTS, LineRule, patterns

UNESCAPED_OUTPUT_BLADE = LineRule(
    "unescaped_output",
    Category.SECURITY,
    Severity.ERROR,
    patterns(
        (
            r"\{!!\s*\$",
            "Unescaped output detected. Ensure content is safe or use {{ }} for auto-escaping.",
        ),
    ),
    dialects=frozenset({Dialect.BLADE}),
)

UNESCAPED_OUTPUT_ANTLERS = LineRule(
    "unescaped_output",
    Category.SECURITY,
    Severity.ERROR,
    patterns(
        (r"\{\{\{", "Triple-brace output is not escaped. Ensure content is safe or use {{ }}."),
        (
            r"\{\{[^}]*\|\s*raw\b",
            "The raw modifier disables escaping. Ensure content is safe or sanitize it first.",
        ),
    ),
    dialects=frozenset({Dialect.ANTLERS}),
)

XSS_RISK = LineRule(
    "xss_risk",
    Category.SECURITY,
    Severity.ERROR,
    patterns(
        (r"innerHTML\s*=|outerHTML\s*=", "Direct HTML injection detected. Validate and sanitize content."),
    ),
    dialects=MARKUP_DIALECTS,
)

SECURITY_RULES = [UNESCAPED_OUTPUT_BLADE, UNESCAPED_OUTPUT_ANTLERS, XSS_RISK]
