"""Dialect configurations and the dialect classifier.

Each dialect is described once here: its file suffixes, the content
signature that identifies it, and the patterns the metrics collector counts.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..exceptions import InvalidOptionError
from ..models import Dialect


@dataclass(frozen=True)
class DialectConfig:
    """Everything the analyzers need to know about a template dialect."""

    dialect: Dialect
    suffixes: tuple[str, ...]

    # Content signature. Each match counts as one vote for the dialect.
    signature: str

    # Structural counting patterns.
    tag_pattern: str
    conditional_pattern: str
    loop_pattern: str
    include_pattern: str


BLADE = DialectConfig(
    dialect=Dialect.BLADE,
    suffixes=(".blade.php",),
    signature=r"@(?:if|unless|foreach|forelse|for|while|include|extends|section|yield|php|csrf|auth|isset|empty|switch|push|stack|component)\b|\{!!|\{\{\s*\$|<\?php|<x-[a-z]",
    tag_pattern=r"@\w+",
    conditional_pattern=r"@(?:if|unless)\s*\(",
    loop_pattern=r"@(?:foreach|forelse|for|while)\s*\(",
    include_pattern=r"@include(?:If|When|Unless|First)?\s*\(",
)

ANTLERS = DialectConfig(
    dialect=Dialect.ANTLERS,
    suffixes=(".antlers.html", ".antlers.php"),
    signature=r"\{\{\s*/?[a-z_][\w]*(?::[\w]+)?(?:\s+[\w:]+=\"|\s*\}\}|\s*\|)|\{\{\s*/[a-z_]|\{\{\s*(?:if|unless|elseif)\s+[^$}(]",
    tag_pattern=r"\{\{.*?\}\}",
    conditional_pattern=r"\{\{\s*(?:if|unless)\s+",
    loop_pattern=r"\{\{\s*(?:collection:|taxonomy:|foreach\b)",
    include_pattern=r"\{\{\s*partial:",
)

DIALECTS: dict[Dialect, DialectConfig] = {
    Dialect.BLADE: BLADE,
    Dialect.ANTLERS: ANTLERS,
}

TEMPLATE_TYPE_HINTS = ("auto", "auto-detect", "blade", "antlers")

_SIGNATURES = {d: re.compile(cfg.signature, re.IGNORECASE) for d, cfg in DIALECTS.items()}


def get_dialect_config(dialect: Dialect) -> Optional[DialectConfig]:
    """Return the registry entry, or None for ``Dialect.UNKNOWN``."""
    return DIALECTS.get(dialect)


def parse_template_type(hint: Optional[str]) -> Optional[Dialect]:
    """Turn a caller's template type option into a forced dialect.

    Returns None for auto detection.

    Raises:
        InvalidOptionError: If the hint is not a known template type.
    """
    if hint is None:
        return None
    normalized = hint.strip().lower()
    if normalized not in TEMPLATE_TYPE_HINTS:
        raise InvalidOptionError("template_type", hint, TEMPLATE_TYPE_HINTS)
    if normalized in ("auto", "auto-detect"):
        return None
    return Dialect(normalized)


def classify_dialect(path: Optional[str], text: str, hint: Optional[str] = "auto") -> Dialect:
    """Determine the dialect of a template.

    An explicit hint wins. Otherwise a recognised path suffix decides, and
    finally the content signatures are counted: tag-bracket votes against
    directive votes, ties going to the tag-bracket dialect. No votes at all
    means ``Dialect.UNKNOWN``, which is not an error.
    """
    forced = parse_template_type(hint)
    if forced is not None:
        return forced

    if path:
        lowered = path.lower()
        for cfg in (ANTLERS, BLADE):
            if lowered.endswith(cfg.suffixes):
                return cfg.dialect

    antlers_votes = len(_SIGNATURES[Dialect.ANTLERS].findall(text))
    blade_votes = len(_SIGNATURES[Dialect.BLADE].findall(text))

    if antlers_votes == 0 and blade_votes == 0:
        return Dialect.UNKNOWN
    if antlers_votes >= blade_votes:
        return Dialect.ANTLERS
    return Dialect.BLADE
