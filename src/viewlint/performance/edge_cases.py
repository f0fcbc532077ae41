"""Advisory edge-case risks.

These never become lint violations. Recursion is only checked at the
reference site: a partial that includes itself by name is flagged, a cycle
through other partials is not.
"""

import re
from pathlib import PurePosixPath
from typing import Optional

from ..config import DEFAULT_HEURISTICS, HeuristicConfig
from ..models import Dialect, EdgeCase
from ..scanning.lines import LineIndex

_ANTLERS_PARTIAL = re.compile(r"\{\{\s*partial:([\w/.\-]+)")
_BLADE_INCLUDE = re.compile(r"@(?:include|includeIf|includeWhen|includeFirst|each)\s*\(\s*['\"]([^'\"]+)['\"]")
_ITEM_CAP = re.compile(r"\blimit=[\"'](\d+)[\"']|->(?:take|limit)\(\s*(\d+)\s*\)")
_WHILE = {
    Dialect.BLADE: re.compile(r"@while\s*\("),
    Dialect.ANTLERS: re.compile(r"\{\{\s*while\s"),
}
_RAW_OUTPUT = {
    Dialect.BLADE: (re.compile(r"\{!!"), "Unescaped output detected - ensure data is sanitized"),
    Dialect.ANTLERS: (
        re.compile(r"\{\{\{|\|\s*raw\b"),
        "Triple braces or the raw modifier output unescaped HTML - ensure data is sanitized",
    ),
}

TEMPLATE_SUFFIXES = (".blade.php", ".antlers.html", ".antlers.php", ".html", ".php")


def template_name(path: str) -> str:
    """``views/partials/_card.antlers.html`` -> ``card``."""
    name = PurePosixPath(path.replace("\\", "/")).name
    for suffix in TEMPLATE_SUFFIXES:
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break
    return name.lstrip("_")


def _reference_name(reference: str) -> str:
    return re.split(r"[/.]", reference)[-1].lstrip("_")


def referenced_partials(text: str, dialect: Dialect) -> list[str]:
    """Partial names referenced by a template, in first-seen order."""
    if dialect == Dialect.ANTLERS:
        names = _ANTLERS_PARTIAL.findall(text)
    elif dialect == Dialect.BLADE:
        names = _BLADE_INCLUDE.findall(text)
    else:
        return []
    return list(dict.fromkeys(names))


def detect_edge_cases(
    text: str,
    dialect: Dialect,
    path: Optional[str] = None,
    heuristics: HeuristicConfig = DEFAULT_HEURISTICS,
) -> list[EdgeCase]:
    lines = LineIndex(text)
    cases = []

    if path and not path.startswith("<"):
        own = template_name(path)
        pattern = _ANTLERS_PARTIAL if dialect == Dialect.ANTLERS else _BLADE_INCLUDE
        for m in pattern.finditer(text):
            if _reference_name(m.group(1)) == own:
                cases.append(
                    EdgeCase(
                        kind="potential_recursion",
                        message=f"Template includes '{m.group(1)}', which resolves to itself",
                        risk="warning",
                        line=lines.line_of(m.start()),
                    )
                )
                break

    for m in _ITEM_CAP.finditer(text):
        cap = int(m.group(1) or m.group(2))
        if cap > heuristics.memory_limit_threshold:
            cases.append(
                EdgeCase(
                    kind="memory_intensive",
                    message=f"Very large limit ({cap}) may cause memory issues",
                    risk="critical",
                    line=lines.line_of(m.start()),
                )
            )
            break

    loop = _WHILE.get(dialect)
    m = loop.search(text) if loop else None
    if m:
        cases.append(
            EdgeCase(
                kind="infinite_loop_risk",
                message="While loops can run forever if not properly bounded",
                risk="critical",
                line=lines.line_of(m.start()),
            )
        )

    raw = _RAW_OUTPUT.get(dialect)
    m = raw[0].search(text) if raw else None
    if m:
        cases.append(EdgeCase(kind="xss_risk", message=raw[1], risk="high", line=lines.line_of(m.start())))

    return cases
