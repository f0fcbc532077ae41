"""Caching opportunities: info-level findings that never affect the score."""

import re

from ..models import Dialect, Finding, Severity
from .context import TemplateContext

_STATIC_SECTION = re.compile(r"<(header|footer|nav)\b[^>]*>.*?</\1>", re.DOTALL | re.IGNORECASE)
_COLLECTION_QUERY = re.compile(r"\{\{\s*collection:([\w-]+)[^}]*\}\}")
_ASSET_PROCESSING = re.compile(r"\{\{\s*(?:asset|image|glide)[:\s]")


def _opportunity(ctx: TemplateContext, rule_code: str, message: str, suggestion: str,
                 offset: int, benefit: str, **details) -> Finding:
    return ctx.finding(
        rule_code,
        Severity.INFO,
        message,
        offset=offset,
        suggestion=suggestion,
        benefit=benefit,
        **details,
    )


def find_caching_opportunities(ctx: TemplateContext) -> list[Finding]:
    opportunities = []

    static = _STATIC_SECTION.search(ctx.text)
    if static:
        opportunities.append(
            _opportunity(
                ctx,
                "static_caching",
                f"Static <{static.group(1).lower()}> content detected",
                "Consider using fragment caching for static sections",
                static.start(),
                benefit="high",
            )
        )

    if ctx.dialect != Dialect.ANTLERS:
        return opportunities

    for m in _COLLECTION_QUERY.finditer(ctx.text):
        opportunities.append(
            _opportunity(
                ctx,
                "collection_caching",
                f"Collection '{m.group(1)}' query could benefit from caching",
                "Wrap the collection loop in {{ cache }} ... {{ /cache }}",
                m.start(),
                benefit="medium",
                collection=m.group(1),
            )
        )

    asset = _ASSET_PROCESSING.search(ctx.text)
    if asset:
        opportunities.append(
            _opportunity(
                ctx,
                "asset_caching",
                "Asset/image processing detected",
                "Enable asset caching and consider responsive images",
                asset.start(),
                benefit="high",
            )
        )
    return opportunities
