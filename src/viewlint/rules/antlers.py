"""Tag-level rules for tag-bracket templates.

Each ``{{ ... }}`` tag is parsed once per document and checked against the
namespace and modifier lists in the policy. When the caller supplies a field
catalog (field handle -> field type, taken from the content store), tags
that name a field are also checked against that field's type.
"""

from __future__ import annotations

import difflib
from typing import Mapping, Optional

from ..models import Category, Dialect, Finding, Severity
from ..scanning.tags import CONTROL_KEYWORDS, Tag, iter_tags
from .base import DocumentRule, RuleContext

ANTLERS_ONLY = frozenset({Dialect.ANTLERS})

GLIDE_PARAMS = frozenset({"width", "height", "w", "h", "quality", "q", "fit", "src", "preset"})
RELATIONSHIP_TYPES = frozenset({"entries", "terms", "taxonomy", "users", "assets"})
ASSET_MODIFIERS = frozenset({"glide", "resize", "crop"})

# Variables the engine provides in every template context.
CONTEXT_VARIABLES = frozenset({
    "title", "slug", "url", "uri", "permalink", "id", "content", "date",
    "last_modified", "updated_at", "updated_by", "collection", "blueprint",
    "site", "locale", "current_date", "now", "today", "current_url",
    "current_uri", "segment_1", "segment_2", "segment_3", "segment_4",
    "first", "last", "count", "index", "total_results", "no_results",
    "csrf_token", "csrf_field", "homepage", "is_homepage", "environment",
    "xml_header", "value", "key", "else", "noparse", "template", "layout",
    "logged_in", "logged_out", "current_user", "get", "post", "old",
})


def infer_variable_type(name: str, fields: Mapping[str, str]) -> str:
    """Return the data type of a template variable.

    The field catalog wins; built-in context variables are ``"context"``;
    anything else is ``"unknown"``.
    """
    root = name.split(".")[0].split(":")[0]
    if root in fields:
        return fields[root]
    if root in CONTEXT_VARIABLES:
        return "context"
    return "unknown"


def _finding(code: str, ctx: RuleContext, tag: Tag, message: str, severity: Severity,
             category: Category = Category.MAINTAINABILITY, suggestion: Optional[str] = None) -> Finding:
    return Finding(
        rule_code=code,
        category=category,
        severity=severity,
        line=ctx.lines.line_of(tag.start),
        column=ctx.lines.column_of(tag.start),
        message=message,
        evidence=tag.raw[:100],
        suggestion=suggestion,
    )


class TagRule(DocumentRule):
    """Runs ``check_tag`` for every opening tag in the document."""

    dialects = ANTLERS_ONLY

    def check(self, ctx: RuleContext) -> list[Finding]:
        findings = []
        for tag in iter_tags(ctx.text):
            if tag.is_closing or not tag.head:
                continue
            findings.extend(self.check_tag(tag, ctx))
        return findings

    def check_tag(self, tag: Tag, ctx: RuleContext) -> list[Finding]:
        raise NotImplementedError


class UnknownNamespaceRule(TagRule):
    code = "unknown_namespace"

    def check_tag(self, tag, ctx):
        if tag.namespace is None or tag.namespace in ctx.policy.known_tag_namespaces:
            return []
        # "author:name" style access into a known field is a variable path
        if tag.namespace in ctx.fields or tag.namespace in CONTEXT_VARIABLES:
            return []
        close = difflib.get_close_matches(tag.namespace, ctx.policy.known_tag_namespaces, n=1)
        hint = f"Did you mean '{close[0]}'?" if close else None
        return [
            _finding(
                self.code,
                ctx,
                tag,
                f"Unknown tag namespace '{tag.namespace}'",
                Severity.WARNING,
                suggestion=hint,
            )
        ]


class EmptyControlRule(TagRule):
    """``{{ if }}`` without a condition, ``{{ foreach }}`` without a target."""

    code = "empty_conditional"

    def check_tag(self, tag, ctx):
        if tag.namespace is None and tag.head in ("if", "unless", "elseif") and not tag.rest:
            return [
                _finding("empty_conditional", ctx, tag, f"'{tag.head}' tag without a condition", Severity.ERROR)
            ]
        if tag.head == "foreach" and not tag.rest:
            return [
                _finding("empty_loop", ctx, tag, "'foreach' tag without an array to loop over", Severity.ERROR)
            ]
        return []


class CollectionParamsRule(TagRule):
    code = "collection_without_params"

    def check_tag(self, tag, ctx):
        if tag.namespace != "collection" or tag.params or tag.method == "count":
            return []
        return [
            _finding(
                self.code,
                ctx,
                tag,
                f"Collection tag '{tag.head}' might benefit from parameters like limit or sort",
                Severity.WARNING,
                category=Category.PERFORMANCE,
                suggestion='Add limit="10" or paginate="10"',
            )
        ]


class GlideParamsRule(TagRule):
    code = "glide_without_params"
    strict_only = True

    def check_tag(self, tag, ctx):
        if tag.namespace != "glide" and tag.head != "glide":
            return []
        if GLIDE_PARAMS & set(tag.params):
            return []
        return [
            _finding(
                self.code,
                ctx,
                tag,
                "Glide tag without width, height or quality serves the original image",
                Severity.WARNING,
                category=Category.PERFORMANCE,
            )
        ]


class UnknownModifierRule(TagRule):
    code = "unknown_modifier"
    strict_only = True

    def check_tag(self, tag, ctx):
        findings = []
        for modifier in tag.modifiers:
            if modifier in ctx.policy.known_modifiers:
                continue
            close = difflib.get_close_matches(modifier, ctx.policy.known_modifiers, n=1)
            findings.append(
                _finding(
                    self.code,
                    ctx,
                    tag,
                    f"Unknown modifier '{modifier}'",
                    Severity.WARNING,
                    suggestion=f"Did you mean '{close[0]}'?" if close else None,
                )
            )
        return findings


class FieldUsageRule(TagRule):
    """Checks tags that name a catalog field against the field's type."""

    code = "field_usage"

    def check(self, ctx: RuleContext) -> list[Finding]:
        if not ctx.fields:
            return []
        tags = [t for t in iter_tags(ctx.text) if not t.is_closing and t.head]
        local = {t.head for t in tags if t.is_assignment}
        local |= {t.params["as"] for t in tags if "as" in t.params}
        findings = []
        for tag in tags:
            if tag.head.split(".")[0] in local:
                continue
            findings.extend(self.check_tag(tag, ctx))
        return findings

    def check_tag(self, tag, ctx):
        name = tag.head.split(".")[0]
        if tag.namespace is not None or name in CONTROL_KEYWORDS or tag.is_assignment:
            return []
        field_type = infer_variable_type(name, ctx.fields)

        if field_type == "unknown":
            if not ctx.strict or not name.isidentifier():
                return []
            close = difflib.get_close_matches(name, list(ctx.fields), n=3)
            return [
                _finding(
                    "unknown_field",
                    ctx,
                    tag,
                    f"Unknown field '{name}'",
                    Severity.WARNING,
                    suggestion=f"Did you mean: {', '.join(close)}?" if close else None,
                )
            ]

        if field_type == "date" and ctx.strict:
            if "format" not in tag.params and "format" not in tag.modifiers:
                return [
                    _finding(
                        "missing_date_format",
                        ctx,
                        tag,
                        f"Date field '{name}' should specify a format parameter",
                        Severity.WARNING,
                    )
                ]

        if field_type in RELATIONSHIP_TYPES and not tag.modifiers:
            closer = "{{ /" + name + " }}"
            if not _has_closer(ctx.text, name, tag.end):
                return [
                    _finding(
                        "relationship_field_unclosed",
                        ctx,
                        tag,
                        f"Relationship field '{name}' is usually looped; close it with {closer}",
                        Severity.WARNING,
                    )
                ]

        if field_type == "assets" and ctx.strict and set(tag.modifiers) - ASSET_MODIFIERS:
            return [
                _finding(
                    "invalid_asset_modifier",
                    ctx,
                    tag,
                    f"Field '{name}' is an asset field. Consider using glide, resize, or crop modifiers",
                    Severity.WARNING,
                )
            ]

        if field_type in ("bard", "replicator") and ctx.strict:
            return [
                _finding(
                    "complex_field_usage",
                    ctx,
                    tag,
                    f"Complex field '{name}' may require conditional logic for sets",
                    Severity.WARNING,
                )
            ]
        return []


def _has_closer(text: str, name: str, after: int) -> bool:
    for tag in iter_tags(text[after:]):
        if tag.is_closing and tag.block_name == name:
            return True
    return False


ANTLERS_RULES = [
    UnknownNamespaceRule(),
    EmptyControlRule(),
    CollectionParamsRule(),
    GlideParamsRule(),
    UnknownModifierRule(),
    FieldUsageRule(),
]
