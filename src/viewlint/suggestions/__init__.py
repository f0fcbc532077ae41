"""Suggestion generation, ranking and mechanical fixes."""

from .autofix import FIXERS, add_empty_alt, collection_tag, entries_tag, fix_for, generate_fixes
from .generator import (
    SuggestionGenerator,
    build_plan,
    build_roadmap,
    categorize,
    check_focus,
    rank_suggestions,
    suggestion_id,
    suggestion_statistics,
)
from .table import FOCUS_CATEGORIES, SUGGESTION_TABLE, SuggestionTemplate

__all__ = [
    "FIXERS",
    "FOCUS_CATEGORIES",
    "SUGGESTION_TABLE",
    "SuggestionGenerator",
    "SuggestionTemplate",
    "add_empty_alt",
    "build_plan",
    "build_roadmap",
    "categorize",
    "check_focus",
    "collection_tag",
    "entries_tag",
    "fix_for",
    "generate_fixes",
    "rank_suggestions",
    "suggestion_id",
    "suggestion_statistics",
]
