"""Lint rules. Each rule is an independently testable predicate."""

from .antlers import infer_variable_type
from .base import DocumentRule, LineRule, Match, RuleContext
from .registry import RuleSet, build_rule_set

__all__ = [
    "DocumentRule",
    "LineRule",
    "Match",
    "RuleContext",
    "RuleSet",
    "build_rule_set",
    "infer_variable_type",
]
