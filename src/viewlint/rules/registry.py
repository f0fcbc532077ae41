"""Rule registry: which rules run for a dialect under a given policy."""

from dataclasses import dataclass

from ..config import LintPolicy
from ..models import Dialect
from .accessibility import ACCESSIBILITY_RULES
from .antlers import ANTLERS_RULES
from .base import DocumentRule, LineRule
from .policy import policy_rules
from .security import SECURITY_RULES
from .strict import STRICT_RULES
from .structure import STRUCTURE_RULES


@dataclass(frozen=True)
class RuleSet:
    line_rules: tuple[LineRule, ...]
    document_rules: tuple[DocumentRule, ...]

    @property
    def codes(self) -> list[str]:
        return [r.code for r in (*self.line_rules, *self.document_rules)]


def build_rule_set(policy: LintPolicy, dialect: Dialect, strict: bool = False) -> RuleSet:
    """Select rules in evaluation order.

    Line rules: policy, security, accessibility, then strict-mode rules.
    Document rules: structure, then tag-level rules.
    """
    line_rules: list[LineRule] = [*policy_rules(policy), *SECURITY_RULES]
    if policy.check_accessibility:
        line_rules.extend(ACCESSIBILITY_RULES)
    if strict:
        line_rules.extend(STRICT_RULES)

    document_rules = [*STRUCTURE_RULES, *ANTLERS_RULES]

    return RuleSet(
        line_rules=tuple(r for r in line_rules if dialect in r.dialects),
        document_rules=tuple(
            r for r in document_rules if dialect in r.dialects and (strict or not r.strict_only)
        ),
    )
