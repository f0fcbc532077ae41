"""Tests for the line and document rules of directive-embedding templates."""

import pytest

from viewlint.config import LintPolicy
from viewlint.engine import RuleEngine
from viewlint.models import Category, Dialect, Severity
from viewlint.rules import build_rule_set
from viewlint.rules.accessibility import MISSING_ALT_TEXT, MISSING_FORM_LABEL
from viewlint.rules.policy import INLINE_PHP, AccessorRule, preferred_tag_for


def _codes(text, dialect=Dialect.BLADE, **engine_kwargs):
    return [f.rule_code for f in RuleEngine(**engine_kwargs).check(text, dialect)]


class TestLinePredicates:
    """Rules are plain predicates over one line."""

    def test_inline_php_matches(self):
        matches = INLINE_PHP.matches("<?php echo $x; ?>")
        assert [m.text for m in matches] == ["<?php", "?>"]

    def test_alt_present(self):
        assert MISSING_ALT_TEXT.matches('<img src="a.png" alt="A">') == []
        assert len(MISSING_ALT_TEXT.matches('<img src="a.png">')) == 1

    def test_label_on_line_suppresses(self):
        assert MISSING_FORM_LABEL.matches('<label>Q <input name="q"></label>') == []
        assert MISSING_FORM_LABEL.matches('<input type="hidden" name="t">') == []
        assert len(MISSING_FORM_LABEL.matches('<input type="text" name="q">')) == 1

    def test_accessor_reported_once_per_line(self):
        rule = AccessorRule(("Statamic",))
        matches = rule.matches("{{ \\Statamic\\Facades\\Entry::all() }}")
        assert len(matches) == 1
        assert "facade" in matches[0].message


class TestPolicyRules:
    def test_inline_php(self):
        findings = RuleEngine().check("@php $x = 1; @endphp", Dialect.BLADE)
        assert [f.rule_code for f in findings] == ["inline_php"]
        assert findings[0].severity == Severity.ERROR
        assert findings[0].category == Category.POLICY
        assert findings[0].column == 1

    def test_facade_call_with_preferred_tag(self):
        codes = _codes("{{ \\Statamic\\Facades\\Entry::whereCollection('blog') }}")
        assert codes == ["facade_call", "prefer_statamic_tags"]

    def test_database_facade(self):
        codes = _codes("{{ DB::table('posts')->count() }}")
        assert "facade_call" in codes
        assert "database_calls" in codes

    def test_http_calls(self):
        assert "http_calls" in _codes("{{ Http::get('https://api.test') }}")
        assert "http_calls" in _codes("<?php $r = curl_init(); ?>")

    def test_models_in_view(self):
        assert "models_in_view" in _codes("{{ \\App\\Models\\Post::query()->where('a', 1)->get() }}")

    def test_policy_is_injected(self):
        policy = LintPolicy(forbid_inline_code=False, forbidden_accessors=("Cache",))
        codes = _codes("@php DB::table('x'); @endphp", policy=policy)
        assert "inline_php" not in codes
        assert "facade_call" not in codes
        assert "database_calls" in codes

    def test_policy_rules_skip_other_dialects(self):
        assert _codes("@php echo 1; @endphp", Dialect.ANTLERS) == []

    def test_preferred_tag_lookup(self):
        assert preferred_tag_for("Collection::findByHandle('pages')") == "<x-statamic:collection>"
        assert preferred_tag_for("$post->title") is None


class TestSecurityRules:
    def test_unescaped_blade(self):
        findings = RuleEngine().check("{!! $body !!}", Dialect.BLADE)
        assert [f.rule_code for f in findings] == ["unescaped_output"]
        assert findings[0].category == Category.SECURITY

    @pytest.mark.parametrize("text", ["{{{ body }}}", "{{ body | raw }}"])
    def test_unescaped_antlers(self, text):
        assert "unescaped_output" in _codes(text, Dialect.ANTLERS)

    def test_script_injection(self):
        assert "xss_risk" in _codes("<script>el.innerHTML = data;</script>")


class TestAccessibilityRules:
    def test_all_dialects(self):
        for dialect in Dialect:
            assert "missing_alt_text" in _codes('<img src="a.png">', dialect)

    def test_generic_link_text(self):
        assert "non_descriptive_link" in _codes('<a href="/post">Click here</a>')

    def test_disabled_by_policy(self):
        assert _codes('<img src="a.png">', policy=LintPolicy(check_accessibility=False)) == []


class TestStructureRules:
    def test_component_naming(self):
        assert "component_naming" in _codes("<x-BlogCard :post=\"$post\" />")
        assert "component_naming" not in _codes("<x-blog-card :post=\"$post\" />")

    def test_property_access_in_loop(self):
        text = (
            "@foreach($posts as $post)\n"
            "  {{ $post->title }} {{ $post->date }} {{ $post->author }} {{ $post->slug }}\n"
            "@endforeach"
        )
        findings = [f for f in RuleEngine().check(text, Dialect.BLADE) if f.rule_code == "n_plus_one"]
        assert len(findings) == 1
        assert findings[0].severity == Severity.WARNING
        assert findings[0].details["property_accesses"] == 4


class TestStrictRules:
    def test_only_in_strict_mode(self):
        text = '<a href="https://example.com/about">About</a>'
        assert "hardcoded_url" not in _codes(text)
        assert "hardcoded_url" in _codes(text, strict_mode=True)

    def test_complex_expression(self):
        text = "{{ $post->author->profile->avatar ?? $defaults->avatar ?? asset('img/a.png') }}"
        assert "complex_expression" in _codes(text, strict_mode=True)


class TestUnknownDialect:
    def test_only_dialect_agnostic_rules(self):
        """Unknown templates still get accessibility checks but no markup-specific rules."""
        codes = _codes('@php echo 1; @endphp\n<img src="a.png">\n{!! $x !!}', Dialect.UNKNOWN)
        assert codes == ["missing_alt_text"]


class TestRuleSet:
    def test_evaluation_order(self):
        rules = build_rule_set(LintPolicy(), Dialect.BLADE)
        codes = rules.codes
        assert codes.index("inline_php") < codes.index("unescaped_output") < codes.index("missing_alt_text")
        assert "unclosed_directive" in codes
        assert "hardcoded_url" not in codes

    def test_strict_only_document_rules(self):
        assert "glide_without_params" not in build_rule_set(LintPolicy(), Dialect.ANTLERS).codes
        assert "glide_without_params" in build_rule_set(LintPolicy(), Dialect.ANTLERS, strict=True).codes
