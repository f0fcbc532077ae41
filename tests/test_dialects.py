"""Tests for dialect classification and template type hints."""

import pytest

from viewlint.exceptions import InvalidOptionError
from viewlint.models import Dialect
from viewlint.scanning import classify_dialect, get_dialect_config, parse_template_type


class TestParseTemplateType:
    @pytest.mark.parametrize("hint", ["auto", "auto-detect", "AUTO", None])
    def test_auto_means_detect(self, hint):
        assert parse_template_type(hint) is None

    def test_explicit_dialects(self):
        assert parse_template_type("blade") == Dialect.BLADE
        assert parse_template_type(" Antlers ") == Dialect.ANTLERS

    def test_unknown_hint_rejected(self):
        with pytest.raises(InvalidOptionError) as exc_info:
            parse_template_type("twig")
        assert exc_info.value.option == "template_type"
        assert "blade" in exc_info.value.details["allowed"]


class TestClassifyDialect:
    def test_suffix_decides(self):
        assert classify_dialect("views/home.blade.php", "{{ title }}") == Dialect.BLADE
        assert classify_dialect("views/home.antlers.html", "@if($x)") == Dialect.ANTLERS
        assert classify_dialect("views/home.ANTLERS.PHP", "") == Dialect.ANTLERS

    def test_hint_beats_suffix(self):
        assert classify_dialect("views/home.blade.php", "", hint="antlers") == Dialect.ANTLERS

    def test_directive_content(self):
        text = "@extends('layouts.app')\n@section('content')\n{{ $title }}\n@endsection"
        assert classify_dialect(None, text) == Dialect.BLADE

    def test_tag_bracket_content(self):
        text = '{{ collection:blog limit="5" }}\n{{ title }}\n{{ /collection:blog }}'
        assert classify_dialect(None, text) == Dialect.ANTLERS

    def test_plain_markup_is_unknown(self):
        """No signature at all is not an error."""
        assert classify_dialect(None, "<p>Hello</p>") == Dialect.UNKNOWN
        assert classify_dialect("page.html", "") == Dialect.UNKNOWN

    def test_tie_goes_to_tag_bracket(self):
        """One vote each side resolves to the tag-bracket dialect."""
        assert classify_dialect(None, "@csrf {{ title }}") == Dialect.ANTLERS

    def test_majority_wins(self):
        text = "@if($a) @csrf @auth {{ title }}"
        assert classify_dialect(None, text) == Dialect.BLADE


class TestDialectConfig:
    def test_registry(self):
        assert get_dialect_config(Dialect.BLADE).suffixes == (".blade.php",)
        assert ".antlers.html" in get_dialect_config(Dialect.ANTLERS).suffixes

    def test_unknown_has_no_config(self):
        assert get_dialect_config(Dialect.UNKNOWN) is None
