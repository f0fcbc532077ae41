"""Tests for block tokenizing and name-keyed pairing."""

from viewlint.models import Dialect
from viewlint.scanning import block_tokens, loop_blocks, loop_nests, pair_blocks
from viewlint.scanning.blocks import balanced_end


def _pair(text, dialect=Dialect.BLADE):
    return pair_blocks(block_tokens(text, dialect))


class TestBalancedEnd:
    def test_nested_parentheses(self):
        text = "@if($a && ($b || $c))"
        assert balanced_end(text, 3) == len(text)

    def test_quoted_parenthesis(self):
        text = "@include('a)b', ['x' => 1]) rest"
        assert text[balanced_end(text, 8) :] == " rest"

    def test_no_argument_list(self):
        assert balanced_end("@csrf", 5) == 5
        assert balanced_end("@else <p>", 5) == 5


class TestBladeTokens:
    def test_openers_and_closers(self):
        tokens = block_tokens("@if($a)\n@foreach($b as $c)\n@endforeach\n@endif", Dialect.BLADE)
        assert [(t.name, t.is_closer, t.line) for t in tokens] == [
            ("if", False, 1),
            ("foreach", False, 2),
            ("foreach", True, 3),
            ("if", True, 4),
        ]
        assert tokens[0].text == "@if($a)"

    def test_inline_section_is_not_a_block(self):
        text = "@section('title', 'Home')\n@section('content')\n<p>x</p>\n@endsection"
        result = _pair(text)
        assert len(result.blocks) == 1
        assert not result.unclosed

    def test_escaped_directive_ignored(self):
        assert block_tokens("@@if($a)", Dialect.BLADE) == []

    def test_unknown_dialect_has_no_blocks(self):
        assert block_tokens("@if($a)", Dialect.UNKNOWN) == []


class TestAntlersTokens:
    def test_collection_pair(self):
        result = _pair('{{ collection:blog limit="5" }}{{ title }}{{ /collection:blog }}', Dialect.ANTLERS)
        assert [b.name for b in result.blocks] == ["collection"]

    def test_variable_pair(self):
        result = _pair("{{ entries }}{{ title }}{{ /entries }}", Dialect.ANTLERS)
        assert [b.name for b in result.blocks] == ["entries"]

    def test_count_method_is_single(self):
        result = _pair("{{ collection:count in=\"blog\" }}", Dialect.ANTLERS)
        assert result.blocks == () and result.unclosed == ()

    def test_namespaced_tag_pairs(self):
        for text in (
            '{{ form:contact }}\n  <input id="e" name="email">\n{{ /form:contact }}',
            "{{ partial:card }}\n  <p>{{ title }}</p>\n{{ /partial:card }}",
            '{{ glide:image width="600" }}<img src="{{ url }}">{{ /glide:image }}',
            "{{ search:results }}{{ title }}{{ /search:results }}",
        ):
            result = _pair(text, Dialect.ANTLERS)
            assert len(result.blocks) == 1, text
            assert result.unmatched == () and result.unclosed == ()

    def test_short_closer_for_namespaced_tag(self):
        result = _pair("{{ form:contact }}<input>{{ /form }}", Dialect.ANTLERS)
        assert [b.name for b in result.blocks] == ["form"]
        assert result.unmatched == ()

    def test_single_namespaced_tag_is_not_a_block(self):
        result = _pair("{{ partial:card }}{{ partial:footer }}", Dialect.ANTLERS)
        assert result.blocks == () and result.unclosed == ()

    def test_lone_closer_still_unmatched(self):
        result = _pair("<p>x</p>{{ /form:contact }}", Dialect.ANTLERS)
        assert [t.name for t in result.unmatched] == ["form:contact"]

    def test_endif_closes_if(self):
        result = _pair("{{ if title }}<h1>{{ title }}</h1>{{ endif }}", Dialect.ANTLERS)
        assert [b.name for b in result.blocks] == ["if"]


class TestPairBlocks:
    def test_interleaved_constructs_pair_by_name(self):
        result = _pair("@if($a)\n@foreach($b as $c)\n@endif\n@endforeach")
        assert sorted(b.name for b in result.blocks) == ["foreach", "if"]
        assert result.unmatched == ()
        assert result.unclosed == ()

    def test_unclosed_and_unmatched(self):
        result = _pair("@endforeach\n@if($a)")
        assert [t.name for t in result.unmatched] == ["foreach"]
        assert [t.name for t in result.unclosed] == ["if"]

    def test_depth(self):
        result = _pair("@if($a)\n@if($b)\n@endif\n@endif")
        assert sorted(b.depth for b in result.blocks) == [0, 1]


class TestLoopNests:
    def test_three_deep(self):
        text = (
            "@foreach($a as $b)\n"
            "@foreach($b->c as $d)\n"
            "@for($i = 0; $i < 3; $i++)\n"
            "@endfor\n"
            "@endforeach\n"
            "@endforeach"
        )
        nests = loop_nests(loop_blocks(text, Dialect.BLADE))
        assert len(nests) == 1
        assert nests[0].depth == 3
        assert len(nests[0].inner) == 2
        assert nests[0].outer.line == 1

    def test_siblings_are_not_nests(self):
        text = "@foreach($a as $b)\n@endforeach\n@foreach($c as $d)\n@endforeach"
        assert loop_nests(loop_blocks(text, Dialect.BLADE)) == []

    def test_conditionals_are_not_loops(self):
        text = "@if($a)\n@foreach($b as $c)\n@endforeach\n@endif"
        assert [b.name for b in loop_blocks(text, Dialect.BLADE)] == ["foreach"]
