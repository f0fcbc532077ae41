"""Block constructs (opener ... closer) and name-keyed pairing.

Both dialects reduce to a stream of ``BlockToken`` values. ``pair_blocks``
walks that stream once with a stack: a closer pops the most recent opener
with the same name, an unmatched closer is reported as soon as it is seen,
and whatever is still open at the end is unclosed. Matching is by name
only, so interleaved constructs (``@if ... @foreach ... @endif ... @endforeach``)
still pair up.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..models import Dialect
from .lines import LineIndex
from .tags import iter_tags

BLADE_BLOCK_DIRECTIVES = (
    "if",
    "unless",
    "foreach",
    "forelse",
    "for",
    "while",
    "switch",
    "section",
    "push",
    "component",
)

BLADE_LOOPS = frozenset({"foreach", "forelse", "for", "while"})
ANTLERS_LOOPS = frozenset({"collection", "taxonomy", "foreach"})

# Always block openers in tag-bracket templates.
ANTLERS_BLOCK_TAGS = frozenset({"collection", "taxonomy", "nav", "if", "unless", "foreach"})
ANTLERS_SINGLE_METHODS = frozenset({"count"})

_BLADE_DIRECTIVE = re.compile(
    r"(?<![@\w])@(end)?(" + "|".join(BLADE_BLOCK_DIRECTIVES) + r")\b"
)
# @section('title', 'Home') and @push('x', '...') close themselves.
_BLADE_INLINE_SECTION = re.compile(r"\s*\(\s*(['\"])[^'\"]*\1\s*,")


@dataclass(frozen=True)
class BlockToken:
    name: str
    is_closer: bool
    start: int
    end: int  # offset just past the opener head (including its argument list)
    line: int
    column: int
    text: str  # the opener or closer as written


@dataclass(frozen=True)
class Block:
    name: str
    opener: BlockToken
    closer: BlockToken
    depth: int  # number of constructs open around this one

    @property
    def start(self) -> int:
        return self.opener.start

    @property
    def end(self) -> int:
        return self.closer.end

    @property
    def line(self) -> int:
        return self.opener.line

    def body(self, text: str) -> str:
        return text[self.opener.end:self.closer.start]

    def contains(self, other: "Block") -> bool:
        return self.start < other.start and other.end <= self.end


@dataclass(frozen=True)
class PairingResult:
    blocks: tuple[Block, ...]
    unmatched: tuple[BlockToken, ...]  # closers with no opener of that name
    unclosed: tuple[BlockToken, ...]  # openers never closed


def balanced_end(text: str, index: int) -> int:
    """Return the offset past the parenthesised argument list at ``index``.

    ``index`` may point at whitespace before the "(". Without an argument
    list ``index`` is returned unchanged.
    """
    i = index
    while i < len(text) and text[i] in " \t":
        i += 1
    if i >= len(text) or text[i] != "(":
        return index
    depth = 0
    quote: Optional[str] = None
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return index


def blade_block_tokens(text: str, lines: Optional[LineIndex] = None) -> list[BlockToken]:
    lines = lines or LineIndex(text)
    tokens = []
    for m in _BLADE_DIRECTIVE.finditer(text):
        is_closer = m.group(1) is not None
        name = m.group(2)
        end = m.end()
        if not is_closer:
            if name in ("section", "push") and _BLADE_INLINE_SECTION.match(text, end):
                continue
            end = balanced_end(text, end)
        tokens.append(
            BlockToken(
                name=name,
                is_closer=is_closer,
                start=m.start(),
                end=end,
                line=lines.line_of(m.start()),
                column=lines.column_of(m.start()),
                text=text[m.start():end],
            )
        )
    return tokens


def _pair_key(tag) -> str:
    """Name a tag pairs under: the namespace for block tags, else the full head."""
    if tag.namespace in ANTLERS_BLOCK_TAGS:
        return tag.namespace
    return tag.head


def antlers_block_tokens(text: str, lines: Optional[LineIndex] = None) -> list[BlockToken]:
    lines = lines or LineIndex(text)
    tags = list(iter_tags(text))
    closed_names = {_pair_key(t) for t in tags if t.is_closing}

    tokens = []
    for tag in tags:
        if tag.self_closing:
            continue
        name = _pair_key(tag)
        if tag.is_closing:
            is_closer = True
        elif tag.head in ("endif", "endunless"):
            name, is_closer = tag.head[3:], True
        elif tag.namespace in ANTLERS_BLOCK_TAGS:
            if tag.method in ANTLERS_SINGLE_METHODS:
                continue
            is_closer = False
        elif tag.namespace is None and tag.head in ANTLERS_BLOCK_TAGS:
            is_closer = False
        elif tag.is_assignment:
            continue
        elif name in closed_names:
            # Any tag or variable pair, e.g. {{ form:contact }} ... {{ /form:contact }}
            is_closer = False
        elif tag.namespace is not None and tag.namespace in closed_names:
            # {{ form:contact }} ... {{ /form }}
            name, is_closer = tag.namespace, False
        else:
            continue
        tokens.append(
            BlockToken(
                name=name,
                is_closer=is_closer,
                start=tag.start,
                end=tag.end,
                line=lines.line_of(tag.start),
                column=lines.column_of(tag.start),
                text=tag.raw,
            )
        )
    return tokens


def block_tokens(text: str, dialect: Dialect, lines: Optional[LineIndex] = None) -> list[BlockToken]:
    """Tokenize block constructs for a dialect; unknown dialects have none."""
    if dialect == Dialect.BLADE:
        return blade_block_tokens(text, lines)
    if dialect == Dialect.ANTLERS:
        return antlers_block_tokens(text, lines)
    return []


def pair_blocks(tokens: list[BlockToken]) -> PairingResult:
    """Pair openers with closers by name."""
    stack: list[BlockToken] = []
    blocks: list[Block] = []
    unmatched: list[BlockToken] = []

    for token in tokens:
        if not token.is_closer:
            stack.append(token)
            continue
        for i in range(len(stack) - 1, -1, -1):
            if stack[i].name == token.name:
                opener = stack.pop(i)
                blocks.append(Block(token.name, opener, token, depth=i))
                break
        else:
            unmatched.append(token)

    blocks.sort(key=lambda b: b.start)
    return PairingResult(tuple(blocks), tuple(unmatched), tuple(stack))


def loop_blocks(text: str, dialect: Dialect, lines: Optional[LineIndex] = None) -> list[Block]:
    """Return the paired loop constructs of a document in source order."""
    loop_names = BLADE_LOOPS if dialect == Dialect.BLADE else ANTLERS_LOOPS
    tokens = [t for t in block_tokens(text, dialect, lines) if t.name in loop_names]
    return list(pair_blocks(tokens).blocks)


@dataclass(frozen=True)
class LoopNest:
    """An outermost loop and every loop lexically inside it."""

    outer: Block
    inner: tuple[Block, ...]
    depth: int  # deepest nesting level, 2 for a loop inside a loop


def loop_nests(blocks: list[Block]) -> list[LoopNest]:
    """Group loops by their outermost enclosing loop.

    Only outermost loops that strictly contain another loop are returned,
    so sibling loops never produce a nest.
    """
    nests = []
    for block in blocks:
        if any(other.contains(block) for other in blocks if other is not block):
            continue
        inner = tuple(b for b in blocks if block.contains(b))
        if not inner:
            continue
        depth = 1 + max(sum(1 for o in blocks if o.contains(b)) for b in inner)
        nests.append(LoopNest(block, inner, depth))
    return nests
