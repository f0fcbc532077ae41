"""Tokenizer for tag-bracket ({{ ... }}) templates.

Splits a document into ``Tag`` records: closing marker, namespace and
method, parameters and the modifier chain. Comments (``{{# ... #}}``) and
escaped tags (``@{{ ... }}``) are not tags.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

_TAG = re.compile(r"(?<!@)(?<!\{)\{\{(?!\{)(?!#)(.*?)\}\}", re.DOTALL)
_TRIPLE = re.compile(r"\{\{\{(.*?)\}\}\}", re.DOTALL)
_PARAM = re.compile(r"""([\w:\-]+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'|]+))""")
_MODIFIER_SPLIT = re.compile(r"(?<!\|)\|(?!\|)")

CONTROL_KEYWORDS = frozenset({"if", "unless", "elseif", "else", "endif", "endunless", "foreach"})


@dataclass(frozen=True)
class Tag:
    raw: str  # "{{ collection:blog limit="5" }}"
    inner: str  # stripped text between the braces
    start: int  # offset of the opening "{{"
    end: int  # offset just past the closing "}}"
    head: str  # first word, without a leading "/"
    rest: str  # everything after the head, before any modifier
    is_closing: bool
    namespace: Optional[str] = None  # "collection" for "collection:blog"
    method: Optional[str] = None  # "blog" for "collection:blog"
    params: dict[str, str] = field(default_factory=dict, compare=False)
    modifiers: tuple[str, ...] = ()
    self_closing: bool = False  # "{{ tag /}}"

    @property
    def block_name(self) -> str:
        """Name used to pair this tag with its closer."""
        return self.namespace or self.head

    @property
    def is_assignment(self) -> bool:
        return bool(re.match(r"=(?!=)", self.rest.lstrip()))


def parse_tag(inner: str, start: int = 0, raw: Optional[str] = None) -> Tag:
    """Parse the text between ``{{`` and ``}}`` into a Tag."""
    content = inner.strip()
    self_closing = content.endswith("/") and not content.startswith("/")
    if self_closing:
        content = content[:-1].rstrip()

    is_closing = content.startswith("/")
    if is_closing:
        content = content[1:].lstrip()

    parts = _MODIFIER_SPLIT.split(content)
    tag_part = parts[0].strip()
    modifiers = tuple(
        m for m in (re.split(r"[\s:(]", p.strip(), maxsplit=1)[0] for p in parts[1:]) if m
    )

    head, _, rest = tag_part.partition(" ")
    namespace = method = None
    if ":" in head and not head.startswith(":"):
        namespace, _, method = head.partition(":")

    params = {}
    for m in _PARAM.finditer(rest):
        value = next((g for g in m.groups()[1:] if g is not None), "")
        params[m.group(1)] = value

    if raw is None:
        raw = "{{" + inner + "}}"
    return Tag(
        raw=raw,
        inner=inner.strip(),
        start=start,
        end=start + len(raw),
        head=head,
        rest=rest.strip(),
        is_closing=is_closing,
        namespace=namespace,
        method=method,
        params=params,
        modifiers=modifiers,
        self_closing=self_closing,
    )


def iter_tags(text: str) -> Iterator[Tag]:
    """Yield every ``{{ ... }}`` tag in document order."""
    for m in _TAG.finditer(text):
        yield parse_tag(m.group(1), start=m.start(), raw=m.group(0))


def iter_raw_output(text: str) -> Iterator[re.Match]:
    """Yield every triple-brace (unescaped) output."""
    return _TRIPLE.finditer(text)
