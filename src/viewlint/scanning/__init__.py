"""Template collection, dialect classification and block tokenizing."""

from .blocks import (
    Block,
    BlockToken,
    LoopNest,
    PairingResult,
    block_tokens,
    loop_blocks,
    loop_nests,
    pair_blocks,
)
from .collector import CollectionResult, collect_templates, read_template, resolve_path
from .dialects import DIALECTS, DialectConfig, classify_dialect, get_dialect_config, parse_template_type
from .lines import LineIndex
from .tags import Tag, iter_tags, parse_tag

__all__ = [
    "Block",
    "BlockToken",
    "LoopNest",
    "PairingResult",
    "block_tokens",
    "loop_blocks",
    "loop_nests",
    "pair_blocks",
    "CollectionResult",
    "collect_templates",
    "read_template",
    "resolve_path",
    "DIALECTS",
    "DialectConfig",
    "classify_dialect",
    "get_dialect_config",
    "parse_template_type",
    "LineIndex",
    "Tag",
    "iter_tags",
    "parse_tag",
]
