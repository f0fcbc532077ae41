"""Configuration loading and management for viewlint.

The analysis engine never reads ambient configuration. Callers build an
immutable ``AnalysisConfig`` (usually via ``load_config``) and pass the
``LintPolicy`` / ``HeuristicConfig`` pieces into the engine. Sources are
merged in priority order:
    1. Defaults (defined on the dataclasses)
    2. Global config (~/.viewlint.toml)
    3. Project config (./viewlint.toml)
    4. Explicit config file
    5. Environment variables (VIEWLINT_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(verbose=True)
    >>> config.verbosity
    'verbose'
    >>> config.policy.forbidden_accessors
    ('Statamic', 'DB', 'Http', 'Cache', 'Storage')
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_TAG_NAMESPACES = (
    "collection",
    "taxonomy",
    "nav",
    "form",
    "glide",
    "partial",
    "section",
    "yield",
    "site",
    "config",
    "env",
    # Core tags that are also addressed as namespace:method.
    "cache",
    "asset",
    "assets",
    "user",
    "users",
    "search",
    "session",
    "structure",
    "svg",
    "link",
    "path",
    "trans",
    "locales",
    "get_content",
    "get_files",
    "redirect",
    "scope",
    "vite",
    "mix",
)

DEFAULT_MODIFIERS = (
    "upper", "lower", "title", "sentence", "slug", "studly", "camel",
    "length", "word_count", "read_time", "strip_tags", "markdown",
    "textile", "smartypants", "widont", "format", "relative", "iso_format",
    "modify", "add", "subtract", "multiply", "divide", "round", "ceil",
    "floor", "abs", "sort", "reverse", "shuffle", "limit", "offset",
    "unique", "pluck", "where", "where_not", "group_by", "collapse",
    "flatten", "contains", "starts_with", "ends_with", "matches", "split",
    "join", "replace", "regex_replace", "raw", "entities", "sanitize",
    "truncate", "safe_truncate", "nl2br", "trim", "first", "last",
    "count", "is_empty", "to_json", "json", "url", "ascii",
)


@dataclass(frozen=True)
class LintPolicy:
    """What the rule engine treats as a violation.

    Attributes:
        forbidden_accessors: Privileged service/data accessors (facades) that
            must not be called from a template
        forbid_inline_code: Report raw ``<?php`` / ``@php`` blocks
        forbid_models_in_view: Report direct model/query access
        prefer_tags: Suggest declarative ``<x-statamic:...>`` tags over
            accessor calls
        prefer_components: Suggest extracting card-like markup to components
        check_accessibility: Run the alt/label/link accessibility rules
        known_tag_namespaces: Namespaces accepted in ``{{ ns:tag }}`` tags
        known_modifiers: Modifiers accepted after ``|`` in strict mode
    """

    forbidden_accessors: tuple[str, ...] = ("Statamic", "DB", "Http", "Cache", "Storage")
    forbid_inline_code: bool = True
    forbid_models_in_view: bool = True
    prefer_tags: bool = True
    prefer_components: bool = True
    check_accessibility: bool = True
    known_tag_namespaces: tuple[str, ...] = DEFAULT_TAG_NAMESPACES
    known_modifiers: tuple[str, ...] = DEFAULT_MODIFIERS

    def __post_init__(self) -> None:
        """Validate policy and normalise list-like fields to tuples."""
        for name in ("forbidden_accessors", "known_tag_namespaces", "known_modifiers"):
            value = getattr(self, name)
            if isinstance(value, str):
                raise ValueError(f"{name} must be a list of names, not a string")
            # Frozen: bypass __setattr__ to coerce TOML lists
            object.__setattr__(self, name, tuple(value))
        for accessor in self.forbidden_accessors:
            if not accessor or not accessor.replace("_", "").isalnum():
                raise ValueError(f"forbidden_accessors entry {accessor!r} is not an identifier")


@dataclass(frozen=True)
class HeuristicConfig:
    """Tuning constants for complexity, render-time and detector thresholds.

    The render-time estimate is an order-of-magnitude heuristic, not a
    measurement; every weight lives here so it can be calibrated.

    Attributes:
        Complexity score:
            score_line_divisor / score_line_cap: min(lines / divisor, cap)
            score_tag_weight, score_conditional_weight, score_loop_weight

        Complexity factors (reported when exceeded):
            factor_tag_count, factor_conditional_count, factor_loop_count,
            factor_line_count, factor_include_count

        Render-time estimate (ms):
            render_base_ms, render_loop_ms, render_conditional_ms,
            render_tag_ms, render_critical_penalty_ms, render_warning_penalty_ms

        Performance score:
            score_critical_penalty, score_issue_penalty,
            slow_render_ms / slow_render_penalty,
            very_slow_render_ms / very_slow_render_penalty

        Detectors:
            relationship_names: attributes that trigger N+1 inside a loop
            eager_load_markers: opener text that suppresses N+1
            pagination_threshold: fixed item cap above which pagination is expected
            memory_limit_threshold: fixed item cap treated as a memory risk
            property_access_threshold: ``$x->`` accesses per loop for the lint N+1 warning
            excessive_partials, complex_conditional_operators, repeated_markup_count,
            inline_block_chars, inline_php_chars, long_template_lines,
            inline_style_attributes, repeated_string_count, dynamic_value_count
    """

    score_line_divisor: float = 10.0
    score_line_cap: float = 20.0
    score_tag_weight: float = 0.5
    score_conditional_weight: float = 2.0
    score_loop_weight: float = 3.0

    factor_tag_count: int = 50
    factor_conditional_count: int = 10
    factor_loop_count: int = 5
    factor_line_count: int = 200
    factor_include_count: int = 5

    render_base_ms: float = 10.0
    render_loop_ms: float = 5.0
    render_conditional_ms: float = 1.0
    render_tag_ms: float = 0.1
    render_critical_penalty_ms: float = 50.0
    render_warning_penalty_ms: float = 20.0

    score_critical_penalty: int = 20
    score_issue_penalty: int = 10
    slow_render_ms: float = 500.0
    slow_render_penalty: int = 15
    very_slow_render_ms: float = 1000.0
    very_slow_render_penalty: int = 30

    relationship_names: tuple[str, ...] = ("author", "user", "category", "categories", "tags", "taxonomy")
    eager_load_markers: tuple[str, ...] = ("with=", "with(", "load(")
    pagination_threshold: int = 50
    memory_limit_threshold: int = 1000
    property_access_threshold: int = 3

    excessive_partials: int = 10
    complex_conditional_operators: int = 3
    repeated_markup_count: int = 3
    inline_block_chars: int = 500
    inline_php_chars: int = 200
    long_template_lines: int = 100
    inline_style_attributes: int = 5
    repeated_string_count: int = 2
    dynamic_value_count: int = 3

    def __post_init__(self) -> None:
        """Validate heuristic configuration."""
        object.__setattr__(self, "relationship_names", tuple(self.relationship_names))
        object.__setattr__(self, "eager_load_markers", tuple(self.eager_load_markers))

        if self.score_line_divisor <= 0:
            raise ValueError("score_line_divisor must be positive")

        non_negative = [
            "score_line_cap",
            "score_tag_weight",
            "score_conditional_weight",
            "score_loop_weight",
            "render_base_ms",
            "render_loop_ms",
            "render_conditional_ms",
            "render_tag_ms",
            "render_critical_penalty_ms",
            "render_warning_penalty_ms",
            "score_critical_penalty",
            "score_issue_penalty",
            "slow_render_penalty",
            "very_slow_render_penalty",
        ]
        for field_name in non_negative:
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} must be non-negative")

        if self.very_slow_render_ms < self.slow_render_ms:
            raise ValueError("very_slow_render_ms must be >= slow_render_ms")
        if self.memory_limit_threshold < self.pagination_threshold:
            raise ValueError("memory_limit_threshold must be >= pagination_threshold")
        if not self.relationship_names:
            raise ValueError("relationship_names must not be empty")


DEFAULT_POLICY = LintPolicy()
DEFAULT_HEURISTICS = HeuristicConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a whole viewlint run.

    Attributes:
        policy: Lint policy injected into the rule engine
        heuristics: Detector and scoring constants
        template_suffixes: File name endings collected from directories
        skip_dirs: Directory names never descended into
        max_file_size_mb: Larger files are skipped
        views_root: Base directory for relative template paths
        verbosity: Logging verbosity level
    """

    policy: LintPolicy = field(default_factory=LintPolicy)
    heuristics: HeuristicConfig = field(default_factory=HeuristicConfig)
    template_suffixes: tuple[str, ...] = (".blade.php", ".antlers.html", ".antlers.php", ".html", ".php")
    skip_dirs: tuple[str, ...] = ("node_modules", "vendor", ".git", "storage", "cache")
    max_file_size_mb: float = 5.0
    views_root: Optional[str] = None
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        object.__setattr__(self, "template_suffixes", tuple(self.template_suffixes))
        object.__setattr__(self, "skip_dirs", tuple(self.skip_dirs))

        if not self.template_suffixes:
            raise ValueError("template_suffixes must not be empty")
        if any(not s.startswith(".") for s in self.template_suffixes):
            raise ValueError("template_suffixes entries must start with '.'")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    TOML files may carry top-level ``AnalysisConfig`` keys plus ``[policy]``
    and ``[heuristics]`` tables.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid
    """
    merged: dict = {}

    global_config = Path.home() / ".viewlint.toml"
    if global_config.exists():
        _merge(merged, _load_toml_file(global_config), global_config)

    project_config = Path.cwd() / "viewlint.toml"
    if project_config.exists():
        _merge(merged, _load_toml_file(project_config), project_config)

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        _merge(merged, _load_toml_file(config_file), config_file)

    _merge(merged, _load_env_vars(), "environment")

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    _merge(merged, overrides, "overrides")

    policy = merged.pop("policy", {})
    heuristics = merged.pop("heuristics", {})
    try:
        if isinstance(policy, dict):
            merged["policy"] = LintPolicy(**policy)
        else:
            merged["policy"] = policy
        if isinstance(heuristics, dict):
            merged["heuristics"] = HeuristicConfig(**heuristics)
        else:
            merged["heuristics"] = heuristics
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _merge(merged: dict, source: dict, origin: Any) -> None:
    """Merge ``source`` into ``merged``; nested tables merge key by key."""
    for key, value in source.items():
        if key in ("policy", "heuristics") and isinstance(value, dict):
            current = merged.get(key)
            if not isinstance(current, dict):
                current = {}
            current.update(value)
            merged[key] = current
        elif key in ("policy", "heuristics") and not isinstance(
            value, (LintPolicy, HeuristicConfig)
        ):
            raise ConfigurationError(f"[{key}] in {origin} must be a table")
        else:
            merged[key] = value


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from VIEWLINT_* environment variables.

    Top-level scalar fields map directly (``VIEWLINT_MAX_FILE_SIZE_MB``).
    Policy and heuristic fields use a section prefix
    (``VIEWLINT_POLICY_FORBID_INLINE_CODE``, ``VIEWLINT_HEURISTICS_PAGINATION_THRESHOLD``).
    Tuple fields take comma-separated values.

    Returns:
        Dict of field_name -> parsed_value for any VIEWLINT_* vars found.
    """
    result: dict[str, Any] = {}
    result.update(_scan_env(AnalysisConfig, "VIEWLINT_", skip={"policy", "heuristics"}))

    policy = _scan_env(LintPolicy, "VIEWLINT_POLICY_")
    if policy:
        result["policy"] = policy
    heuristics = _scan_env(HeuristicConfig, "VIEWLINT_HEURISTICS_")
    if heuristics:
        result["heuristics"] = heuristics
    return result


def _scan_env(cls: type, prefix: str, skip: frozenset | set = frozenset()) -> dict[str, Any]:
    type_hints = get_type_hints(cls)
    found: dict[str, Any] = {}

    for field_name in cls.__dataclass_fields__:  # type: ignore[attr-defined]
        if field_name in skip:
            continue
        env_key = f"{prefix}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            found[field_name] = parsed
    return found


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the type is not supported

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple:
        return tuple(part.strip() for part in value.split(",") if part.strip())

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If TOML support is missing or parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
