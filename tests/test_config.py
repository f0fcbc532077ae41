"""Tests for configuration objects and load_config merging."""

import pytest

from viewlint.config import AnalysisConfig, HeuristicConfig, LintPolicy, load_config
from viewlint.exceptions import ConfigurationError


class TestLintPolicy:
    def test_defaults(self):
        policy = LintPolicy()
        assert "DB" in policy.forbidden_accessors
        assert policy.forbid_inline_code
        assert "collection" in policy.known_tag_namespaces

    def test_lists_become_tuples(self):
        policy = LintPolicy(forbidden_accessors=["DB", "Http"])
        assert policy.forbidden_accessors == ("DB", "Http")

    def test_string_rejected(self):
        with pytest.raises(ValueError, match="list of names"):
            LintPolicy(forbidden_accessors="DB")

    def test_accessor_must_be_identifier(self):
        with pytest.raises(ValueError, match="not an identifier"):
            LintPolicy(forbidden_accessors=("DB::",))

    def test_immutable(self):
        with pytest.raises(AttributeError):
            LintPolicy().forbid_inline_code = False


class TestHeuristicConfig:
    def test_defaults(self):
        heuristics = HeuristicConfig()
        assert heuristics.pagination_threshold == 50
        assert heuristics.render_critical_penalty_ms == 50.0

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"score_line_divisor": 0}, "score_line_divisor"),
            ({"score_tag_weight": -1}, "score_tag_weight"),
            ({"slow_render_ms": 2000.0}, "very_slow_render_ms"),
            ({"memory_limit_threshold": 10}, "memory_limit_threshold"),
            ({"relationship_names": ()}, "relationship_names"),
        ],
    )
    def test_invalid(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            HeuristicConfig(**kwargs)


class TestAnalysisConfig:
    def test_max_file_size_bytes(self):
        assert AnalysisConfig(max_file_size_mb=1.0).max_file_size_bytes == 1024 * 1024

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"template_suffixes": ()},
            {"template_suffixes": ("html",)},
            {"max_file_size_mb": 0},
            {"verbosity": "loud"},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            AnalysisConfig(**kwargs)


class TestLoadConfig:
    def test_defaults(self, isolated_env):
        config = load_config()
        assert config == AnalysisConfig()

    def test_project_file(self, isolated_env):
        (isolated_env / "viewlint.toml").write_text(
            'max_file_size_mb = 2.0\n\n[policy]\nforbidden_accessors = ["DB"]\n\n'
            "[heuristics]\npagination_threshold = 25\n"
        )
        config = load_config()
        assert config.max_file_size_mb == 2.0
        assert config.policy.forbidden_accessors == ("DB",)
        assert config.heuristics.pagination_threshold == 25
        # untouched sections keep their defaults
        assert config.policy.forbid_inline_code is True

    def test_explicit_file_overrides_project(self, isolated_env):
        (isolated_env / "viewlint.toml").write_text("[heuristics]\npagination_threshold = 25\nexcessive_partials = 3\n")
        explicit = isolated_env / "ci.toml"
        explicit.write_text("[heuristics]\npagination_threshold = 75\n")
        config = load_config(config_file=explicit)
        assert config.heuristics.pagination_threshold == 75
        assert config.heuristics.excessive_partials == 3

    def test_global_file(self, isolated_env):
        (isolated_env / "home" / ".viewlint.toml").write_text('verbosity = "quiet"\n')
        assert load_config().verbosity == "quiet"

    def test_env_vars(self, isolated_env, monkeypatch):
        monkeypatch.setenv("VIEWLINT_POLICY_FORBID_INLINE_CODE", "false")
        monkeypatch.setenv("VIEWLINT_HEURISTICS_PAGINATION_THRESHOLD", "20")
        monkeypatch.setenv("VIEWLINT_SKIP_DIRS", "vendor, dist")
        monkeypatch.setenv("VIEWLINT_VIEWS_ROOT", "resources/views")
        config = load_config()
        assert config.policy.forbid_inline_code is False
        assert config.heuristics.pagination_threshold == 20
        assert config.skip_dirs == ("vendor", "dist")
        assert config.views_root == "resources/views"

    def test_env_beats_file(self, isolated_env, monkeypatch):
        (isolated_env / "viewlint.toml").write_text("max_file_size_mb = 2.0\n")
        monkeypatch.setenv("VIEWLINT_MAX_FILE_SIZE_MB", "3.5")
        assert load_config().max_file_size_mb == 3.5

    def test_overrides(self, isolated_env):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False).verbosity == "normal"

    def test_invalid_env_value(self, isolated_env, monkeypatch):
        monkeypatch.setenv("VIEWLINT_POLICY_FORBID_INLINE_CODE", "maybe")
        with pytest.raises(ConfigurationError, match="VIEWLINT_POLICY_FORBID_INLINE_CODE"):
            load_config()

    def test_missing_file(self, isolated_env):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=isolated_env / "missing.toml")

    def test_malformed_toml(self, isolated_env):
        bad = isolated_env / "bad.toml"
        bad.write_text("max_file_size_mb = = 2\n")
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config(config_file=bad)

    def test_invalid_values(self, isolated_env):
        bad = isolated_env / "bad.toml"
        bad.write_text("[heuristics]\nscore_line_divisor = 0\n")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(config_file=bad)

    def test_unknown_key(self, isolated_env):
        bad = isolated_env / "bad.toml"
        bad.write_text("[policy]\nno_such_option = true\n")
        with pytest.raises(ConfigurationError):
            load_config(config_file=bad)

    def test_section_must_be_table(self, isolated_env):
        bad = isolated_env / "bad.toml"
        bad.write_text('policy = "strict"\n')
        with pytest.raises(ConfigurationError, match="must be a table"):
            load_config(config_file=bad)
