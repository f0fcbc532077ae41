"""Tests for the command line interface."""

import json

from typer.testing import CliRunner

from viewlint.cli import app

runner = CliRunner()


def _write(directory, name, text):
    path = directory / name
    path.write_text(text)
    return path


class TestLintCommand:
    def test_clean_file_exits_zero(self, isolated_env, clean_blade):
        path = _write(isolated_env, "home.blade.php", clean_blade)
        result = runner.invoke(app, ["lint", str(path), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["source"] == str(path)
        assert data["ok"] is True

    def test_violation_exits_one(self, isolated_env):
        path = _write(isolated_env, "page.blade.php", "@php echo 1; @endphp\n")
        result = runner.invoke(app, ["lint", str(path), "--format", "quiet"])
        assert result.exit_code == 1
        assert f"{path}:1:inline_php" in result.stdout.splitlines()

    def test_field_catalog(self, isolated_env):
        path = _write(isolated_env, "post.antlers.html", "{{ published_at }}\n")
        result = runner.invoke(
            app, ["lint", str(path), "--strict", "--field", "published_at=date", "--format", "quiet"]
        )
        assert result.exit_code == 0
        assert f"{path}:1:missing_date_format" in result.stdout

    def test_bad_field(self, isolated_env, clean_blade):
        path = _write(isolated_env, "home.blade.php", clean_blade)
        result = runner.invoke(app, ["lint", str(path), "--field", "published_at"])
        assert result.exit_code == 2

    def test_missing_file(self, isolated_env):
        result = runner.invoke(app, ["lint", str(isolated_env / "missing.blade.php")])
        assert result.exit_code == 2

    def test_policy_from_config_file(self, isolated_env):
        path = _write(isolated_env, "page.blade.php", "@php echo 1; @endphp\n")
        config = _write(isolated_env, "ci.toml", "[policy]\nforbid_inline_code = false\n")
        result = runner.invoke(app, ["lint", str(path), "--config", str(config), "--format", "quiet"])
        assert "inline_php" not in result.stdout

    def test_unknown_format(self, isolated_env, clean_blade):
        path = _write(isolated_env, "home.blade.php", clean_blade)
        result = runner.invoke(app, ["lint", str(path), "--format", "xml"])
        assert result.exit_code == 2


class TestPerfCommand:
    def test_directory_json(self, isolated_env, views_dir):
        result = runner.invoke(app, ["perf", str(views_dir), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["templates_analyzed"] == 3
        assert data["statistics"]["critical_issues"] == 1

    def test_fail_under(self, isolated_env, views_dir):
        result = runner.invoke(app, ["perf", str(views_dir), "--format", "quiet", "--fail-under", "100"])
        assert result.exit_code == 1

    def test_disabled_checks(self, isolated_env, views_dir):
        result = runner.invoke(
            app, ["perf", str(views_dir), "--format", "json", "--no-n-plus-one", "--no-caching"]
        )
        data = json.loads(result.stdout)
        assert data["statistics"]["critical_issues"] == 0
        assert data["caching_opportunities"] == []

    def test_missing_path(self, isolated_env):
        result = runner.invoke(app, ["perf", str(isolated_env / "nowhere"), "--format", "json"])
        assert result.exit_code == 2

    def test_github_annotations(self, isolated_env, views_dir):
        result = runner.invoke(app, ["perf", str(views_dir), "--format", "github"])
        assert any(line.startswith("::error file=") for line in result.stdout.splitlines())


class TestSuggestCommand:
    def test_unknown_focus(self, isolated_env, views_dir):
        result = runner.invoke(app, ["suggest", str(views_dir), "--focus", "bogus"])
        assert result.exit_code == 2

    def test_max(self, isolated_env, views_dir):
        result = runner.invoke(app, ["suggest", str(views_dir), "--max", "1", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["suggestions"]) <= 1
        assert data["focus"] == "all"

    def test_focus_and_no_examples(self, isolated_env, views_dir):
        result = runner.invoke(
            app, ["suggest", str(views_dir), "--focus", "performance", "--no-examples", "--format", "json"]
        )
        data = json.loads(result.stdout)
        assert data["suggestions"]
        assert all(s["category"] == "performance" for s in data["suggestions"])
        assert all(s["before_snippet"] is None for s in data["suggestions"])

    def test_unknown_format(self, isolated_env, views_dir):
        result = runner.invoke(app, ["suggest", str(views_dir), "--format", "xml"])
        assert result.exit_code == 2
