"""Tests for template source collection."""

from pathlib import Path

import pytest

from viewlint.config import AnalysisConfig
from viewlint.exceptions import TemplateNotFoundError, UnreadableFileError
from viewlint.models import Dialect
from viewlint.scanning import collect_templates, read_template, resolve_path
from viewlint.scanning import collector


class TestResolvePath:
    def test_existing_path(self, views_dir):
        assert resolve_path(views_dir) == views_dir

    def test_relative_to_base_dir(self, views_dir):
        assert resolve_path("home.blade.php", base_dir=views_dir) == views_dir / "home.blade.php"

    def test_missing_path(self, tmp_path):
        with pytest.raises(TemplateNotFoundError) as exc_info:
            resolve_path(tmp_path / "nope")
        assert "nope" in exc_info.value.details["path"]

    def test_unusable_name(self):
        """Names the OS rejects are simply not found."""
        with pytest.raises(TemplateNotFoundError):
            resolve_path("x" * 5000)


class TestCollectTemplates:
    def test_directory_walk(self, views_dir):
        """Templates are collected in path order; other files and skipped dirs are ignored."""
        result = collect_templates(views_dir)
        names = [Path(s.path).name for s in result.sources]
        assert names == ["blog.antlers.html", "home.blade.php", "_card.antlers.html"]
        assert result.skipped == []

    def test_dialects_from_suffix(self, views_dir):
        result = collect_templates(views_dir)
        dialects = {Path(s.path).name: s.dialect for s in result.sources}
        assert dialects["home.blade.php"] == Dialect.BLADE
        assert dialects["blog.antlers.html"] == Dialect.ANTLERS

    def test_single_file(self, views_dir):
        result = collect_templates(views_dir / "home.blade.php")
        assert len(result.sources) == 1
        source = result.sources[0]
        assert source.size_bytes == len(source.text.encode("utf-8"))
        assert source.mtime is not None

    def test_views_root_from_config(self, views_dir):
        config = AnalysisConfig(views_root=str(views_dir))
        result = collect_templates("partials", config=config)
        assert [Path(s.path).name for s in result.sources] == ["_card.antlers.html"]

    def test_oversized_file_skipped(self, views_dir):
        config = AnalysisConfig(max_file_size_mb=0.00001)
        result = collect_templates(views_dir, config=config)
        assert result.sources == []
        assert len(result.skipped) == 3
        assert "larger than" in result.skipped[0].reason

    def test_unreadable_file_does_not_abort(self, views_dir, monkeypatch):
        """One bad file is skipped; the rest of the batch is still collected."""
        real_read = collector.read_template

        def flaky_read(filepath, hint="auto"):
            if filepath.name == "home.blade.php":
                raise UnreadableFileError(filepath, "Permission denied")
            return real_read(filepath, hint)

        monkeypatch.setattr(collector, "read_template", flaky_read)
        result = collect_templates(views_dir)
        assert len(result.sources) == 2
        assert [s.reason for s in result.skipped] == ["Permission denied"]
        assert result.skipped[0].path.endswith("home.blade.php")

    def test_empty_directory(self, tmp_path):
        result = collect_templates(tmp_path)
        assert result.sources == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(TemplateNotFoundError):
            collect_templates(tmp_path / "missing")


class TestReadTemplate:
    def test_hint_forces_dialect(self, views_dir):
        source = read_template(views_dir / "home.blade.php", hint="antlers")
        assert source.dialect == Dialect.ANTLERS

    def test_unreadable(self, tmp_path):
        with pytest.raises(UnreadableFileError):
            read_template(tmp_path / "gone.blade.php")
