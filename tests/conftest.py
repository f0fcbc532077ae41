"""Shared test fixtures for viewlint tests."""

import pytest


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def clean_blade():
    """Blade template with nothing to report."""
    return (
        "<main>\n"
        "  @if($posts->isNotEmpty())\n"
        "    <h1>{{ $title }}</h1>\n"
        "  @endif\n"
        "</main>"
    )


@pytest.fixture
def policy_blade():
    """Blade template breaking several policy rules."""
    return (
        "@php $count = 1; @endphp\n"
        "{{ \\Statamic\\Facades\\Entry::whereCollection('blog') }}\n"
        "{!! $body !!}\n"
        '<img src="hero.jpg">'
    )


@pytest.fixture
def blog_antlers():
    """Antlers listing with a relationship read inside the loop."""
    return (
        '{{ collection:blog limit="5" }}\n'
        "  <h2>{{ title }}</h2>\n"
        "  {{ author:name }}\n"
        "{{ /collection:blog }}"
    )


@pytest.fixture
def nested_blade():
    """A loop inside a loop."""
    return (
        "@foreach($posts as $post)\n"
        "  @foreach($post->tags as $tag)\n"
        "    <span>{{ $tag }}</span>\n"
        "  @endforeach\n"
        "@endforeach"
    )


@pytest.fixture
def views_dir(tmp_path):
    """A small views tree with one template of each dialect."""
    root = tmp_path / "views"
    (root / "partials").mkdir(parents=True)
    (root / "home.blade.php").write_text(
        "@extends('layouts.app')\n@section('content')\n  <h1>{{ $title }}</h1>\n@endsection\n"
    )
    (root / "blog.antlers.html").write_text(
        '{{ collection:blog limit="5" }}\n  {{ author:name }}\n{{ /collection:blog }}\n'
    )
    (root / "partials" / "_card.antlers.html").write_text("<article>{{ title }}</article>\n")
    (root / "notes.txt").write_text("not a template\n")
    (root / "node_modules").mkdir()
    (root / "node_modules" / "vendor.blade.php").write_text("@php echo 1; @endphp\n")
    return root


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """No global/project config files and no VIEWLINT_* variables."""
    import os

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("VIEWLINT_"):
            monkeypatch.delenv(key)
    return tmp_path
