"""Shared fixtures: on-disk project trees for discovery and rendering."""

from collections.abc import Callable
from pathlib import Path

import pytest

SiteBuilder = Callable[[dict[str, str]], Path]


@pytest.fixture
def make_site(tmp_path: Path) -> SiteBuilder:
    """Write ``{relative_path: content}`` under a fresh project root.

    Returns the project root, suitable for ``AppConfig(base_dir=...)``.
    """

    def build(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return build


BASIC_SITE: dict[str, str] = {
    "src/app/app.py": 'title = "Home"\n',
    "src/app/app.html": "<html><head></head><body><h1>{{ title }}</h1></body></html>",
    "src/routes/about/about.py": (
        'title = "About"\n'
        "\n"
        "def greet(name, ctx):\n"
        '    return f"Hello, {name}!"\n'
    ),
    "src/routes/about/about.html": (
        "<html><head></head><body>"
        "<h1>{{ title }}</h1><p>{{ greet('World') }}</p>"
        "<p>{{ query.q || 'everything' }}</p>"
        "</body></html>"
    ),
    "src/routes/about/about.css": "h1 { color: red; }",
}


@pytest.fixture
def basic_site(make_site: SiteBuilder) -> Path:
    """A project with a root page and one ``/about`` route."""
    return make_site(BASIC_SITE)
