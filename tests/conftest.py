from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from portico.build.config import BuildConfig
from portico.config.settings import BuildSettings

BASE_LAYOUT = """\
<!doctype html>
<html>
<head>
  <title>{{ title }} | {{ site.name }}</title>
  <link rel="stylesheet" href="/style.css">
</head>
<body>
{{ content }}
</body>
</html>
"""

INDEX_PAGE = """\
---
layout: base.njk
title: Home
---
<h1>{{ title }}</h1>
<a href="/about/">About</a>
<img src="/images/me.png" srcset="/images/me.png 1x, /images/me@2x.png 2x" alt="">
<a href="https://example.com/">Elsewhere</a>
<a href="//cdn.example.com/lib.js">CDN</a>
"""

ABOUT_PAGE = """\
---
layout: base
title: About
---
# About me

I build [things](/projects/).
"""


@pytest.fixture(autouse=True)
def _clean_portico_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell from leaking into configuration."""
    for key in list(os.environ):
        if key.startswith("PORTICO_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def site_project(tmp_path: Path) -> Path:
    """A small portfolio project with a layout, two pages, data and a stylesheet."""
    src = tmp_path / "src"
    (src / "_includes" / "layouts").mkdir(parents=True)
    (src / "_data").mkdir()

    (src / "_includes" / "layouts" / "base.njk").write_text(BASE_LAYOUT, encoding="utf-8")
    (src / "_data" / "site.json").write_text(json.dumps({"name": "Portfolio"}), encoding="utf-8")
    (src / "index.njk").write_text(INDEX_PAGE, encoding="utf-8")
    (src / "about.md").write_text(ABOUT_PAGE, encoding="utf-8")
    (src / "style.css").write_bytes(b"body {\n  margin: 0;\n}\n")
    (src / "notes.txt").write_text("not a template", encoding="utf-8")
    return tmp_path


@pytest.fixture
def build_config(site_project: Path):
    def _make(*, production: bool = False, **overrides) -> BuildConfig:
        settings = BuildSettings(**overrides)
        return BuildConfig.from_settings(settings, site_project, production=production)

    return _make


@pytest.fixture
def npm_project(tmp_path: Path) -> Path:
    """A project with a minimal package.json, as left by ``npm init -y``."""
    manifest = {
        "name": "portfolio",
        "version": "1.0.0",
        "scripts": {"test": 'echo "Error: no test specified" && exit 1'},
    }
    (tmp_path / "package.json").write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return tmp_path
