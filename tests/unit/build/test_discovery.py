import os
from pathlib import Path, PurePosixPath

import pytest

from portico.build.discovery import SourceKind, discover_sources, expand_passthrough
from portico.build.exceptions import PassthroughError


def _by_relative(sources):
    return {source.relative.as_posix(): source for source in sources}


def test_partials_data_and_other_extensions_are_not_sources(build_config):
    sources = _by_relative(discover_sources(build_config()))

    assert set(sources) == {"style.css", "index.njk", "about.md"}
    assert sources["style.css"].kind is SourceKind.PASSTHROUGH
    assert sources["index.njk"].kind is SourceKind.TEMPLATE
    assert sources["about.md"].extension == "md"


def test_hidden_node_modules_and_output_dirs_are_skipped(site_project: Path, build_config):
    src = site_project / "src"
    for directory in (".cache", "node_modules", "_site"):
        (src / directory).mkdir()
        (src / directory / "page.html").write_text("<p>skip</p>", encoding="utf-8")

    config = build_config(output_dir="src/_site")
    relatives = set(_by_relative(discover_sources(config)))

    assert not any(rel.startswith((".cache/", "node_modules/", "_site/")) for rel in relatives)


def test_template_formats_restrict_rendering(build_config):
    sources = _by_relative(discover_sources(build_config(template_formats=["md"])))

    assert "about.md" in sources
    assert "index.njk" not in sources


def test_passthrough_wins_over_template(site_project: Path, build_config):
    (site_project / "src" / "raw.html").write_text("<p>{{ not rendered }}</p>", encoding="utf-8")

    sources = _by_relative(discover_sources(build_config(passthrough_globs=["src/raw.html"])))

    assert sources["raw.html"].kind is SourceKind.PASSTHROUGH


def test_passthrough_directory_is_copied_recursively(site_project: Path, build_config):
    images = site_project / "src" / "images" / "thumbs"
    images.mkdir(parents=True)
    (images / "a.png").write_bytes(b"\x89PNG")
    (site_project / "src" / "images" / "b.svg").write_text("<svg/>", encoding="utf-8")

    files = expand_passthrough(build_config(passthrough_globs=["src/images"]))

    assert [source.relative for source in files] == [
        PurePosixPath("images/b.svg"),
        PurePosixPath("images/thumbs/a.png"),
    ]


def test_passthrough_outside_input_keeps_project_relative_path(site_project: Path, build_config):
    (site_project / "assets").mkdir()
    (site_project / "assets" / "cv.pdf").write_bytes(b"%PDF-1.4")

    files = expand_passthrough(build_config(passthrough_globs=["assets/*.pdf"]))

    assert [source.relative for source in files] == [PurePosixPath("assets/cv.pdf")]


def test_passthrough_glob_matching_nothing_is_only_a_warning(build_config, caplog):
    files = expand_passthrough(build_config(passthrough_globs=["src/fonts/*.woff2"]))

    assert files == []
    assert "matched nothing" in caplog.text


def test_absolute_passthrough_glob_is_rejected(build_config):
    with pytest.raises(PassthroughError):
        expand_passthrough(build_config(passthrough_globs=["/etc/*.conf"]))


def test_symlinked_template_keeps_its_link_name(site_project: Path, build_config):
    (site_project / "README.md").write_text("# Readme\n", encoding="utf-8")
    os.symlink(site_project / "README.md", site_project / "src" / "readme.md")

    sources = _by_relative(discover_sources(build_config()))

    assert sources["readme.md"].kind is SourceKind.TEMPLATE
    assert sources["readme.md"].path == site_project / "src" / "readme.md"


def test_symlinked_passthrough_keeps_its_link_name(site_project: Path, build_config):
    theme = site_project / "theme" / "main.css"
    theme.parent.mkdir()
    theme.write_text("a { color: red; }\n", encoding="utf-8")
    os.symlink(theme, site_project / "src" / "theme.css")

    files = expand_passthrough(build_config(passthrough_globs=["src/theme.css"]))

    assert [source.relative for source in files] == [PurePosixPath("theme.css")]


def test_overlapping_passthrough_globs_copy_each_file_once(build_config):
    files = expand_passthrough(build_config(passthrough_globs=["src/style.css", "src/*.css"]))

    assert [source.relative for source in files] == [PurePosixPath("style.css")]
