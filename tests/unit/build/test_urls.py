from pathlib import PurePosixPath

import pytest

from portico.build.urls import apply_path_prefix, default_output_path, permalink_output_path, url_for


@pytest.mark.parametrize(
    ("source", "pretty", "expected"),
    [
        ("index.njk", True, "index.html"),
        ("about.md", True, "about/index.html"),
        ("about.md", False, "about.html"),
        ("blog/index.md", True, "blog/index.html"),
        ("blog/first-post.html", True, "blog/first-post/index.html"),
    ],
)
def test_default_output_path(source, pretty, expected):
    assert default_output_path(PurePosixPath(source), pretty=pretty) == PurePosixPath(expected)


@pytest.mark.parametrize(
    ("permalink", "expected"),
    [
        ("/", "index.html"),
        ("/feed.xml", "feed.xml"),
        ("/work/", "work/index.html"),
        ("projects/list.html", "projects/list.html"),
    ],
)
def test_permalink_output_path(permalink, expected):
    assert permalink_output_path(permalink) == PurePosixPath(expected)


def test_permalink_cannot_escape_output_dir():
    with pytest.raises(ValueError, match="traversal"):
        permalink_output_path("/../../etc/passwd")


@pytest.mark.parametrize(
    ("output", "expected"),
    [
        ("index.html", "/"),
        ("about/index.html", "/about/"),
        ("feed.xml", "/feed.xml"),
    ],
)
def test_url_for(output, expected):
    assert url_for(PurePosixPath(output)) == expected


def test_prefix_applies_to_internal_urls_only():
    html = (
        '<a href="/about/">About</a>'
        '<link rel="stylesheet" href="/style.css">'
        "<form action='/contact'></form>"
        '<a href="https://example.com/">Out</a>'
        '<script src="//cdn.example.com/lib.js"></script>'
        '<a href="#top">Top</a>'
        '<img src="images/relative.png">'
    )

    result = apply_path_prefix(html, "/x/")

    assert 'href="/x/about/"' in result
    assert 'href="/x/style.css"' in result
    assert "action='/x/contact'" in result
    assert 'href="https://example.com/"' in result
    assert 'src="//cdn.example.com/lib.js"' in result
    assert 'href="#top"' in result
    assert 'src="images/relative.png"' in result


def test_prefix_rewrites_every_srcset_candidate():
    html = '<img srcset="/a.png 1x, /a@2x.png 2x, https://cdn/a@3x.png 3x">'

    result = apply_path_prefix(html, "/x/")

    assert 'srcset="/x/a.png 1x, /x/a@2x.png 2x, https://cdn/a@3x.png 3x"' in result


def test_no_prefix_leaves_html_untouched():
    html = '<a href="/about/">About</a>'
    assert apply_path_prefix(html, None) is html


def test_prefix_applies_to_unquoted_attributes():
    html = "<a href=/about/>About</a><img src=/me.png alt=me><img srcset=/me@2x.png><a href=//cdn.example.com/>CDN</a>"

    result = apply_path_prefix(html, "/x/")

    assert "<a href=/x/about/>About</a>" in result
    assert "<img src=/x/me.png alt=me>" in result
    assert "<img srcset=/x/me@2x.png>" in result
    assert "href=//cdn.example.com/" in result


def test_prefix_applies_to_css_url_references():
    html = (
        '<div style="background:url(/bg.png)"></div>'
        "<style>\n.hero { background-image: url('/img/hero.jpg'); }\n"
        '@font-face { src: url( "/fonts/a.woff2" ) }\n'
        ".remote { background: url(https://cdn.example.com/x.png); }\n"
        ".inline { background: url(data:image/png;base64,AAAA); }\n</style>"
    )

    result = apply_path_prefix(html, "/x/")

    assert "url(/x/bg.png)" in result
    assert "url('/x/img/hero.jpg')" in result
    assert 'url( "/x/fonts/a.woff2" )' in result
    assert "url(https://cdn.example.com/x.png)" in result
    assert "url(data:image/png;base64,AAAA)" in result
