"""Output paths, page URLs and path-prefix rewriting."""

from __future__ import annotations

import re
from pathlib import PurePosixPath

# Attribute values may be double-quoted, single-quoted or bare (HTML allows
# unquoted values without whitespace, quotes, =, <, > or backticks).
_UNQUOTED = r"""[^\s"'=<>`]"""

_URL_ATTR_RE = re.compile(
    r"""(?P<lead>\s(?:href|src|action|poster)\s*=\s*)"""
    r"""(?:(?P<quote>["'])(?P<quoted>/(?!/)[^"']*)(?P=quote)"""
    rf"""|(?P<bare>/(?!/){_UNQUOTED}*))""",
    re.IGNORECASE,
)
_SRCSET_RE = re.compile(
    r"""(?P<lead>\ssrcset\s*=\s*)"""
    r"""(?:(?P<quote>["'])(?P<quoted>[^"']*)(?P=quote)"""
    rf"""|(?P<bare>{_UNQUOTED}+))""",
    re.IGNORECASE,
)
# CSS references, in style attributes as well as <style> blocks
_CSS_URL_RE = re.compile(
    r"""(?P<lead>\burl\(\s*)(?P<quote>["']?)(?P<url>/(?!/)[^"')\s]*)(?P=quote)(?P<tail>\s*\))""",
    re.IGNORECASE,
)


def default_output_path(source_rel: PurePosixPath, *, pretty: bool) -> PurePosixPath:
    """Map a template path (relative to the input dir) to its output path.

    >>> default_output_path(PurePosixPath("blog/post.md"), pretty=True)
    PurePosixPath('blog/post/index.html')
    >>> default_output_path(PurePosixPath("blog/index.njk"), pretty=True)
    PurePosixPath('blog/index.html')
    >>> default_output_path(PurePosixPath("blog/post.md"), pretty=False)
    PurePosixPath('blog/post.html')
    """
    stem = source_rel.stem
    if not pretty or stem == "index":
        return source_rel.parent / f"{stem}.html"
    return source_rel.parent / stem / "index.html"


def permalink_output_path(permalink: str) -> PurePosixPath:
    """Map a frontmatter permalink to an output path.

    A permalink ending in ``/`` gets an ``index.html``.
    """
    value = permalink.strip()
    relative = PurePosixPath(value.lstrip("/"))
    if any(part == ".." for part in relative.parts):
        msg = f"Permalink must not contain traversal sequences ('..'): {permalink}"
        raise ValueError(msg)
    if value.endswith("/") or not relative.parts:
        return relative / "index.html"
    return relative


def url_for(output_rel: PurePosixPath) -> str:
    """Return the root-relative URL that serves ``output_rel``."""
    if output_rel.name == "index.html":
        parent = output_rel.parent.as_posix()
        return "/" if parent == "." else f"/{parent}/"
    return f"/{output_rel.as_posix()}"


def _prefixed(url: str, prefix: str) -> str:
    return prefix + url[1:]


def _is_internal(url: str) -> bool:
    return url.startswith("/") and not url.startswith("//")


def _rewrite_srcset(value: str, prefix: str) -> str:
    candidates = []
    for candidate in value.split(","):
        stripped = candidate.strip()
        if not stripped:
            continue
        url, _, descriptor = stripped.partition(" ")
        if _is_internal(url):
            url = _prefixed(url, prefix)
        candidates.append(f"{url} {descriptor.strip()}".strip())
    return ", ".join(candidates)


def apply_path_prefix(html: str, prefix: str | None) -> str:
    """Prefix every root-relative URL in ``html``.

    Covers ``href``, ``src``, ``action``, ``poster`` and ``srcset``
    attributes (quoted or bare) and CSS ``url(...)`` references.
    Protocol-relative (``//host``) and absolute URLs are left alone, as are
    relative paths. ``None`` returns the text unchanged.
    """
    if not prefix:
        return html

    def _attr(match: re.Match[str]) -> str:
        if match["quote"]:
            return f"{match['lead']}{match['quote']}{_prefixed(match['quoted'], prefix)}{match['quote']}"
        return f"{match['lead']}{_prefixed(match['bare'], prefix)}"

    def _srcset(match: re.Match[str]) -> str:
        if match["quote"]:
            return f"{match['lead']}{match['quote']}{_rewrite_srcset(match['quoted'], prefix)}{match['quote']}"
        return f"{match['lead']}{_rewrite_srcset(match['bare'], prefix)}"

    def _css(match: re.Match[str]) -> str:
        return f"{match['lead']}{match['quote']}{_prefixed(match['url'], prefix)}{match['quote']}{match['tail']}"

    html = _URL_ATTR_RE.sub(_attr, html)
    html = _SRCSET_RE.sub(_srcset, html)
    return _CSS_URL_RE.sub(_css, html)


__all__ = [
    "apply_path_prefix",
    "default_output_path",
    "permalink_output_path",
    "url_for",
]
