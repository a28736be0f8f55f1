"""Template rendering: Jinja2 for every format, markdown-it for Markdown."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from markdown_it import MarkdownIt
from markupsafe import Markup

from portico.build.config import BuildConfig
from portico.build.exceptions import LayoutNotFoundError, TemplateRenderError
from portico.build.pages import Page, parse_frontmatter
from portico.config.settings import SUPPORTED_TEMPLATE_FORMATS

logger = logging.getLogger(__name__)

MAX_LAYOUT_DEPTH = 16


def _passthrough_url(value: str) -> str:
    """Keep ``{{ '/x' | url }}`` working; prefixing happens after rendering."""
    return value


class SiteRenderer:
    """Render pages and apply their layout chain."""

    def __init__(self, config: BuildConfig) -> None:
        self._config = config
        self._env = Environment(
            loader=FileSystemLoader([str(config.includes_dir), str(config.input_dir)]),
            autoescape=select_autoescape(default_for_string=True, default=True),
            keep_trailing_newline=True,
        )
        self._env.filters["url"] = _passthrough_url
        self._markdown = MarkdownIt("commonmark", {"html": True})
        self._layouts: dict[Path, tuple[dict[str, Any], str]] = {}

    def _render_string(self, text: str, context: dict[str, Any], source: Path) -> str:
        try:
            return self._env.from_string(text).render(**context)
        except TemplateError as exc:
            raise TemplateRenderError(source, f"{type(exc).__name__}: {exc}") from exc

    def _render_format(self, text: str, fmt: str, context: dict[str, Any], source: Path) -> str:
        rendered = self._render_string(text, context, source)
        if fmt == "md":
            return self._markdown.render(rendered)
        return rendered

    def resolve_layout(self, name: str, source: Path) -> Path:
        """Find ``name`` in the layouts directory; the extension is optional."""
        layouts_dir = self._config.layouts_dir
        candidate = (layouts_dir / name).resolve()
        if layouts_dir not in candidate.parents:
            raise LayoutNotFoundError(name, source, layouts_dir)
        if candidate.is_file():
            return candidate
        for fmt in SUPPORTED_TEMPLATE_FORMATS:
            with_suffix = candidate.with_name(f"{candidate.name}.{fmt}")
            if with_suffix.is_file():
                return with_suffix
        raise LayoutNotFoundError(name, source, layouts_dir)

    def _load_layout(self, path: Path) -> tuple[dict[str, Any], str]:
        if path not in self._layouts:
            self._layouts[path] = parse_frontmatter(path)
        return self._layouts[path]

    def render_page(self, page: Page, context: dict[str, Any]) -> str:
        """Render ``page`` with ``context`` and wrap it in its layouts.

        Page data takes precedence over layout data; each layout receives the
        HTML rendered so far as ``content``.
        """
        html = self._render_format(page.body, page.format, context, page.source)

        layout_name = page.data.get("layout")
        seen: list[Path] = []
        while layout_name:
            layout_path = self.resolve_layout(str(layout_name), page.source)
            if layout_path in seen or len(seen) >= MAX_LAYOUT_DEPTH:
                chain = " -> ".join(path.name for path in (*seen, layout_path))
                raise TemplateRenderError(page.source, f"layout cycle: {chain}")
            seen.append(layout_path)

            layout_data, layout_body = self._load_layout(layout_path)
            layout_context = {**layout_data, **context, "content": Markup(html)}
            fmt = layout_path.suffix.lstrip(".").lower()
            html = self._render_format(layout_body, fmt, layout_context, layout_path)
            layout_name = layout_data.get("layout")

        logger.debug("Rendered %s through %d layout(s)", page.input_path, len(seen))
        return html


__all__ = ["SiteRenderer"]
