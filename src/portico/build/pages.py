"""Page model: one renderable template plus its frontmatter."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path, PurePosixPath
from typing import Any

import frontmatter
import yaml

from portico.build.config import BuildConfig
from portico.build.discovery import SourceFile
from portico.build.exceptions import TemplateRenderError
from portico.build.urls import default_output_path, permalink_output_path, url_for


@dataclass(slots=True)
class Page:
    """A template source ready to render.

    ``output_path`` and ``url`` are ``None`` when frontmatter sets
    ``permalink: false``; such pages are rendered nowhere but still appear
    in collections.
    """

    source: Path
    input_path: str
    file_slug: str
    format: str
    data: dict[str, Any]
    body: str
    output_path: PurePosixPath | None
    url: str | None
    date: date | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def excluded_from_collections(self) -> bool:
        return bool(self.data.get("exclude_from_collections", False))


def parse_frontmatter(source: Path) -> tuple[dict[str, Any], str]:
    """Split ``source`` into (metadata, body).

    Malformed frontmatter is fatal: the page cannot be rendered faithfully.
    """
    content = source.read_text(encoding="utf-8")
    try:
        parsed = frontmatter.loads(content)
    except (yaml.YAMLError, ValueError) as exc:
        raise TemplateRenderError(source, f"invalid frontmatter: {exc}") from exc

    metadata = parsed.metadata or {}
    if not isinstance(metadata, dict):
        raise TemplateRenderError(source, f"frontmatter must be a mapping, got {type(metadata).__name__}")
    return dict(metadata), parsed.content


def _coerce_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _coerce_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(tag) for tag in value]


def _file_slug(relative: PurePosixPath) -> str:
    if relative.stem == "index" and relative.parent.name:
        return relative.parent.name
    return "" if relative.stem == "index" else relative.stem


def load_page(source: SourceFile, config: BuildConfig) -> Page:
    """Read a template source and compute where it will be written."""
    metadata, body = parse_frontmatter(source.path)

    permalink = metadata.get("permalink")
    if permalink is False:
        output_path = None
    elif isinstance(permalink, str) and permalink.strip():
        try:
            output_path = permalink_output_path(permalink)
        except ValueError as exc:
            raise TemplateRenderError(source.path, str(exc)) from exc
    else:
        output_path = default_output_path(source.relative, pretty=config.pretty_urls)

    project_relative = source.path.relative_to(config.project_root).as_posix()
    return Page(
        source=source.path,
        input_path=f"./{project_relative}",
        file_slug=_file_slug(source.relative),
        format=source.extension,
        data=metadata,
        body=body,
        output_path=output_path,
        url=url_for(output_path) if output_path is not None else None,
        date=_coerce_date(metadata.get("date")),
        tags=_coerce_tags(metadata.get("tags")),
    )


def _collection_key(page: Page) -> tuple[str, str]:
    return (page.date.isoformat() if page.date else "", page.input_path)


def build_collections(pages: list[Page]) -> dict[str, list[Page]]:
    """Group pages into ``all`` plus one collection per tag, sorted by date."""
    included = sorted((page for page in pages if not page.excluded_from_collections), key=_collection_key)
    collections: dict[str, list[Page]] = {"all": included}
    for page in included:
        for tag in page.tags:
            collections.setdefault(tag, []).append(page)
    return collections


__all__ = ["Page", "build_collections", "load_page", "parse_frontmatter"]
