"""Build a site: discover sources, render templates, copy passthrough files."""

from __future__ import annotations

import logging
import shutil
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from portico.build.config import BuildConfig
from portico.build.data import load_global_data
from portico.build.discovery import SourceFile, SourceKind, discover_sources
from portico.build.exceptions import InputDirectoryNotFoundError, OutputConflictError
from portico.build.pages import Page, build_collections, load_page
from portico.build.rendering import SiteRenderer
from portico.build.urls import apply_path_prefix

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OutputRecord:
    """One file written by a build."""

    source: Path
    output: Path
    kind: SourceKind


@dataclass(slots=True)
class BuildResult:
    """Everything a build wrote, sorted by output path."""

    output_dir: Path
    records: list[OutputRecord] = field(default_factory=list)
    suppressed: list[Path] = field(default_factory=list)

    @property
    def rendered(self) -> list[OutputRecord]:
        return [record for record in self.records if record.kind is SourceKind.TEMPLATE]

    @property
    def copied(self) -> list[OutputRecord]:
        return [record for record in self.records if record.kind is SourceKind.PASSTHROUGH]


@dataclass(slots=True)
class BuildPlan:
    """Pages and passthrough files with their resolved output paths."""

    pages: list[Page]
    passthrough: list[SourceFile]

    def outputs(self) -> dict[PurePosixPath, Path]:
        """Map each output path to its single source.

        Raises:
            OutputConflictError: If two sources share an output path

        """
        claims: dict[PurePosixPath, list[Path]] = defaultdict(list)
        for source in self.passthrough:
            claims[source.relative].append(source.path)
        for page in self.pages:
            if page.output_path is not None:
                claims[page.output_path].append(page.source)

        for output, sources in claims.items():
            if len(sources) > 1:
                raise OutputConflictError(output, sources)
        return {output: sources[0] for output, sources in claims.items()}


class SiteBuilder:
    """Turn a source tree into a static site.

    ``plan()`` resolves every output without touching the disk; ``build()``
    writes them. A fresh builder should be used per build since layouts are
    cached.
    """

    def __init__(self, config: BuildConfig) -> None:
        self.config = config
        self._renderer = SiteRenderer(config)

    def plan(self) -> BuildPlan:
        """Discover sources and resolve output paths without writing anything."""
        if not self.config.input_dir.is_dir():
            raise InputDirectoryNotFoundError(self.config.input_dir)

        sources = discover_sources(self.config)
        pages = [load_page(source, self.config) for source in sources if source.kind is SourceKind.TEMPLATE]
        passthrough = [source for source in sources if source.kind is SourceKind.PASSTHROUGH]
        plan = BuildPlan(pages=pages, passthrough=passthrough)
        plan.outputs()
        return plan

    def _context_for(self, page: Page, global_data: dict[str, Any], collections: dict[str, list[Page]]) -> dict[str, Any]:
        return {**global_data, **page.data, "page": page, "collections": collections}

    def _write(self, output_rel: PurePosixPath, content: str) -> Path:
        destination = self.config.output_dir / output_rel
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(content, encoding="utf-8")
        return destination

    def _copy(self, source: SourceFile) -> Path:
        destination = self.config.output_dir / source.relative
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source.path, destination)
        return destination

    def build(self) -> BuildResult:
        """Render every page and copy every passthrough file.

        Any template or layout failure aborts the build before later pages
        are written.
        """
        plan = self.plan()
        global_data = load_global_data(self.config.data_dir)
        collections = build_collections(plan.pages)

        result = BuildResult(output_dir=self.config.output_dir)
        self.config.output_dir.mkdir(parents=True, exist_ok=True)

        for source in plan.passthrough:
            destination = self._copy(source)
            result.records.append(OutputRecord(source.path, destination, SourceKind.PASSTHROUGH))
            logger.debug("Copied %s -> %s", source.path, destination)

        for page in plan.pages:
            if page.output_path is None:
                result.suppressed.append(page.source)
                logger.debug("Skipping %s (permalink: false)", page.input_path)
                continue
            html = self._renderer.render_page(page, self._context_for(page, global_data, collections))
            destination = self._write(page.output_path, apply_path_prefix(html, self.config.path_prefix))
            result.records.append(OutputRecord(page.source, destination, SourceKind.TEMPLATE))
            logger.debug("Rendered %s -> %s", page.input_path, destination)

        result.records.sort(key=lambda record: record.output)
        logger.info(
            "Wrote %d page(s) and copied %d file(s) to %s",
            len(result.rendered),
            len(result.copied),
            self.config.output_dir,
        )
        return result


__all__ = ["BuildPlan", "BuildResult", "OutputRecord", "SiteBuilder"]
