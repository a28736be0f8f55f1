"""Resolved build configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from portico.config.settings import BuildSettings


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """Absolute paths and effective options for one build.

    ``path_prefix`` is only populated for production builds; development
    builds always emit root-relative URLs.
    """

    project_root: Path
    input_dir: Path
    includes_dir: Path
    layouts_dir: Path
    data_dir: Path
    output_dir: Path
    template_formats: frozenset[str]
    passthrough_globs: tuple[str, ...]
    path_prefix: str | None
    pretty_urls: bool

    @classmethod
    def from_settings(
        cls,
        settings: BuildSettings,
        project_root: Path,
        *,
        production: bool = False,
    ) -> BuildConfig:
        root = project_root.expanduser().resolve()
        input_dir = (root / settings.input_dir).resolve()
        return cls(
            project_root=root,
            input_dir=input_dir,
            includes_dir=(input_dir / settings.includes_dir).resolve(),
            layouts_dir=(input_dir / settings.layouts_dir).resolve(),
            data_dir=(input_dir / settings.data_dir).resolve(),
            output_dir=(root / settings.output_dir).resolve(),
            template_formats=frozenset(settings.template_formats),
            passthrough_globs=tuple(settings.passthrough_globs),
            path_prefix=settings.path_prefix if production else None,
            pretty_urls=settings.pretty_urls,
        )
