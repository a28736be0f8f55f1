"""Classify the files of a source tree for a build."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

from portico.build.config import BuildConfig
from portico.build.exceptions import PassthroughError

logger = logging.getLogger(__name__)

ALWAYS_IGNORED_DIRS = frozenset({"node_modules"})


class SourceKind(str, Enum):
    TEMPLATE = "template"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A file that produces exactly one output.

    ``relative`` is where the file sits relative to the input directory
    (or the project root, for passthrough files outside it). ``path`` is the
    absolute path as found in the tree; symlinks are not followed, so a
    linked file keeps the name of its link.
    """

    path: Path
    relative: PurePosixPath
    kind: SourceKind

    @property
    def extension(self) -> str:
        return self.path.suffix.lstrip(".").lower()


def _is_within(path: Path, parent: Path) -> bool:
    return path == parent or parent in path.parents


def _relative_for_output(path: Path, config: BuildConfig) -> PurePosixPath:
    if _is_within(path, config.input_dir):
        return PurePosixPath(path.relative_to(config.input_dir).as_posix())
    return PurePosixPath(path.relative_to(config.project_root).as_posix())


def expand_passthrough(config: BuildConfig) -> list[SourceFile]:
    """Resolve passthrough globs to files, in glob order then path order.

    Globs are relative to the project root. A matched directory contributes
    every file below it. Anything inside the output directory is skipped.
    """
    seen: set[Path] = set()
    files: list[SourceFile] = []

    for pattern in config.passthrough_globs:
        if Path(pattern).is_absolute():
            raise PassthroughError(pattern, "glob must be relative to the project root")
        try:
            matches = sorted(config.project_root.glob(pattern))
        except ValueError as e:
            raise PassthroughError(pattern, str(e)) from e

        if not matches:
            logger.warning("Passthrough glob '%s' matched nothing", pattern)

        for match in matches:
            candidates = sorted(p for p in match.rglob("*") if p.is_file()) if match.is_dir() else [match]
            for candidate in candidates:
                located = Path(os.path.abspath(candidate))
                if not _is_within(located, config.project_root):
                    raise PassthroughError(pattern, f"matches '{located}', outside the project root")
                if located in seen or any(
                    _is_within(path, config.output_dir) for path in (located, candidate.resolve())
                ):
                    continue
                seen.add(located)
                files.append(
                    SourceFile(
                        path=located,
                        relative=_relative_for_output(located, config),
                        kind=SourceKind.PASSTHROUGH,
                    )
                )

    return files


def _excluded_dirs(config: BuildConfig) -> tuple[Path, ...]:
    return (config.includes_dir, config.layouts_dir, config.data_dir, config.output_dir)


def discover_sources(config: BuildConfig) -> list[SourceFile]:
    """Return every passthrough file and renderable template.

    Partials (includes, layouts), global data, the output directory,
    ``node_modules`` and dot-directories never produce output. Files with
    an extension outside ``template_formats`` are ignored unless a
    passthrough glob names them.
    """
    passthrough = expand_passthrough(config)
    passthrough_paths = {source.path for source in passthrough}
    excluded = _excluded_dirs(config)

    templates: list[SourceFile] = []
    for dirpath, dirnames, filenames in os.walk(config.input_dir):
        current = Path(dirpath)
        dirnames[:] = sorted(
            name
            for name in dirnames
            if not name.startswith(".")
            and name not in ALWAYS_IGNORED_DIRS
            and (current / name).resolve() not in excluded
        )
        for filename in sorted(filenames):
            path = current / filename
            if path in passthrough_paths:
                continue
            extension = path.suffix.lstrip(".").lower()
            if extension not in config.template_formats:
                logger.debug("Ignoring %s (not a template format)", path)
                continue
            templates.append(
                SourceFile(
                    path=path,
                    relative=PurePosixPath(path.relative_to(config.input_dir).as_posix()),
                    kind=SourceKind.TEMPLATE,
                )
            )

    return passthrough + templates


__all__ = ["SourceFile", "SourceKind", "discover_sources", "expand_passthrough"]
