"""Exceptions raised while building a site."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from portico.exceptions import PorticoError


class BuildError(PorticoError):
    """Base exception for site build failures. Always fatal."""


class InputDirectoryNotFoundError(BuildError):
    """Raised when the configured input directory does not exist."""

    def __init__(self, input_dir: Path) -> None:
        self.input_dir = input_dir
        super().__init__(f"Input directory '{input_dir}' does not exist")


class TemplateRenderError(BuildError):
    """Raised when a template cannot be parsed or rendered."""

    def __init__(self, source: Path, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to render '{source}': {reason}")


class LayoutNotFoundError(BuildError):
    """Raised when a page names a layout that does not exist."""

    def __init__(self, layout: str, source: Path, layouts_dir: Path) -> None:
        self.layout = layout
        self.source = source
        self.layouts_dir = layouts_dir
        super().__init__(f"Layout '{layout}' used by '{source}' was not found in '{layouts_dir}'")


class OutputConflictError(BuildError):
    """Raised when two sources would be written to the same output file."""

    def __init__(self, output: Path, sources: Sequence[Path]) -> None:
        self.output = output
        self.sources = list(sources)
        names = ", ".join(str(source) for source in self.sources)
        super().__init__(f"Multiple sources write to '{output}': {names}")


class DataFileError(BuildError):
    """Raised when a global data file cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid data file '{path}': {reason}")


class PassthroughError(BuildError):
    """Raised when a passthrough glob cannot be resolved."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid passthrough glob '{pattern}': {reason}")
