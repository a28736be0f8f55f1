"""Static site build: configuration, discovery, rendering and output."""

from portico.build.config import BuildConfig
from portico.build.exceptions import (
    BuildError,
    DataFileError,
    InputDirectoryNotFoundError,
    LayoutNotFoundError,
    OutputConflictError,
    PassthroughError,
    TemplateRenderError,
)
from portico.build.site import BuildResult, OutputRecord, SiteBuilder

__all__ = [
    "BuildConfig",
    "BuildError",
    "BuildResult",
    "DataFileError",
    "InputDirectoryNotFoundError",
    "LayoutNotFoundError",
    "OutputConflictError",
    "OutputRecord",
    "PassthroughError",
    "SiteBuilder",
    "TemplateRenderError",
]
