"""Quality-gates bootstrap: tool configs, script aliases, hooks and CI."""

from portico.bootstrap.exceptions import (
    BootstrapError,
    ManifestNotFoundError,
    ManifestParseError,
    PipelineDefinitionError,
    ToolInvocationError,
)
from portico.bootstrap.runner import BootstrapReport, Bootstrapper

__all__ = [
    "BootstrapError",
    "BootstrapReport",
    "Bootstrapper",
    "ManifestNotFoundError",
    "ManifestParseError",
    "PipelineDefinitionError",
    "ToolInvocationError",
]
