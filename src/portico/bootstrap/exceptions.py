"""Exceptions for the quality-gates bootstrap process."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from portico.exceptions import PorticoError


class BootstrapError(PorticoError):
    """Base exception for bootstrap errors."""


class ManifestNotFoundError(BootstrapError):
    """Raised when the project manifest is missing."""

    def __init__(self, manifest_path: Path, init_command: str = "npm init -y") -> None:
        self.manifest_path = manifest_path
        self.init_command = init_command
        super().__init__(
            f"No {manifest_path.name} found in {manifest_path.parent}. "
            f"Run '{init_command}' first, then rerun this command."
        )


class ManifestParseError(BootstrapError):
    """Raised when the project manifest is not a JSON object."""

    def __init__(self, manifest_path: Path, reason: str) -> None:
        self.manifest_path = manifest_path
        self.reason = reason
        super().__init__(f"Could not read {manifest_path}: {reason}")


class ToolInvocationError(BootstrapError):
    """Raised when an external tool exits with a non-zero status.

    ``returncode`` is propagated as the process exit status.
    """

    def __init__(self, command: Sequence[str] | str, returncode: int) -> None:
        self.command = command if isinstance(command, str) else " ".join(command)
        self.returncode = returncode
        super().__init__(f"'{self.command}' failed with exit code {returncode}")


class PipelineDefinitionError(BootstrapError):
    """Raised when a pipeline definition file cannot be understood."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid pipeline definition '{path}': {reason}")
