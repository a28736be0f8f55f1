"""Custom exceptions for configuration handling."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from portico.exceptions import PorticoError


class ConfigError(PorticoError):
    """Base exception for all configuration-related errors."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""

    def __init__(self, config_path: Path, reason: str) -> None:
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Could not parse {config_path}: {reason}")


class ConfigValidationError(ConfigError):
    """Raised when the configuration file fails validation."""

    def __init__(self, config_path: Path, errors: Sequence[dict[str, Any]] | None = None) -> None:
        self.config_path = config_path
        self.errors = list(errors or [])
        details = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in self.errors
        )
        message = f"Configuration in {config_path} failed validation with {len(self.errors)} error(s)"
        super().__init__(f"{message}: {details}" if details else message)
