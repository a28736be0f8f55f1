"""Configuration loading for Portico projects."""

from portico.config.exceptions import ConfigError, ConfigParseError, ConfigValidationError
from portico.config.settings import (
    CONFIG_FILENAME,
    ENV_MODE_VAR,
    BootstrapSettings,
    BuildSettings,
    PorticoConfig,
    default_portico_config,
    find_portico_config,
    is_production,
    load_portico_config,
    save_portico_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ENV_MODE_VAR",
    "BootstrapSettings",
    "BuildSettings",
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    "PorticoConfig",
    "default_portico_config",
    "find_portico_config",
    "is_production",
    "load_portico_config",
    "save_portico_config",
]
