"""Project configuration for Portico.

One ``portico.toml`` at the project root holds two tables:

- ``[build]``: where the site sources live and how they are rendered
- ``[bootstrap]``: what the quality-gates bootstrapper installs and writes

Priority (highest to lowest): environment variables
(``PORTICO_SECTION__KEY``), the config file, defaults.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path, PurePosixPath
from typing import Any, Final

import tomli_w
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from portico.config.exceptions import ConfigParseError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME: Final[str] = "portico.toml"
ENV_MODE_VAR: Final[str] = "PORTICO_ENV"
PRODUCTION_MODE: Final[str] = "production"

SUPPORTED_TEMPLATE_FORMATS: Final[tuple[str, ...]] = ("njk", "md", "html")

DEFAULT_DEV_DEPENDENCIES: Final[tuple[str, ...]] = (
    "prettier",
    "eslint",
    "stylelint",
    "stylelint-config-standard",
    "husky",
    "@lhci/cli",
)


def _validate_relative(value: str) -> str:
    path = PurePosixPath(value.replace("\\", "/"))
    if path.is_absolute():
        msg = f"Path must be relative, not absolute: {value}"
        raise ValueError(msg)
    if any(part == ".." for part in path.parts):
        msg = f"Path must not contain traversal sequences ('..'): {value}"
        raise ValueError(msg)
    return path.as_posix()


class BuildSettings(BaseModel):
    """Site build configuration.

    ``includes_dir``, ``layouts_dir`` and ``data_dir`` are relative to
    ``input_dir``; everything else is relative to the project root.
    """

    input_dir: str = Field(default="src", description="Source tree to render")
    includes_dir: str = Field(default="_includes", description="Partials, relative to input_dir")
    layouts_dir: str = Field(default="_includes/layouts", description="Layouts, relative to input_dir")
    data_dir: str = Field(default="_data", description="Global data files, relative to input_dir")
    output_dir: str = Field(default="_site", description="Rendered site destination")
    template_formats: list[str] = Field(
        default_factory=lambda: list(SUPPORTED_TEMPLATE_FORMATS),
        description="File extensions rendered as templates",
    )
    passthrough_globs: list[str] = Field(
        default_factory=lambda: ["src/style.css"],
        description="Globs (relative to the project root) copied verbatim",
    )
    path_prefix: str | None = Field(
        default=None,
        description="URL prefix applied in production builds, e.g. '/my-repo/'",
    )
    pretty_urls: bool = Field(
        default=True,
        description="Write about.md to about/index.html instead of about.html",
    )

    @field_validator("input_dir", "includes_dir", "layouts_dir", "data_dir", "output_dir")
    @classmethod
    def validate_safe_path(cls, v: str) -> str:
        """Validate path is relative and does not contain traversal sequences."""
        return _validate_relative(v)

    @field_validator("template_formats")
    @classmethod
    def normalize_formats(cls, v: list[str]) -> list[str]:
        normalized: list[str] = []
        for fmt in v:
            name = fmt.strip().lstrip(".").lower()
            if name not in SUPPORTED_TEMPLATE_FORMATS:
                msg = f"Unsupported template format '{fmt}'. Choose from: {', '.join(SUPPORTED_TEMPLATE_FORMATS)}"
                raise ValueError(msg)
            if name not in normalized:
                normalized.append(name)
        return normalized

    @field_validator("path_prefix")
    @classmethod
    def normalize_prefix(cls, v: str | None) -> str | None:
        """Normalize to ``/segment/`` form; an empty or root prefix means none."""
        if v is None:
            return None
        stripped = v.strip().strip("/")
        if not stripped:
            return None
        if "://" in stripped:
            msg = f"path_prefix must be a URL path, not an absolute URL: {v}"
            raise ValueError(msg)
        return f"/{stripped}/"


class BootstrapSettings(BaseModel):
    """Quality-gates bootstrap configuration."""

    manifest: str = Field(default="package.json", description="Project manifest checked and updated")
    package_manager: str = Field(default="npm", description="Package manager executable")
    package_runner: str = Field(default="npx", description="Executable used to run installed tools")
    dev_dependencies: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DEV_DEPENDENCIES),
        description="Development tools installed on bootstrap",
    )
    hooks_dir: str = Field(default=".husky", description="Directory holding git hook scripts")
    workflow_path: str = Field(
        default=".github/workflows/ci-cd.yml",
        description="Where the CI/CD pipeline definition is written",
    )
    node_version: str = Field(default="20", description="Node.js version used in CI")
    python_version: str = Field(default="3.12", description="Python version used in CI")
    site_builder_requirement: str = Field(
        default="portico", description="pip requirement that installs the site builder in CI"
    )
    main_branch: str = Field(default="main", description="Branch whose pushes trigger deployment")
    deploy_action: str = Field(
        default="peaceiris/actions-gh-pages@v4", description="Action publishing the built site"
    )

    @field_validator("manifest", "hooks_dir", "workflow_path")
    @classmethod
    def validate_safe_path(cls, v: str) -> str:
        return _validate_relative(v)


class PorticoConfig(BaseSettings):
    """Root configuration for Portico.

    Supports environment variable overrides with the pattern
    ``PORTICO_SECTION__KEY`` (e.g. ``PORTICO_BUILD__PATH_PREFIX``).
    """

    build: BuildSettings = Field(default_factory=BuildSettings, description="Site build settings")
    bootstrap: BootstrapSettings = Field(
        default_factory=BootstrapSettings, description="Quality-gates bootstrap settings"
    )

    model_config = SettingsConfigDict(
        extra="forbid",
        validate_assignment=True,
        env_prefix="PORTICO_",
        env_nested_delimiter="__",
    )


def default_portico_config() -> PorticoConfig:
    """Return the built-in defaults, ignoring ``PORTICO_*`` environment overrides.

    Explicit section instances replace (rather than merge with) whatever the
    environment source provides.
    """
    return PorticoConfig(build=BuildSettings(), bootstrap=BootstrapSettings())


def is_production(environ: dict[str, str] | None = None) -> bool:
    """Return True when ``PORTICO_ENV`` selects a production build."""
    env = os.environ if environ is None else environ
    return env.get(ENV_MODE_VAR, "").strip().lower() == PRODUCTION_MODE


def find_portico_config(start_dir: Path) -> Path | None:
    """Search upward for ``portico.toml``."""
    current = start_dir.expanduser().resolve()
    for candidate in (current, *current.parents):
        config_path = candidate / CONFIG_FILENAME
        if config_path.is_file():
            return config_path
    return None


def _collect_env_override_paths() -> set[tuple[str, ...]]:
    """Return the set of config paths defined via environment variables."""
    prefix = "PORTICO_"
    env_paths: set[tuple[str, ...]] = set()

    for key in os.environ:
        if not key.startswith(prefix):
            continue
        parts = [part.lower() for part in key[len(prefix) :].split("__") if part]
        if parts:
            env_paths.add(tuple(parts))

    return env_paths


def _drop_env_overrides(
    data: dict[str, Any],
    env_override_paths: set[tuple[str, ...]],
    current_path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Return ``data`` without keys that the environment already provides."""
    kept: dict[str, Any] = {}
    for key, value in data.items():
        path = (*current_path, str(key).lower())
        if path in env_override_paths:
            continue
        if isinstance(value, dict):
            kept[key] = _drop_env_overrides(value, env_override_paths, path)
        else:
            kept[key] = value
    return kept


def load_portico_config(project_root: Path | None = None) -> PorticoConfig:
    """Load configuration from ``<project_root>/portico.toml``.

    A missing file is not an error: defaults (plus environment overrides)
    are returned and nothing is written.

    Raises:
        ConfigParseError: If the file is not valid TOML
        ConfigValidationError: If the file contains invalid values

    """
    if project_root is None:
        project_root = Path.cwd()

    config_path = project_root / CONFIG_FILENAME
    if not config_path.is_file():
        logger.debug("No %s in %s, using defaults", CONFIG_FILENAME, project_root)
        file_data: dict[str, Any] = {}
    else:
        logger.debug("Loading config from %s", config_path)
        try:
            file_data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(config_path, str(e)) from e

    try:
        return PorticoConfig(**_drop_env_overrides(file_data, _collect_env_override_paths()))
    except ValidationError as e:
        for error in e.errors():
            loc = " -> ".join(str(location_part) for location_part in error["loc"])
            logger.error("  %s: %s", loc, error["msg"])
        raise ConfigValidationError(config_path, e.errors()) from e


def save_portico_config(config: PorticoConfig, project_root: Path) -> Path:
    """Save ``config`` to ``<project_root>/portico.toml`` and return the path."""
    config_path = project_root / CONFIG_FILENAME

    data = config.model_dump(exclude_defaults=False, mode="json")

    # tomli_w cannot represent None
    def _clean_nones(d: dict[str, Any]) -> dict[str, Any]:
        cleaned = {}
        for k, v in d.items():
            if v is None:
                continue
            if isinstance(v, dict):
                v = _clean_nones(v)
            cleaned[k] = v
        return cleaned

    config_path.write_text(tomli_w.dumps(_clean_nones(data)), encoding="utf-8")
    logger.debug("Saved config to %s", config_path)
    return config_path


__all__ = [
    "CONFIG_FILENAME",
    "ENV_MODE_VAR",
    "SUPPORTED_TEMPLATE_FORMATS",
    "BootstrapSettings",
    "BuildSettings",
    "PorticoConfig",
    "default_portico_config",
    "find_portico_config",
    "is_production",
    "load_portico_config",
    "save_portico_config",
]
