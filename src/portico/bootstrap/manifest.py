"""Project manifest (``package.json``) and its script aliases."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from portico.bootstrap.exceptions import ManifestNotFoundError, ManifestParseError
from portico.config.settings import PorticoConfig

logger = logging.getLogger(__name__)

PRETTIER_GLOB = '"**/*.{js,jsx,ts,tsx,css,scss,md,json,njk,html}"'


def default_scripts(config: PorticoConfig) -> dict[str, str]:
    """Return the aliases the bootstrapper registers, in registration order."""
    pm = config.bootstrap.package_manager
    input_dir = config.build.input_dir
    return {
        "dev": "portico serve",
        "build": "PORTICO_ENV=production portico build",
        "format": f"prettier --write {PRETTIER_GLOB}",
        "format:check": f"prettier --check {PRETTIER_GLOB}",
        "lint:js": "eslint .",
        "lint:css": f'stylelint "{input_dir}/**/*.css"',
        "lint": f"{pm} run lint:js && {pm} run lint:css",
        "precommit": f"{pm} run format:check && {pm} run lint",
        "lhci": "lhci autorun",
        "prepare": "husky install",
    }


class ScriptRegistry:
    """Alias -> shell command mapping that never overwrites an entry."""

    def __init__(self, scripts: Mapping[str, str] | None = None) -> None:
        self._scripts: dict[str, str] = dict(scripts or {})

    def __contains__(self, alias: object) -> bool:
        return alias in self._scripts

    def __getitem__(self, alias: str) -> str:
        return self._scripts[alias]

    def register(self, alias: str, command: str) -> bool:
        """Add ``alias`` unless present. Return True when it was added."""
        if alias in self._scripts:
            return False
        self._scripts[alias] = command
        return True

    def register_missing(self, defaults: Mapping[str, str]) -> list[str]:
        return [alias for alias, command in defaults.items() if self.register(alias, command)]

    def as_dict(self) -> dict[str, str]:
        return dict(self._scripts)


@dataclass(slots=True)
class ProjectManifest:
    path: Path
    data: dict[str, Any]

    @classmethod
    def load(cls, path: Path) -> ProjectManifest:
        if not path.is_file():
            raise ManifestNotFoundError(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ManifestParseError(path, str(e)) from e
        if not isinstance(data, dict):
            raise ManifestParseError(path, f"expected a JSON object, got {type(data).__name__}")
        return cls(path=path, data=data)

    @property
    def scripts(self) -> ScriptRegistry:
        scripts = self.data.get("scripts")
        if scripts is None:
            return ScriptRegistry()
        if not isinstance(scripts, dict):
            raise ManifestParseError(self.path, "'scripts' must be an object")
        return ScriptRegistry(scripts)

    def save(self) -> None:
        self.path.write_text(json.dumps(self.data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def register_scripts(manifest_path: Path, defaults: Mapping[str, str]) -> list[str]:
    """Merge ``defaults`` into the manifest's scripts where absent.

    The manifest is only rewritten when something was added, so a second
    run leaves the file untouched.
    """
    manifest = ProjectManifest.load(manifest_path)
    registry = manifest.scripts
    added = registry.register_missing(defaults)
    if added:
        manifest.data["scripts"] = registry.as_dict()
        manifest.save()
        logger.info("Registered scripts: %s", ", ".join(added))
    else:
        logger.info("All scripts already registered in %s", manifest_path.name)
    return added


__all__ = ["ProjectManifest", "ScriptRegistry", "default_scripts", "register_scripts"]
