"""The quality-gates bootstrap sequence.

Steps run strictly in order; each blocking command finishes before the
next starts:

1. check the project manifest exists
2. install the development tools
3. write tool configuration files (always overwritten)
4. register script aliases (only where absent)
5. install the pre-commit hook
6. write the CI/CD pipeline definition (always overwritten)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from portico.bootstrap.exceptions import ManifestNotFoundError, ToolInvocationError
from portico.bootstrap.hooks import HookInstaller, HookInstallResult
from portico.bootstrap.manifest import default_scripts, register_scripts
from portico.bootstrap.pipeline import default_pipeline, write_pipeline
from portico.bootstrap.process import CommandRunner
from portico.bootstrap.tools import default_tool_configs, materialize_tool_configs
from portico.config.settings import (
    CONFIG_FILENAME,
    PorticoConfig,
    default_portico_config,
    save_portico_config,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BootstrapReport:
    project_root: Path
    installed: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    scripts_added: list[str] = field(default_factory=list)
    hook: HookInstallResult | None = None
    workflow: Path | None = None


class Bootstrapper:
    """Scaffold formatting, linting, hook and CI tooling into a project."""

    def __init__(
        self,
        project_root: Path,
        config: PorticoConfig,
        runner: CommandRunner | None = None,
    ) -> None:
        self.project_root = project_root
        self.config = config
        self.settings = config.bootstrap
        self.runner = runner or CommandRunner(project_root)

    @property
    def manifest_path(self) -> Path:
        return self.project_root / self.settings.manifest

    def check_manifest(self) -> None:
        if not self.manifest_path.is_file():
            raise ManifestNotFoundError(self.manifest_path, f"{self.settings.package_manager} init -y")

    def install_dependencies(self) -> list[str]:
        packages = list(self.settings.dev_dependencies)
        logger.info("Installing dev dependencies (%s)...", ", ".join(packages))
        command = [self.settings.package_manager, "install", "--save-dev", *packages]
        result = self.runner.run(command)
        if not result.ok:
            raise ToolInvocationError(command, result.returncode)
        return packages

    def write_tool_configs(self) -> list[Path]:
        written = materialize_tool_configs(self.project_root, default_tool_configs(self.config))

        site_config = self.project_root / CONFIG_FILENAME
        if site_config.exists():
            logger.info("Keeping existing %s", CONFIG_FILENAME)
        else:
            # Environment overrides apply to this run only, never to the saved file
            written.append(save_portico_config(default_portico_config(), self.project_root))
            logger.info("Created %s", CONFIG_FILENAME)
        return written

    def register_scripts(self) -> list[str]:
        logger.info("Updating %s scripts...", self.settings.manifest)
        return register_scripts(self.manifest_path, default_scripts(self.config))

    def install_hook(self) -> HookInstallResult:
        logger.info("Setting up pre-commit hook...")
        return HookInstaller(self.runner, self.settings, self.project_root).install()

    def write_pipeline(self) -> Path:
        return write_pipeline(default_pipeline(self.config), self.project_root / self.settings.workflow_path)

    def run(self) -> BootstrapReport:
        """Run every step; the first fatal error aborts the sequence."""
        self.check_manifest()

        report = BootstrapReport(project_root=self.project_root)
        report.installed = self.install_dependencies()
        report.written = self.write_tool_configs()
        report.scripts_added = self.register_scripts()
        report.hook = self.install_hook()
        report.workflow = self.write_pipeline()
        return report


__all__ = ["BootstrapReport", "Bootstrapper"]
