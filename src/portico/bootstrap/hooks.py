"""Pre-commit hook installation through the hook manager (Husky)."""

from __future__ import annotations

import logging
import stat
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from portico.bootstrap.exceptions import ToolInvocationError
from portico.bootstrap.process import CommandRunner
from portico.config.settings import BootstrapSettings

logger = logging.getLogger(__name__)

HOOK_NAME = "pre-commit"
PRECOMMIT_ALIAS = "precommit"

_TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True, slots=True)
class HookInstallResult:
    path: Path
    used_fallback: bool
    registration_status: int


def render_hook_script(package_manager: str, alias: str = PRECOMMIT_ALIAS) -> str:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(),
        keep_trailing_newline=True,
    )
    return env.get_template("pre-commit.jinja").render(package_manager=package_manager, alias=alias)


def write_hook(hook_path: Path, content: str) -> Path:
    """Write ``content`` to ``hook_path`` and mark it executable."""
    hook_path.parent.mkdir(parents=True, exist_ok=True)
    hook_path.write_text(content, encoding="utf-8")
    mode = hook_path.stat().st_mode
    hook_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return hook_path


class HookInstaller:
    """Install the hook manager, then register the pre-commit hook.

    Registration goes through ``husky add``; whenever that reports a
    non-zero status (hook already present, command missing, or anything
    else) the hook file is written directly instead.
    """

    def __init__(self, runner: CommandRunner, settings: BootstrapSettings, project_root: Path) -> None:
        self._runner = runner
        self._settings = settings
        self._project_root = project_root

    @property
    def hook_path(self) -> Path:
        return self._project_root / self._settings.hooks_dir / HOOK_NAME

    def install(self) -> HookInstallResult:
        npx = self._settings.package_runner
        pm = self._settings.package_manager

        install_cmd = [npx, "husky", "install"]
        result = self._runner.run(install_cmd)
        if not result.ok:
            raise ToolInvocationError(install_cmd, result.returncode)

        hooks_rel = f"{self._settings.hooks_dir}/{HOOK_NAME}"
        (self._project_root / self._settings.hooks_dir).mkdir(parents=True, exist_ok=True)
        registration = self._runner.run(
            [npx, "husky", "add", hooks_rel, f"{pm} run {PRECOMMIT_ALIAS}"],
            quiet=True,
        )
        if registration.ok:
            logger.info("Registered %s hook via husky", HOOK_NAME)
            return HookInstallResult(self.hook_path, used_fallback=False, registration_status=0)

        logger.warning(
            "husky add exited with %d; writing %s directly",
            registration.returncode,
            hooks_rel,
        )
        write_hook(self.hook_path, render_hook_script(pm))
        return HookInstallResult(self.hook_path, used_fallback=True, registration_status=registration.returncode)


__all__ = ["HOOK_NAME", "HookInstallResult", "HookInstaller", "render_hook_script", "write_hook"]
