import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from portico.bootstrap.exceptions import ToolInvocationError
from portico.bootstrap.hooks import HookInstaller, render_hook_script
from portico.bootstrap.process import COMMAND_NOT_FOUND, CommandRunner
from portico.config.settings import BootstrapSettings


def _completed(returncode: int) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode)


def _installer(project: Path) -> HookInstaller:
    return HookInstaller(CommandRunner(project), BootstrapSettings(), project)


def test_rendered_hook_runs_precommit_alias():
    script = render_hook_script("npm")

    assert script.startswith("#!/bin/sh\n")
    assert "npm run precommit" in script


def test_successful_registration_does_not_write_hook(tmp_path: Path):
    with patch("subprocess.run", return_value=_completed(0)) as mock_run:
        result = _installer(tmp_path).install()

    assert result.used_fallback is False
    assert [call.args[0] for call in mock_run.call_args_list] == [
        ["npx", "husky", "install"],
        ["npx", "husky", "add", ".husky/pre-commit", "npm run precommit"],
    ]
    assert not (tmp_path / ".husky" / "pre-commit").exists()


def test_failed_registration_falls_back_to_writing_hook(tmp_path: Path):
    with patch("subprocess.run", side_effect=[_completed(0), _completed(1)]):
        result = _installer(tmp_path).install()

    hook = tmp_path / ".husky" / "pre-commit"
    assert result.used_fallback is True
    assert result.registration_status == 1
    assert result.path == hook
    assert hook.is_file()
    assert os.access(hook, os.X_OK)
    assert "npm run precommit" in hook.read_text(encoding="utf-8")


def test_missing_husky_add_command_also_falls_back(tmp_path: Path):
    with patch("subprocess.run", side_effect=[_completed(0), FileNotFoundError("npx")]):
        result = _installer(tmp_path).install()

    assert result.used_fallback is True
    assert result.registration_status == COMMAND_NOT_FOUND
    assert os.access(tmp_path / ".husky" / "pre-commit", os.X_OK)


def test_fallback_overwrites_existing_hook(tmp_path: Path):
    hook = tmp_path / ".husky" / "pre-commit"
    hook.parent.mkdir()
    hook.write_text("#!/bin/sh\nexit 1\n", encoding="utf-8")

    with patch("subprocess.run", side_effect=[_completed(0), _completed(1)]):
        _installer(tmp_path).install()

    assert "npm run precommit" in hook.read_text(encoding="utf-8")


def test_husky_install_failure_is_fatal(tmp_path: Path):
    with patch("subprocess.run", return_value=_completed(3)) as mock_run:
        with pytest.raises(ToolInvocationError) as excinfo:
            _installer(tmp_path).install()

    assert excinfo.value.returncode == 3
    assert mock_run.call_count == 1
    assert not (tmp_path / ".husky" / "pre-commit").exists()
