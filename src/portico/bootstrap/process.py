"""Blocking external-process invocation."""

from __future__ import annotations

import logging
import subprocess  # nosec B404
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127


@dataclass(frozen=True, slots=True)
class CommandResult:
    command: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Run commands one at a time in a fixed working directory.

    Output streams straight to the terminal unless ``quiet`` is set. A
    missing executable is reported like a shell would, with status 127.
    """

    def __init__(self, cwd: Path) -> None:
        self.cwd = cwd

    def run(self, args: Sequence[str], *, quiet: bool = False) -> CommandResult:
        command = " ".join(args)
        logger.debug("Running %s in %s", command, self.cwd)
        stream = subprocess.DEVNULL if quiet else None
        try:
            completed = subprocess.run(  # nosec B603
                list(args),
                cwd=self.cwd,
                check=False,
                stdout=stream,
                stderr=stream,
            )
        except FileNotFoundError:
            logger.warning("Command not found: %s", args[0])
            return CommandResult(command, COMMAND_NOT_FOUND)
        return CommandResult(command, completed.returncode)

    def run_shell(self, command: str) -> CommandResult:
        logger.debug("Running shell command %s in %s", command, self.cwd)
        completed = subprocess.run(command, cwd=self.cwd, check=False, shell=True)  # nosec B602
        return CommandResult(command, completed.returncode)


__all__ = ["COMMAND_NOT_FOUND", "CommandResult", "CommandRunner"]
