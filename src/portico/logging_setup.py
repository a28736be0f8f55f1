"""Logging for Portico: one Rich handler on the root logger."""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

LOG_LEVEL_ENV: Final[str] = "PORTICO_LOG_LEVEL"

# Libraries that log per token or per request at DEBUG
QUIET_LOGGERS: Final[tuple[str, ...]] = ("markdown_it", "urllib3")

console = Console()


class PorticoLogHandler(RichHandler):
    """Rich handler installed by :func:`configure_logging`; marks it as ours."""

    def __init__(self) -> None:
        super().__init__(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            markup=True,
            log_time_format="[%X]",
        )
        self.setFormatter(logging.Formatter("%(message)s"))


def _level_from(name: str | None) -> int:
    """Translate a level name (``"debug"``, ``"WARNING"``...) into a number.

    ``None`` falls back to ``PORTICO_LOG_LEVEL``; unknown names mean INFO.
    """
    level_name = (name or os.getenv(LOG_LEVEL_ENV) or "INFO").strip().upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> int:
    """Route log records through Rich and return the effective level.

    Safe to call more than once: the Portico handler is added the first time
    and only the level changes afterwards. Plain stream handlers left by
    ``logging.basicConfig`` are replaced so records are not printed twice;
    any other handler (file handlers, test capture) is kept.
    """
    root_logger = logging.getLogger()

    if not any(isinstance(handler, PorticoLogHandler) for handler in root_logger.handlers):
        for handler in list(root_logger.handlers):
            if type(handler) is logging.StreamHandler:
                root_logger.removeHandler(handler)
        root_logger.addHandler(PorticoLogHandler())

    effective = _level_from(level)
    root_logger.setLevel(effective)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(effective, logging.WARNING))

    logging.captureWarnings(True)
    return effective
