"""Global data files (``_data``) exposed to every template."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from portico.build.exceptions import DataFileError

logger = logging.getLogger(__name__)

DATA_EXTENSIONS = (".json", ".yaml", ".yml")


def _load_data_file(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DataFileError(path, str(e)) from e


def load_global_data(data_dir: Path) -> dict[str, Any]:
    """Load every data file under ``data_dir`` keyed by file stem.

    Subdirectories become nested mappings: ``_data/site/meta.json`` is
    available as ``site.meta``.
    """
    if not data_dir.is_dir():
        return {}

    data: dict[str, Any] = {}
    for path in sorted(data_dir.rglob("*")):
        if not path.is_file() or path.suffix not in DATA_EXTENSIONS:
            continue
        relative = path.relative_to(data_dir)
        target = data
        for part in relative.parent.parts:
            target = target.setdefault(part, {})
        if path.stem in target:
            logger.warning("Data key '%s' defined more than once; %s wins", path.stem, relative)
        target[path.stem] = _load_data_file(path)
        logger.debug("Loaded global data %s", relative)

    return data


__all__ = ["load_global_data"]
