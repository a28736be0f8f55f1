"""Configuration files for the formatter, linters and performance audit."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from portico.config.settings import PorticoConfig

logger = logging.getLogger(__name__)

ESLINT_HEADER = "/** @type {import('eslint').Linter.Config} */\n"


class ConfigStyle(str, Enum):
    JSON = "json"
    COMMONJS = "cjs"


@dataclass(frozen=True, slots=True)
class ToolConfig:
    """One tool's configuration file plus its optional ignore file."""

    tool: str
    config_path: str
    payload: dict[str, Any]
    style: ConfigStyle = ConfigStyle.JSON
    ignore_path: str | None = None
    ignore_globs: tuple[str, ...] = field(default_factory=tuple)

    def render_config(self) -> str:
        body = json.dumps(self.payload, indent=2, ensure_ascii=False)
        if self.style is ConfigStyle.COMMONJS:
            return f"{ESLINT_HEADER}module.exports = {body};\n"
        return body + "\n"

    def render_ignore(self) -> str:
        return "\n".join(self.ignore_globs) + "\n"


def default_tool_configs(config: PorticoConfig) -> list[ToolConfig]:
    """Return the fixed tool configurations, adjusted to the build output dir."""
    output_dir = config.build.output_dir

    prettier = ToolConfig(
        tool="prettier",
        config_path=".prettierrc",
        payload={
            "printWidth": 80,
            "singleQuote": True,
            "trailingComma": "es5",
            "semi": True,
            "tabWidth": 2,
        },
        ignore_path=".prettierignore",
        ignore_globs=("node_modules", output_dir, "dist", "coverage", ".build", ".cache", "*.min.js"),
    )

    eslint = ToolConfig(
        tool="eslint",
        config_path=".eslintrc.cjs",
        payload={
            "env": {"browser": True, "es2021": True, "node": True},
            "extends": ["eslint:recommended"],
            "parserOptions": {"ecmaVersion": "latest", "sourceType": "module"},
            "rules": {
                "no-unused-vars": ["warn", {"argsIgnorePattern": "^_"}],
                "no-undef": "error",
                "no-console": "off",
            },
            "ignorePatterns": [f"{output_dir}/**", "dist/**", "node_modules/**"],
        },
        style=ConfigStyle.COMMONJS,
        ignore_path=".eslintignore",
        ignore_globs=("node_modules", output_dir, "dist", "coverage"),
    )

    stylelint = ToolConfig(
        tool="stylelint",
        config_path=".stylelintrc.json",
        payload={
            "extends": ["stylelint-config-standard"],
            "rules": {
                "color-hex-case": "lower",
                "color-hex-length": "short",
                "block-no-empty": True,
                "declaration-block-no-duplicate-properties": True,
                "no-descending-specificity": None,
            },
        },
        ignore_path=".stylelintignore",
        ignore_globs=("node_modules", output_dir, "dist"),
    )

    lighthouse = ToolConfig(
        tool="lighthouse-ci",
        config_path="lighthouserc.json",
        payload={
            "ci": {
                "collect": {"staticDistDir": output_dir},
                "assert": {
                    "assertions": {
                        f"categories:{category}": ["warn", {"minScore": 0.9}]
                        for category in ("performance", "accessibility", "best-practices", "seo")
                    }
                },
            }
        },
    )

    return [prettier, eslint, stylelint, lighthouse]


def materialize_tool_configs(project_root: Path, tools: list[ToolConfig]) -> list[Path]:
    """Write every config and ignore file, overwriting existing ones."""
    written: list[Path] = []
    for tool in tools:
        config_path = project_root / tool.config_path
        config_path.write_text(tool.render_config(), encoding="utf-8")
        written.append(config_path)

        if tool.ignore_path is not None:
            ignore_path = project_root / tool.ignore_path
            ignore_path.write_text(tool.render_ignore(), encoding="utf-8")
            written.append(ignore_path)

        logger.info("Wrote %s configuration", tool.tool)
    return written


__all__ = ["ConfigStyle", "ToolConfig", "default_tool_configs", "materialize_tool_configs"]
