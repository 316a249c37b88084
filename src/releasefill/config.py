"""Configuration for the template filling step."""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from releasefill.changelog import DEFAULT_CHANGELOG_RE, compile_changelog_pattern
from releasefill.finders import resolve_finder

CONFIG_TABLE = ("tool", "releasefill")


class TemplateConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    changelog: str = Field(default="Changes", min_length=1)
    changelog_re: str = DEFAULT_CHANGELOG_RE
    changes: int = Field(default=1, ge=1)
    date_format: str = ""
    date_locale: str = Field(default="en", min_length=1)
    file: list[str] = Field(default_factory=lambda: ["README"])
    finder: list[str] = Field(default_factory=lambda: [":InstallModules"])
    report_versions: bool = True

    @field_validator("changelog_re")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        compile_changelog_pattern(value)
        return value

    @field_validator("file", "finder", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("finder")
    @classmethod
    def _check_finders(cls, value: list[str]) -> list[str]:
        for name in value:
            resolve_finder(name)
        return value

    @property
    def changelog_pattern(self) -> re.Pattern[str]:
        return compile_changelog_pattern(self.changelog_re)


def load_config(path: str | None = None) -> TemplateConfig:
    """Load options from a TOML file.

    Files with a ``[tool]`` table are read pyproject-style from
    ``[tool.releasefill]``; anything else is read from the top level.
    Without a path the defaults are returned.
    """
    if path is None:
        return TemplateConfig()
    config_path = Path(path)
    if not config_path.exists():
        return TemplateConfig()

    payload: dict[str, Any] = tomllib.loads(config_path.read_text(encoding="utf-8"))
    section: Any = payload
    if "tool" in payload:
        tool_table, name = CONFIG_TABLE
        section = payload.get(tool_table, {}).get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"{path}: [{'.'.join(CONFIG_TABLE)}] must be a table")
    return TemplateConfig.model_validate(section)
