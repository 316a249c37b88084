"""Domain models for releasefill."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegionKind(StrEnum):
    WHOLE_FILE = "whole_file"
    DOC_BLOCK = "doc_block"
    COMMENT_LINE = "comment_line"


@dataclass(frozen=True, slots=True)
class ChangelogEntry:
    version: str
    raw_date: str
    change_text: str


@dataclass(frozen=True, slots=True)
class NormalizedDate:
    display_date: str
    parsed: datetime | None = None


@dataclass(frozen=True, slots=True)
class TemplateRegion:
    start: int
    text: str
    kind: RegionKind


@dataclass(frozen=True, slots=True)
class DependencyEntry:
    name: str
    min_version: str | None = None


@dataclass(frozen=True, slots=True)
class ModuleInfo:
    name: str | None = None
    version: str | None = None


class PrereqSection(BaseModel):
    model_config = ConfigDict(extra="allow")

    requires: dict[str, str] = Field(default_factory=dict)
    recommends: dict[str, str] = Field(default_factory=dict)
    suggests: dict[str, str] = Field(default_factory=dict)

    @field_validator("requires", "recommends", "suggests", mode="before")
    @classmethod
    def _stringify_versions(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                str(name): "0" if version is None else str(version)
                for name, version in value.items()
            }
        return value


class DistributionMeta(BaseModel):
    """The subset of CPAN::Meta style metadata that templates rely on."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    prereqs: dict[str, PrereqSection] = Field(default_factory=dict)

    @field_validator("version", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value
