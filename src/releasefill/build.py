"""In-memory model of the files that make up a distribution build."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from releasefill.models import DistributionMeta

SKIPPED_DIRECTORIES = {".git", ".hg", ".svn", "__pycache__", ".build"}


@dataclass(slots=True)
class BuildFile:
    name: str
    content: str
    original: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        if not self.original:
            self.original = self.content

    @property
    def changed(self) -> bool:
        return self.content != self.original


@dataclass(slots=True)
class Distribution:
    name: str
    version: str
    files: list[BuildFile] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    def file_named(self, name: str) -> BuildFile | None:
        return next((file for file in self.files if file.name == name), None)

    def file_names(self) -> list[str]:
        return [file.name for file in self.files]


def load_meta(meta_path: str) -> DistributionMeta:
    payload = json.loads(Path(meta_path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{meta_path} must contain a JSON object")
    return DistributionMeta.model_validate(payload)


def collect_files(root: str) -> list[BuildFile]:
    """Read every UTF-8 text file under ``root``, sorted by relative path."""
    base = Path(root)
    files: list[BuildFile] = []
    for path in sorted(base.rglob("*")):
        relative = path.relative_to(base)
        if any(part in SKIPPED_DIRECTORIES for part in relative.parts):
            continue
        if not path.is_file():
            continue
        try:
            with path.open(encoding="utf-8", newline="") as handle:
                content = handle.read()
        except UnicodeDecodeError:
            continue
        files.append(BuildFile(name=relative.as_posix(), content=content))
    return files


def load_distribution(root: str, meta: DistributionMeta) -> Distribution:
    return Distribution(
        name=meta.name,
        version=meta.version,
        files=collect_files(root),
        meta=meta.model_dump(),
    )


def write_changed_files(root: str, dist: Distribution) -> list[str]:
    written: list[str] = []
    base = Path(root)
    for file in dist.files:
        if not file.changed:
            continue
        (base / file.name).write_text(file.content, encoding="utf-8", newline="")
        file.original = file.content
        written.append(file.name)
    return written
