"""Filling release templates across a distribution build.

``TemplatePlugin.setup_installer`` runs once per build:

1. the changelog is checked and the current release extracted,
2. every configured template file is filled as a whole,
3. every module picked by the configured finders has its documentation
   blocks and templated comment lines filled.

``before_release`` later refuses to release while the changelog date is
missing, unparseable or a placeholder such as ``NOT``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from releasefill.build import BuildFile, Distribution
from releasefill.changelog import parse_changelog
from releasefill.config import TemplateConfig
from releasefill.dates import normalize_release_date
from releasefill.dependencies import (
    build_instructions,
    find_prerequisite,
    format_dependency_link,
    format_dependency_table,
)
from releasefill.errors import MissingModuleVersion, NoVersionFound
from releasefill.finders import find_files
from releasefill.models import ChangelogEntry, ModuleInfo, RegionKind
from releasefill.module_info import ModuleIntrospector, read_module_info
from releasefill.regions import substitute_all
from releasefill.release import validate_before_release
from releasefill.templating import JinjaEvaluator, TemplateEvaluator

LOGGER = logging.getLogger("releasefill.plugin")
CHANGES_LOGGER = logging.getLogger("releasefill.changes")

POD_ONLY_PATTERN = re.compile(r"^lib/(.+)\.pod$")
MODULE_REGION_KINDS = (RegionKind.DOC_BLOCK, RegionKind.COMMENT_LINE)


class TemplateHelper:
    """Exposed to templates as ``t``."""

    def __init__(self, dist: Distribution) -> None:
        self._dist = dist

    def dependency_list(self) -> str:
        runtime = (self._dist.meta.get("prereqs") or {}).get("runtime") or {}
        return format_dependency_table(runtime.get("requires") or {})

    def dependency_link(self, module: str) -> str:
        return format_dependency_link(module, find_prerequisite(self._dist.meta, module))

    def build_instructions(self, indent: str = "\t") -> str:
        return build_instructions(self._dist.file_names(), indent)


@dataclass(slots=True)
class ReleaseContext:
    changes: str
    date: str
    datetime: datetime | None
    dist: str
    dist_version: str
    version: str
    meta: dict[str, Any]
    t: TemplateHelper
    build: Distribution
    module: str | None = None
    module_info: ModuleInfo | None = None

    def variables(self) -> dict[str, Any]:
        return {
            "changes": self.changes,
            "date": self.date,
            "datetime": self.datetime,
            "dist": self.dist,
            "dist_version": self.dist_version,
            "version": self.version,
            "module": self.module,
            "module_info": self.module_info,
            "meta": self.meta,
            "t": self.t,
            "build": self.build,
        }


@dataclass(frozen=True, slots=True)
class ReleaseInfo:
    entry: ChangelogEntry
    date: str
    datetime: datetime | None

    @property
    def changes(self) -> str:
        return self.entry.change_text.removesuffix("\n")


class TemplatePlugin:
    def __init__(
        self,
        config: TemplateConfig | None = None,
        introspect: ModuleIntrospector = read_module_info,
        evaluator: TemplateEvaluator | None = None,
    ) -> None:
        self.config = config or TemplateConfig()
        self._introspect = introspect
        self._evaluator = evaluator or JinjaEvaluator()
        self._release_entry: ChangelogEntry | None = None
        self._release_datetime: datetime | None = None

    def check_changes(self, changes_file: BuildFile, version: str) -> ReleaseInfo:
        """Extract the current release from the changelog and remember its date."""
        entry = parse_changelog(
            changes_file.content,
            expected_version=version,
            pattern=self.config.changelog_pattern,
            release_window=self.config.changes,
            filename=changes_file.name,
        )
        normalized = normalize_release_date(
            entry.raw_date,
            self.config.date_format,
            locale=self.config.date_locale,
        )
        self._release_entry = entry
        self._release_datetime = normalized.parsed

        info = ReleaseInfo(entry=entry, date=normalized.display_date, datetime=normalized.parsed)
        LOGGER.info("Version %s released %s", version, info.date)
        CHANGES_LOGGER.info("%s", info.changes)
        return info

    def build_context(self, dist: Distribution, release: ReleaseInfo) -> ReleaseContext:
        return ReleaseContext(
            changes=release.changes,
            date=release.date,
            datetime=release.datetime,
            dist=dist.name,
            dist_version=dist.version,
            version=dist.version,
            meta=dist.meta,
            t=TemplateHelper(dist),
            build=dist,
        )

    def setup_installer(self, dist: Distribution) -> ReleaseContext:
        changes_file = dist.file_named(self.config.changelog)
        if changes_file is None:
            raise NoVersionFound(f"No {self.config.changelog} file")

        release = self.check_changes(changes_file, dist.version)
        context = self.build_context(dist, release)

        template_names = set(self.config.file)
        for file in dist.files:
            if file.name not in template_names:
                continue
            LOGGER.info("Processing %s", file.name)
            file.content = substitute_all(
                file.content,
                context.variables(),
                self._evaluator,
                kinds=(RegionKind.WHOLE_FILE,),
                filename=file.name,
            )

        for file in find_files(dist.files, self.config.finder):
            self.munge_file(file, context)
        return context

    def munge_file(self, file: BuildFile, context: ReleaseContext) -> None:
        """Fill the documentation blocks and templated comments of a module."""
        info = self._introspect(file.content)
        version = info.version
        module = info.name

        pod_only = POD_ONLY_PATTERN.match(file.name)
        if not version and pod_only:
            module = module or pod_only.group(1).replace("/", "::")
            version = context.dist_version

        if not version:
            raise MissingModuleVersion(f"Can't find version in {file.name}")

        level = logging.INFO if self.config.report_versions else logging.DEBUG
        LOGGER.log(level, "%s: VERSION %s", file.name, version)

        context.version = version
        context.module = module
        context.module_info = info

        file.content = substitute_all(
            file.content,
            context.variables(),
            self._evaluator,
            kinds=MODULE_REGION_KINDS,
            filename=file.name,
        )

    def before_release(self) -> None:
        validate_before_release(
            self._release_entry,
            self._release_datetime,
            changelog=self.config.changelog,
        )
