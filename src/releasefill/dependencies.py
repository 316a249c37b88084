"""Dependency listings for templates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from releasefill.errors import BuildToolNotFound
from releasefill.models import DependencyEntry

LOGGER = logging.getLogger("releasefill.dependencies")

BASELINE_RUNTIME = "perl"
NORMALIZE_FROM = (5, 6, 0)
MIN_COLUMN_WIDTH = 6
BUILDERS = ("Build.PL", "Makefile.PL")


def _is_set(version: str | None) -> bool:
    # An empty string or a bare "0" both mean "any version".
    return bool(version) and version != "0"


def parse_perl_version(raw: str) -> tuple[int, ...]:
    """Split a Perl version string into its numeric components.

    Decimal versions group the fraction in threes (``5.008001`` is 5.8.1);
    dotted versions (a leading ``v`` or two or more dots) are taken as is.
    """
    value = raw.replace("_", "").strip()
    if value.startswith("v") or value.count(".") >= 2:
        return tuple(int(part) for part in value.lstrip("v").split("."))

    integer, _, fraction = value.partition(".")
    components = [int(integer)]
    if fraction:
        width = -(-len(fraction) // 3) * 3
        padded = fraction.ljust(width, "0")
        components.extend(int(padded[i : i + 3]) for i in range(0, width, 3))
    return tuple(components)


def normalize_perl_version(raw: str) -> str:
    try:
        components = parse_perl_version(raw)
    except ValueError:
        return raw
    padded = components + (0,) * max(0, 3 - len(components))
    if padded < NORMALIZE_FROM:
        return raw
    return ".".join(str(part) for part in padded)


def dependency_entries(requires: Mapping[str, str | None]) -> list[DependencyEntry]:
    names = sorted(name for name in requires if name != BASELINE_RUNTIME)
    entries: list[DependencyEntry] = []

    baseline = requires.get(BASELINE_RUNTIME)
    if baseline is not None and _is_set(baseline):
        entries.append(
            DependencyEntry(
                name=BASELINE_RUNTIME,
                min_version=normalize_perl_version(baseline).removeprefix("v"),
            )
        )

    for name in names:
        version = requires[name]
        entries.append(
            DependencyEntry(
                name=name,
                min_version=version.removeprefix("v") if _is_set(version) else None,
            )
        )
    return entries


def format_dependency_table(requires: Mapping[str, str | None]) -> str:
    """Render an aligned Package / Minimum Version table.

    The baseline runtime comes first, everything else follows in code
    point order.  Returns ``None.`` when there is nothing to list.  The
    result does not end with a newline.
    """
    entries = dependency_entries(requires)
    if not entries:
        return "None."

    width = max(MIN_COLUMN_WIDTH, *(len(entry.name) for entry in entries)) + 1
    lines = [
        f"  {'Package':<{width}} Minimum Version",
        f"  {'-' * width} ---------------",
    ]
    for entry in entries:
        lines.append(f"  {entry.name:<{width + 1}} {entry.min_version or ''}")
    return "\n".join(lines).rstrip()


def format_dependency_link(module: str, min_version: str | None) -> str:
    if _is_set(min_version):
        return f"L<{module}> ({min_version} or later)"
    return f"L<{module}>"


def find_prerequisite(meta: Mapping[str, Any], module: str) -> str | None:
    """Look ``module`` up in the runtime requires, then recommends."""
    runtime = (meta.get("prereqs") or {}).get("runtime") or {}
    for key in ("requires", "recommends"):
        section = runtime.get(key) or {}
        if module in section:
            version = section[module]
            return None if version is None else str(version)
    LOGGER.warning("Can't find %s in prerequisites", module)
    return None


def build_instructions(file_names: Iterable[str], indent: str = "\t") -> str:
    builders = sorted(name for name in file_names if name in BUILDERS)
    if not builders:
        raise BuildToolNotFound(
            "Unable to locate Build.PL or Makefile.PL in distribution\n"
            "build instructions require a Build.PL or Makefile.PL"
        )
    builder = builders[0]
    build = "./Build" if builder == "Build.PL" else "make"
    steps = [f"perl {builder}", build, f"{build} test", f"{build} install"]
    return "\n".join(f"{indent}{step}" for step in steps)
