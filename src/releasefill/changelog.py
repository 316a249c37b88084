"""Changelog scanning.

A changelog lists releases newest first.  Each release starts with a line
that begins with the version number followed by the release date; every
other line of the release is indented::

    1.02   2010-03-29
      - Fixed the frobnicator

    1.01   March 1, 2010
      - Initial release
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from releasefill.errors import EmptyChangeText, NoVersionFound, VersionMismatch
from releasefill.models import ChangelogEntry

DEFAULT_CHANGELOG_RE = r"(\d[\d._]*)\s+(.+)"

LINE_PATTERN = re.compile(r"[^\n]*\n|[^\n]+\Z")
LEADING_BLANK_LINES = re.compile(r"\A\s*\n")
TRAILING_WHITESPACE = re.compile(r"\s*\Z")


def compile_changelog_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    try:
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    except re.error as exc:
        raise ValueError(f"invalid changelog pattern {pattern!r}: {exc}") from exc
    if compiled.groups != 2:
        raise ValueError(
            "changelog pattern must have exactly two capture groups (version, date), "
            f"got {compiled.groups}"
        )
    return compiled


def _lines(text: str) -> Iterator[str]:
    for match in LINE_PATTERN.finditer(text):
        yield match.group(0)


def _strip_terminator(line: str) -> str:
    return line.rstrip("\r\n")


def parse_changelog(
    text: str,
    expected_version: str,
    pattern: str | re.Pattern[str] = DEFAULT_CHANGELOG_RE,
    release_window: int = 1,
    filename: str = "Changes",
) -> ChangelogEntry:
    """Extract the current release from ``text``.

    The first version line must name ``expected_version``.  Change text is
    collected until the ``release_window``-th following line that starts
    with a non-whitespace character.
    """
    version_re = compile_changelog_pattern(pattern)
    lines = _lines(text)

    for line in lines:
        match = version_re.match(_strip_terminator(line))
        if match is None:
            continue

        found_version, raw_date = match.group(1), match.group(2)
        if found_version != expected_version:
            raise VersionMismatch(filename, found_version, expected_version)

        remaining = release_window
        collected: list[str] = []
        for body_line in lines:
            if body_line[:1] and not body_line[0].isspace():
                remaining -= 1
                if remaining <= 0:
                    break
            collected.append(body_line)

        change_text = LEADING_BLANK_LINES.sub("", "".join(collected), count=1)
        change_text = TRAILING_WHITESPACE.sub("\n", change_text, count=1)
        if len(change_text) <= 1:
            raise EmptyChangeText(
                f"{filename} contains no history for version {expected_version}"
            )
        return ChangelogEntry(
            version=found_version,
            raw_date=raw_date,
            change_text=change_text,
        )

    raise NoVersionFound(f"Can't find any versions in {filename}")
