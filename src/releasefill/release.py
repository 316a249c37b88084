"""Release gating helpers."""

from __future__ import annotations

from datetime import datetime

from releasefill.errors import InvalidReleaseDate
from releasefill.models import ChangelogEntry


def is_placeholder_date(raw_date: str) -> bool:
    # An all-caps word such as NOT marks a release that is not ready yet.
    return raw_date.isalpha() and raw_date.isupper()


def validate_before_release(
    entry: ChangelogEntry | None,
    parsed_date: datetime | None,
    changelog: str = "Changes",
) -> None:
    raw_date = entry.raw_date if entry is not None else None
    if not raw_date or parsed_date is None or is_placeholder_date(raw_date):
        raise InvalidReleaseDate(f"Invalid release date in {changelog}: {raw_date}")
