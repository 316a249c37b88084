"""Release date parsing and display formatting."""

from __future__ import annotations

import logging
import re
from datetime import datetime

from babel.dates import format_datetime
from dateutil import parser as date_parser

from releasefill.models import NormalizedDate

LOGGER = logging.getLogger("releasefill.dates")

# A YYYY-MM-DD date (optionally with a time) may be followed by a free-form
# release note, which is left out of parsing.
ISO_PREFIX_PATTERN = re.compile(r"^(\d{4}-\d\d-\d\d(?:\s\d\d:\d\d(?::\d\d)?)?)\b", re.ASCII)


def parse_release_date(raw_date: str) -> datetime | None:
    match = ISO_PREFIX_PATTERN.match(raw_date)
    candidate = match.group(1) if match else raw_date
    try:
        return date_parser.parse(candidate, dayfirst=False, fuzzy=False)
    except (ValueError, OverflowError):
        return None


def normalize_release_date(
    raw_date: str,
    date_format: str = "",
    locale: str = "en",
) -> NormalizedDate:
    """Parse ``raw_date`` and render it with the CLDR ``date_format``.

    The raw text is returned unchanged when no format is requested or when
    it cannot be parsed as a date.
    """
    parsed = parse_release_date(raw_date)
    if parsed is None:
        LOGGER.debug("Unable to parse '%s'", raw_date)
        return NormalizedDate(display_date=raw_date, parsed=None)

    if not date_format:
        return NormalizedDate(display_date=raw_date, parsed=parsed)

    return NormalizedDate(
        display_date=format_datetime(parsed, date_format, locale=locale),
        parsed=parsed,
    )
