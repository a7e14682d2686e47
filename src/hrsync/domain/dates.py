"""Date normalization for HR feed and workflow values."""

from __future__ import annotations

import re
from datetime import date

_DAY_MONTH_YEAR = re.compile(r"^([0-9]{2})/([0-9]{2})/([0-9]{4})$")
_ISO_PREFIX = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})")
_DAY_MONTH_YEAR_PREFIX = re.compile(r"^([0-9]{2})/([0-9]{2})/([0-9]{4})")


def to_iso_date_or_original(value: str | None) -> str:
    """Rewrite ``DD/MM/YYYY`` as ``YYYY-MM-DD``; anything else is returned as is."""

    if not value:
        return ""
    match = _DAY_MONTH_YEAR.match(value.strip())
    if match is None:
        return value
    day, month, year = match.groups()
    return f"{year}-{month}-{day}"


def parse_calendar_day(value: str | None) -> date | None:
    """Parse ``YYYY-MM-DD[...]`` or ``DD/MM/YYYY[...]`` into a calendar day.

    Any time component is ignored. Returns ``None`` for blank, unrecognized or
    impossible dates (``31/02/2024``) so callers can fail closed.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    match = _ISO_PREFIX.match(text)
    if match is not None:
        year, month, day = match.groups()
    else:
        match = _DAY_MONTH_YEAR_PREFIX.match(text)
        if match is None:
            return None
        day, month, year = match.groups()

    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None
