"""Calendar-date helpers shared by the allowlist validator and expiry checks.

Allowlist dates are compared as calendar dates in UTC. Older allowlists stored
full ISO 8601 timestamps (``2024-01-01T00:00:00Z``); those are reduced to the
UTC date they fall on.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_calendar_date(value: str) -> date:
    """Return the calendar date for ``YYYY-MM-DD`` or an ISO 8601 timestamp.

    Raises ValueError when the string is not a valid date.
    """
    text = value.strip()
    if not text:
        raise ValueError("empty date")

    if _DATE_ONLY.fullmatch(text):
        return date.fromisoformat(text)

    if "T" not in text and " " not in text:
        raise ValueError(f"invalid date '{value}'")

    # datetime.fromisoformat only learned the "Z" suffix in 3.11
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return as_utc_date(datetime.fromisoformat(text))
    except OverflowError as exc:
        # the UTC shift can move a timestamp past date.min or date.max
        raise ValueError(f"date out of range '{value}'") from exc


def as_utc_date(value: date | datetime) -> date:
    """Reduce a date or datetime to a calendar date.

    Aware datetimes are converted to UTC first; naive ones are taken as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def format_date(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None
