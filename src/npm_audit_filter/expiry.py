"""Allowlist expiry evaluation against an explicit reference date."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from .dates import as_utc_date
from .models.allowlist_entry import AllowlistEntry

EXPIRY_NONE = "no-expiry"
EXPIRY_VALID = "valid"
EXPIRY_EXPIRED = "expired"
EXPIRY_EXPIRING_SOON = "expiring-soon"

EXPIRING_SOON_DAYS = 30


def evaluate(
    entry: AllowlistEntry,
    reference_date: date | datetime,
    window_days: int = EXPIRING_SOON_DAYS,
) -> str:
    """Return the expiry status of ``entry`` on ``reference_date``.

    The expiry date itself is still valid; an entry is expired only from the
    following day. Entries lapsing within ``window_days`` after the reference
    date are reported as expiring soon.
    """
    if window_days < 0:
        raise ValueError("window_days must be non-negative")

    if entry.expires is None:
        return EXPIRY_NONE

    today = as_utc_date(reference_date)
    if entry.expires < today:
        return EXPIRY_EXPIRED
    if today < entry.expires <= today + timedelta(days=window_days):
        return EXPIRY_EXPIRING_SOON
    return EXPIRY_VALID
