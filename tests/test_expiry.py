"""Expiry evaluation against a reference date."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from npm_audit_filter.expiry import (
    EXPIRY_EXPIRED,
    EXPIRY_EXPIRING_SOON,
    EXPIRY_NONE,
    EXPIRY_VALID,
    evaluate,
)
from npm_audit_filter.models import AllowlistEntry

REFERENCE = date(2025, 1, 1)


def _entry(expires: date | None) -> AllowlistEntry:
    return AllowlistEntry(id="1001", package="lodash", reason="r", expires=expires)


@pytest.mark.parametrize(
    ("expires", "expected"),
    [
        (None, EXPIRY_NONE),
        (date(2020, 1, 1), EXPIRY_EXPIRED),
        (date(2024, 12, 31), EXPIRY_EXPIRED),
        (date(2025, 1, 1), EXPIRY_VALID),
        (date(2025, 1, 2), EXPIRY_EXPIRING_SOON),
        (date(2025, 1, 11), EXPIRY_EXPIRING_SOON),
        (date(2025, 1, 31), EXPIRY_EXPIRING_SOON),
        (date(2025, 2, 1), EXPIRY_VALID),
        (date(2099, 1, 1), EXPIRY_VALID),
    ],
)
def test_evaluate(expires: date | None, expected: str) -> None:
    assert evaluate(_entry(expires), REFERENCE) == expected


@pytest.mark.parametrize("reference", [date(1970, 1, 1), REFERENCE, date(2999, 12, 31)])
def test_entries_without_expiry_never_lapse(reference: date) -> None:
    assert evaluate(_entry(None), reference) == EXPIRY_NONE


def test_custom_window() -> None:
    entry = _entry(REFERENCE + timedelta(days=10))

    assert evaluate(entry, REFERENCE, window_days=7) == EXPIRY_VALID
    assert evaluate(entry, REFERENCE, window_days=10) == EXPIRY_EXPIRING_SOON
    assert evaluate(entry, REFERENCE, window_days=0) == EXPIRY_VALID


def test_negative_window_is_rejected() -> None:
    with pytest.raises(ValueError):
        evaluate(_entry(REFERENCE), REFERENCE, window_days=-1)


def test_datetime_reference_uses_utc_date() -> None:
    # 23:00 on Jan 1st in UTC-5 is already Jan 2nd in UTC
    reference = datetime(2025, 1, 1, 23, 0, tzinfo=timezone(timedelta(hours=-5)))

    assert evaluate(_entry(date(2025, 1, 1)), reference) == EXPIRY_EXPIRED
    assert evaluate(_entry(date(2025, 1, 2)), reference) == EXPIRY_VALID
