"""Per-advisory allowlist decisions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from .expiry import EXPIRING_SOON_DAYS, EXPIRY_EXPIRED, EXPIRY_EXPIRING_SOON, evaluate
from .models.advisory import Advisory
from .models.allowlist_entry import AllowlistEntry
from .models.result import STATUS_ALLOWED, STATUS_EXPIRED, STATUS_NEW, VulnerabilityInfo


@dataclass(frozen=True)
class ClassifiedAdvisory:
    """An advisory's final status plus the expiring-soon flag.

    ``expiring`` is only ever set for allowed advisories: they still pass the
    gate but are surfaced for review before the allowlist entry lapses.
    """

    info: VulnerabilityInfo
    expiring: bool = False

    @property
    def status(self) -> str:
        return self.info.status


def classify(
    advisory: Advisory,
    entry: AllowlistEntry | None,
    reference_date: date | datetime,
    window_days: int = EXPIRING_SOON_DAYS,
) -> ClassifiedAdvisory:
    """Classify one advisory against its matching allowlist entry (if any)."""
    if entry is None:
        return ClassifiedAdvisory(VulnerabilityInfo.from_advisory(advisory, STATUS_NEW))

    expiry = evaluate(entry, reference_date, window_days)
    if expiry == EXPIRY_EXPIRED:
        return ClassifiedAdvisory(VulnerabilityInfo.from_advisory(advisory, STATUS_EXPIRED, entry))

    return ClassifiedAdvisory(
        VulnerabilityInfo.from_advisory(advisory, STATUS_ALLOWED, entry),
        expiring=expiry == EXPIRY_EXPIRING_SOON,
    )
