"""Verdict computation and result assembly."""

from __future__ import annotations

from collections.abc import Iterable

from .classifier import ClassifiedAdvisory
from .models.result import (
    STATUS_ALLOWED,
    STATUS_EXPIRED,
    STATUS_NEW,
    AnalysisResult,
    VulnerabilityInfo,
)


def aggregate(classified: Iterable[ClassifiedAdvisory]) -> AnalysisResult:
    """Partition classified advisories and compute the pass/fail verdict.

    The audit passes when there are no new and no expired findings. Allowed
    and expiring-soon findings are informational; an expiring finding is
    listed both as allowed and as expiring.
    """
    new: list[VulnerabilityInfo] = []
    allowed: list[VulnerabilityInfo] = []
    expired: list[VulnerabilityInfo] = []
    expiring: list[VulnerabilityInfo] = []

    for item in classified:
        if item.status == STATUS_NEW:
            new.append(item.info)
        elif item.status == STATUS_EXPIRED:
            expired.append(item.info)
        elif item.status == STATUS_ALLOWED:
            allowed.append(item.info)
            if item.expiring:
                expiring.append(item.info)

    return AnalysisResult(
        vulnerabilities=tuple(new),
        allowed_vulnerabilities=tuple(allowed),
        expired_allowlist_entries=tuple(expired),
        expiring_entries=tuple(expiring),
        is_successful=not new and not expired,
    )
