"""Core audit analysis entrypoints.

Everything here is pure: callers pass in the raw allowlist text, the captured
audit output and the reference date. Reading files, running npm and exit
codes belong to the CLI wrapper.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from collections.abc import Iterable

from .classifier import classify
from .dates import as_utc_date
from .expiry import EXPIRING_SOON_DAYS
from .matcher import AllowlistIndex
from .models.advisory import Advisory
from .models.allowlist_entry import AllowlistEntry
from .models.result import AnalysisResult
from .parsers.audit_report import parse_audit_report
from .report import aggregate
from .severity import filter_gating
from .validators.allowlist import parse_allowlist

_LOG = logging.getLogger(__name__)


def filter_vulnerabilities(
    advisories: Iterable[Advisory],
    allowlist: Iterable[AllowlistEntry],
    reference_date: date | datetime,
    window_days: int = EXPIRING_SOON_DAYS,
) -> AnalysisResult:
    """Classify already-parsed advisories against already-validated entries."""
    today = as_utc_date(reference_date)
    index = AllowlistIndex.from_entries(allowlist)
    gating = filter_gating(advisories)

    result = aggregate(
        classify(advisory, index.find(advisory), today, window_days) for advisory in gating
    )

    _LOG.debug(
        "Classified %d high/critical advisories on %s: %s",
        len(gating),
        today.isoformat(),
        result.totals,
    )
    return result


def analyze_audit_report(
    audit_output: str,
    allowlist_text: str | None,
    reference_date: date | datetime,
    *,
    window_days: int = EXPIRING_SOON_DAYS,
) -> AnalysisResult:
    """Analyze captured audit output against an allowlist.

    Params:
        audit_output: captured stdout of ``npm audit --json``; the command's
            exit status is irrelevant
        allowlist_text: allowlist JSON, or None when no allowlist exists
        reference_date: date used for expiry checks (normally today in UTC)
        window_days: lookahead for flagging entries that expire soon

    Raises AllowlistParseError or AuditReportParseError on bad input; a
    failing verdict is returned, never raised.
    """
    report = parse_audit_report(audit_output)
    allowlist = parse_allowlist(allowlist_text)
    return filter_vulnerabilities(report, allowlist, reference_date, window_days)
