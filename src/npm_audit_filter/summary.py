"""Human-readable rendering of an AnalysisResult.

``render_text`` produces the console report; ``render_summary`` produces
Markdown for ``$GITHUB_STEP_SUMMARY``.
"""

from __future__ import annotations

from collections.abc import Iterable

from .config import DEFAULT_ALLOWLIST
from .dates import format_date
from .expiry import EXPIRING_SOON_DAYS
from .models.result import AnalysisResult, VulnerabilityInfo


def _label(vuln: VulnerabilityInfo) -> str:
    return f"{vuln.package}@{vuln.id} ({vuln.severity}): {vuln.title}"


def render_text(
    result: AnalysisResult,
    window_days: int = EXPIRING_SOON_DAYS,
    allowlist_name: str = DEFAULT_ALLOWLIST,
) -> str:
    """Return the console report for one analysis."""
    lines: list[str] = []

    if result.is_successful:
        lines.append("Security scan passed.")
    else:
        lines.append("Security scan failed.")

    if result.vulnerabilities:
        lines.append("")
        lines.append(
            f"Found {len(result.vulnerabilities)} non-allowlisted high/critical vulnerabilities:"
        )
        for vuln in result.vulnerabilities:
            lines.append(f"  - {_label(vuln)}")
            lines.append(f"    URL: {vuln.url}")

    if result.expired_allowlist_entries:
        lines.append("")
        lines.append(f"{len(result.expired_allowlist_entries)} allowlist entries have expired:")
        for vuln in result.expired_allowlist_entries:
            lines.append(f"  - {_label(vuln)}")
            lines.append(f"    Reason was: {vuln.reason}")
            lines.append(f"    Expired on: {format_date(vuln.expires_on)}")

    if result.allowed_vulnerabilities:
        lines.append("")
        lines.append(f"{len(result.allowed_vulnerabilities)} allowlisted vulnerabilities found:")
        for vuln in result.allowed_vulnerabilities:
            lines.append(f"  - {_label(vuln)}")
            lines.append(f"    Reason: {vuln.reason}")
            if vuln.expires_on is not None:
                lines.append(f"    Expires: {format_date(vuln.expires_on)}")

    if result.expiring_entries:
        lines.append("")
        lines.append(
            f"Warning: the following allowlist entries will expire within {window_days} days:"
        )
        for vuln in result.expiring_entries:
            lines.append(f"  - {vuln.package}@{vuln.id} expires on {format_date(vuln.expires_on)}")

    if not result.is_successful:
        lines.append("")
        lines.append("To fix this issue:")
        lines.append("1. Update dependencies to resolve vulnerabilities")
        lines.append(f"2. Or add entries to {allowlist_name} with proper justification")

    return "\n".join(lines) + "\n"


def _table(title: str, rows: Iterable[VulnerabilityInfo], with_allowlist: bool) -> list[str]:
    lines = ["", f"## {title}", ""]
    if with_allowlist:
        lines.append("| Package | Advisory | Severity | Title | Reason | Expires |")
        lines.append("| --- | --- | --- | --- | --- | --- |")
    else:
        lines.append("| Package | Advisory | Severity | Title |")
        lines.append("| --- | --- | --- | --- |")

    for vuln in rows:
        advisory = f"[{vuln.id}]({vuln.url})" if vuln.url else vuln.id
        cells = [vuln.package, advisory, vuln.severity, vuln.title]
        if with_allowlist:
            cells.append(vuln.reason or "")
            cells.append(format_date(vuln.expires_on) or "never")
        escaped = [str(cell).replace("|", "\\|") for cell in cells]
        lines.append("| " + " | ".join(escaped) + " |")
    return lines


def render_summary(result: AnalysisResult) -> str:
    """Return a Markdown summary with totals and one table per category."""
    totals = result.totals
    verdict = "passed" if result.is_successful else "failed"

    lines = ["# npm audit allowlist summary", ""]
    lines.append(f"Result: **{verdict}**")
    lines.append("")
    lines.append(
        f"New: {totals['new']} | Expired: {totals['expired']} | "
        f"Allowed: {totals['allowed']} | Expiring soon: {totals['expiring']}"
    )

    if result.vulnerabilities:
        lines.extend(_table("New vulnerabilities", result.vulnerabilities, False))
    if result.expired_allowlist_entries:
        lines.extend(_table("Expired allowlist entries", result.expired_allowlist_entries, True))
    if result.allowed_vulnerabilities:
        lines.extend(_table("Allowlisted vulnerabilities", result.allowed_vulnerabilities, True))
    if result.expiring_entries:
        lines.extend(_table("Expiring soon", result.expiring_entries, True))

    if not any(totals.values()):
        lines.append("")
        lines.append("No high or critical vulnerabilities reported.")

    return "\n".join(lines) + "\n"
