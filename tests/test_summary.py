"""Console and Markdown rendering."""

from __future__ import annotations

from datetime import date

from npm_audit_filter.models import AnalysisResult, VulnerabilityInfo
from npm_audit_filter.summary import render_summary, render_text


def _info(adv_id: str, status: str, **extra: object) -> VulnerabilityInfo:
    return VulnerabilityInfo(
        id=adv_id,
        package=extra.pop("package", "lodash"),
        severity="critical",
        title=extra.pop("title", "Prototype Pollution"),
        url=f"https://npmjs.com/advisories/{adv_id}",
        status=status,
        **extra,
    )


def _result(
    new: tuple = (), allowed: tuple = (), expired: tuple = (), expiring: tuple = ()
) -> AnalysisResult:
    return AnalysisResult(
        vulnerabilities=new,
        allowed_vulnerabilities=allowed,
        expired_allowlist_entries=expired,
        expiring_entries=expiring,
        is_successful=not new and not expired,
    )


def test_text_for_clean_run() -> None:
    text = render_text(_result())

    assert text == "Security scan passed.\n"


def test_text_for_failed_run() -> None:
    expired = _info("2", "expired", reason="waiting on upstream", expires_on=date(2024, 6, 30))
    text = render_text(_result(new=(_info("1", "new"),), expired=(expired,)))

    assert text.startswith("Security scan failed.")
    assert "Found 1 non-allowlisted high/critical vulnerabilities:" in text
    assert "  - lodash@1 (critical): Prototype Pollution" in text
    assert "    URL: https://npmjs.com/advisories/1" in text
    assert "1 allowlist entries have expired:" in text
    assert "    Reason was: waiting on upstream" in text
    assert "    Expired on: 2024-06-30" in text
    assert "2. Or add entries to .audit-allowlist.json with proper justification" in text


def test_text_lists_allowed_and_expiring() -> None:
    allowed = _info("3", "allowed", reason="dev only", expires_on=date(2025, 1, 10))
    text = render_text(_result(allowed=(allowed,), expiring=(allowed,)), window_days=14)

    assert text.startswith("Security scan passed.")
    assert "1 allowlisted vulnerabilities found:" in text
    assert "    Reason: dev only" in text
    assert "    Expires: 2025-01-10" in text
    assert "will expire within 14 days:" in text
    assert "  - lodash@3 expires on 2025-01-10" in text
    assert "To fix this issue:" not in text


def test_text_uses_allowlist_name() -> None:
    text = render_text(_result(new=(_info("1", "new"),)), allowlist_name="security.json")

    assert "add entries to security.json" in text


def test_summary_for_clean_run() -> None:
    markdown = render_summary(_result())

    assert markdown.startswith("# npm audit allowlist summary")
    assert "Result: **passed**" in markdown
    assert "New: 0 | Expired: 0 | Allowed: 0 | Expiring soon: 0" in markdown
    assert "No high or critical vulnerabilities reported." in markdown
    assert "## " not in markdown


def test_summary_tables() -> None:
    allowed = _info("3", "allowed", package="semver", reason="dev | test only")
    markdown = render_summary(
        _result(new=(_info("1", "new", title="a|b"),), allowed=(allowed,))
    )

    assert "Result: **failed**" in markdown
    assert "## New vulnerabilities" in markdown
    assert "| lodash | [1](https://npmjs.com/advisories/1) | critical | a\\|b |" in markdown
    assert "## Allowlisted vulnerabilities" in markdown
    assert "| semver | [3](https://npmjs.com/advisories/3) | critical | Prototype Pollution " \
        "| dev \\| test only | never |" in markdown
    assert "## Expired allowlist entries" not in markdown
