"""Shared builders for npm audit payloads and allowlist documents."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

import pytest

REFERENCE_DATE = date(2025, 1, 1)

_SEVERITIES = ("info", "low", "moderate", "high", "critical")


def _metadata(severities: Iterable[str]) -> dict[str, Any]:
    counts = {severity: 0 for severity in _SEVERITIES}
    for severity in severities:
        counts[severity] = counts.get(severity, 0) + 1
    counts["total"] = sum(counts.values())
    return {"vulnerabilities": counts}


@pytest.fixture
def reference_date() -> date:
    return REFERENCE_DATE


@pytest.fixture
def npm_v6_report() -> Callable[..., str]:
    """Return a builder for ``npm audit --json`` output from npm 6."""

    def build(*advisories: dict[str, Any]) -> str:
        body: dict[str, Any] = {}
        for adv in advisories:
            adv_id = adv.get("id", 1001)
            body[str(adv_id)] = {
                "id": adv_id,
                "module_name": adv.get("package", "lodash"),
                "severity": adv.get("severity", "critical"),
                "title": adv.get("title", f"Advisory {adv_id}"),
                "url": adv.get("url", f"https://npmjs.com/advisories/{adv_id}"),
                "vulnerable_versions": adv.get("vulnerable_versions", "<4.17.21"),
            }
        severities = [a.get("severity", "critical") for a in advisories]
        return json.dumps({"advisories": body, "metadata": _metadata(severities)})

    return build


@pytest.fixture
def npm_v7_report() -> Callable[..., str]:
    """Return a builder for ``npm audit --json`` output from npm 7 and later."""

    def build(*advisories: dict[str, Any], transitive: dict[str, str] | None = None) -> str:
        vulnerabilities: dict[str, Any] = {}
        for adv in advisories:
            package = adv.get("package", "lodash")
            source = adv.get("id", 1001)
            severity = adv.get("severity", "critical")
            entry = vulnerabilities.setdefault(
                package,
                {
                    "name": package,
                    "severity": severity,
                    "isDirect": True,
                    "via": [],
                    "effects": [],
                    "range": "<4.17.21",
                    "nodes": [f"node_modules/{package}"],
                    "fixAvailable": True,
                },
            )
            entry["via"].append(
                {
                    "source": source,
                    "name": package,
                    "dependency": package,
                    "title": adv.get("title", f"Advisory {source}"),
                    "url": adv.get("url", f"https://github.com/advisories/GHSA-{source}"),
                    "severity": severity,
                    "cwe": ["CWE-1321"],
                    "cvss": {"score": 9.8, "vectorString": None},
                    "range": adv.get("range", "<4.17.21"),
                }
            )

        # Packages only affected through another vulnerable package
        for package, via in (transitive or {}).items():
            vulnerabilities[package] = {
                "name": package,
                "severity": "high",
                "isDirect": False,
                "via": [via],
                "effects": [],
                "range": "*",
                "nodes": [f"node_modules/{package}"],
                "fixAvailable": False,
            }

        severities = [a.get("severity", "critical") for a in advisories]
        return json.dumps(
            {
                "auditReportVersion": 2,
                "vulnerabilities": vulnerabilities,
                "metadata": _metadata(severities),
            }
        )

    return build


@pytest.fixture
def allowlist_json() -> Callable[..., str]:
    """Return a builder for allowlist documents."""

    def build(*entries: dict[str, Any]) -> str:
        return json.dumps(list(entries))

    return build
