"""Parse the npm v7+ audit report (``auditReportVersion: 2``).

Vulnerabilities are keyed by package name. Each object in a package's ``via``
list is an advisory affecting that package; string entries only point at
another vulnerable package and carry no advisory of their own.
"""

from __future__ import annotations

from typing import Any

from ..models.advisory import SEVERITIES, SOURCE_NPM_V7_PLUS, Advisory, advisory_id

SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["vulnerabilities"],
    "properties": {
        "auditReportVersion": {"const": 2},
        "vulnerabilities": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["severity", "via"],
                "properties": {
                    "name": {"type": "string"},
                    "severity": {"enum": list(SEVERITIES)},
                    "range": {"type": "string"},
                    "via": {
                        "type": "array",
                        "items": {
                            "anyOf": [
                                {"type": "string"},
                                {"$ref": "#/$defs/viaAdvisory"},
                            ]
                        },
                    },
                },
            },
        },
    },
    "$defs": {
        "viaAdvisory": {
            "type": "object",
            "required": ["source", "title", "url", "severity"],
            "properties": {
                "source": {"type": ["integer", "string"], "minLength": 1},
                "name": {"type": "string"},
                "title": {"type": "string"},
                "url": {"type": "string"},
                "severity": {"enum": list(SEVERITIES)},
                "range": {"type": "string"},
            },
        },
    },
}


def parse(document: dict[str, Any]) -> list[Advisory]:
    """Return advisories in report order from a schema-valid v7+ document."""
    advisories: list[Advisory] = []
    for package, vulnerability in document["vulnerabilities"].items():
        if not package:
            continue
        for via in vulnerability["via"]:
            if isinstance(via, str):
                continue
            advisories.append(
                Advisory(
                    id=advisory_id(via["source"]),
                    package=package,
                    severity=via["severity"],
                    title=via["title"],
                    url=via["url"],
                    vulnerable_versions=via.get("range") or "*",
                    source=SOURCE_NPM_V7_PLUS,
                )
            )
    return advisories
