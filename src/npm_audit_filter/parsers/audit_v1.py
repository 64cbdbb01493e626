"""Parse the npm v6 audit report (``advisories`` keyed by advisory id).

``pnpm audit --json`` emits the same shape.
"""

from __future__ import annotations

from typing import Any

from ..models.advisory import SEVERITIES, SOURCE_NPM_V6, Advisory, advisory_id

SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["advisories"],
    "properties": {
        "advisories": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["id", "module_name", "severity", "title", "url"],
                "properties": {
                    "id": {"type": ["integer", "string"], "minLength": 1},
                    "module_name": {"type": "string", "minLength": 1},
                    "severity": {"enum": list(SEVERITIES)},
                    "title": {"type": "string"},
                    "url": {"type": "string"},
                    "vulnerable_versions": {"type": "string"},
                },
            },
        },
    },
}


def parse(document: dict[str, Any]) -> list[Advisory]:
    """Return advisories in report order from a schema-valid v6 document."""
    advisories: list[Advisory] = []
    for raw in document["advisories"].values():
        advisories.append(
            Advisory(
                id=advisory_id(raw["id"]),
                package=raw["module_name"],
                severity=raw["severity"],
                title=raw["title"],
                url=raw["url"],
                vulnerable_versions=raw.get("vulnerable_versions") or "*",
                source=SOURCE_NPM_V6,
            )
        )
    return advisories
