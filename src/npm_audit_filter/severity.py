"""Severity gate: only high and critical advisories can fail an audit."""

from __future__ import annotations

from collections.abc import Iterable

from .models.advisory import SEVERITY_CRITICAL, SEVERITY_HIGH, Advisory

GATING_SEVERITIES = frozenset({SEVERITY_HIGH, SEVERITY_CRITICAL})


def is_gating(advisory: Advisory) -> bool:
    return advisory.severity in GATING_SEVERITIES


def filter_gating(advisories: Iterable[Advisory]) -> list[Advisory]:
    """Keep high/critical advisories in their original order; drop the rest."""
    return [advisory for advisory in advisories if is_gating(advisory)]
