"""Data models for audit findings, allowlist entries and analysis results."""

from __future__ import annotations

from .advisory import Advisory
from .allowlist_entry import AllowlistEntry
from .result import AnalysisResult, VulnerabilityInfo

__all__ = [
    "Advisory",
    "AllowlistEntry",
    "AnalysisResult",
    "VulnerabilityInfo",
]
