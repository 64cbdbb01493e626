"""Audit report parsers, one module per supported report variant."""

from __future__ import annotations

from .audit_report import (
    REPORT_PARSERS,
    VARIANT_NPM_V6,
    VARIANT_NPM_V7_PLUS,
    VARIANT_UNRECOGNIZED,
    AuditReport,
    AuditReportParseError,
    ReportParser,
    detect_variant,
    extract_payload,
    parse_audit_report,
)

__all__ = [
    "REPORT_PARSERS",
    "VARIANT_NPM_V6",
    "VARIANT_NPM_V7_PLUS",
    "VARIANT_UNRECOGNIZED",
    "AuditReport",
    "AuditReportParseError",
    "ReportParser",
    "detect_variant",
    "extract_payload",
    "parse_audit_report",
]
