"""npm-audit-filter core package.

Gates ``npm audit`` output against a reviewed allowlist. The analysis in
``core`` is pure and deterministic; ``cli`` wraps it with file access, the
audit subprocess and exit codes.
"""

from .core import analyze_audit_report, filter_vulnerabilities
from .errors import AuditFilterError
from .models import Advisory, AllowlistEntry, AnalysisResult, VulnerabilityInfo
from .parsers.audit_report import AuditReportParseError, parse_audit_report
from .validators.allowlist import AllowlistParseError, ValidationIssue, parse_allowlist

__all__ = [
    "Advisory",
    "AllowlistEntry",
    "AllowlistParseError",
    "AnalysisResult",
    "AuditFilterError",
    "AuditReportParseError",
    "ValidationIssue",
    "VulnerabilityInfo",
    "analyze_audit_report",
    "filter_vulnerabilities",
    "parse_allowlist",
    "parse_audit_report",
]
