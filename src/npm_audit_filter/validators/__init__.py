"""Input validators."""

from __future__ import annotations

from .allowlist import (
    ALLOWLIST_SCHEMA,
    AllowlistParseError,
    ValidationIssue,
    parse_allowlist,
    validate_allowlist_document,
)

__all__ = [
    "ALLOWLIST_SCHEMA",
    "AllowlistParseError",
    "ValidationIssue",
    "parse_allowlist",
    "validate_allowlist_document",
]
