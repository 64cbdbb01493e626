"""Base error shared by every failure that stops an audit run."""

from __future__ import annotations


class AuditFilterError(RuntimeError):
    """Raised when the audit gate cannot produce a verdict.

    Subclasses distinguish bad input (allowlist, audit payload, settings) from
    boundary failures (fetching the allowlist, running the audit command). A
    verdict that fails the gate is never an exception.
    """
