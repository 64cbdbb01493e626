"""Audit report parsing with per-variant handlers.

Captured ``npm audit --json`` output is decoded, its report variant detected,
validated against that variant's schema and normalised into ``Advisory``
records keyed by ``(id, package)``. The registry maps each known variant to
its parser; adding a report format means adding a module and registering it.

The process exit status of the audit command is deliberately not an input
here: npm exits non-zero whenever it finds vulnerabilities, so only the
payload decides whether a report is usable.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from jsonschema import Draft202012Validator

from ..errors import AuditFilterError
from ..models.advisory import SOURCE_NPM_V6, SOURCE_NPM_V7_PLUS, Advisory
from . import audit_v1, audit_v2

_LOG = logging.getLogger(__name__)

VARIANT_NPM_V6 = SOURCE_NPM_V6
VARIANT_NPM_V7_PLUS = SOURCE_NPM_V7_PLUS
VARIANT_UNRECOGNIZED = "unrecognized"

_MAX_REPORTED_ERRORS = 10
_OBJECT_START = re.compile(r"^\s*\{", re.MULTILINE)

AdvisoryKey: TypeAlias = tuple[str, str]
ParseFunction: TypeAlias = Callable[[dict[str, Any]], list[Advisory]]


class AuditReportParseError(AuditFilterError):
    """Raised when audit output is missing, malformed or of an unknown shape."""


@dataclass(slots=True, frozen=True)
class ReportParser:
    """Binds a report variant to its schema validator and parse function."""

    variant: str
    display_name: str
    validator: Draft202012Validator
    parse: ParseFunction


@dataclass(frozen=True)
class AuditReport:
    """Normalised audit report: advisories keyed by ``(id, package)``."""

    variant: str
    advisories: Mapping[AdvisoryKey, Advisory]

    def __len__(self) -> int:
        return len(self.advisories)

    def __iter__(self):
        return iter(self.advisories.values())


REPORT_PARSERS: dict[str, ReportParser] = {
    VARIANT_NPM_V7_PLUS: ReportParser(
        variant=VARIANT_NPM_V7_PLUS,
        display_name="npm v7+ audit report",
        validator=Draft202012Validator(audit_v2.SCHEMA),
        parse=audit_v2.parse,
    ),
    VARIANT_NPM_V6: ReportParser(
        variant=VARIANT_NPM_V6,
        display_name="npm v6 audit report",
        validator=Draft202012Validator(audit_v1.SCHEMA),
        parse=audit_v1.parse,
    ),
}


def _decode_object(text: str) -> Any:
    stripped = text.strip()
    if not stripped:
        raise AuditReportParseError("Audit output is empty")

    try:
        return json.loads(stripped)
    except json.JSONDecodeError as exc:
        first_error = exc

    # Captured output may carry warnings or banners ahead of the JSON body
    decoder = json.JSONDecoder()
    for match in _OBJECT_START.finditer(stripped):
        start = match.end() - 1
        try:
            document, _ = decoder.raw_decode(stripped, start)
        except json.JSONDecodeError:
            continue
        _LOG.debug("Skipped %d characters of non-JSON audit output", start)
        return document

    raise AuditReportParseError(
        f"Failed to parse audit output as JSON: {first_error.msg} "
        f"(line {first_error.lineno}, column {first_error.colno})"
    ) from first_error


def extract_payload(text: str) -> dict[str, Any]:
    """Return the JSON object embedded in captured audit output."""
    document = _decode_object(text)
    if not isinstance(document, dict):
        kind = "array" if isinstance(document, list) else type(document).__name__
        raise AuditReportParseError(f"Audit output must be a JSON object, got {kind}")
    return document


def detect_variant(document: Mapping[str, Any]) -> str:
    """Return the report variant tag for a decoded audit document."""
    if "auditReportVersion" in document:
        if document["auditReportVersion"] == 2:
            return VARIANT_NPM_V7_PLUS
        return VARIANT_UNRECOGNIZED
    if "advisories" in document:
        return VARIANT_NPM_V6
    if "vulnerabilities" in document:
        return VARIANT_NPM_V7_PLUS
    return VARIANT_UNRECOGNIZED


def _error_envelope_message(document: Mapping[str, Any]) -> str | None:
    error = document.get("error")
    if not isinstance(error, dict):
        return None
    code = error.get("code") or "UNKNOWN"
    summary = str(error.get("summary") or "").strip() or "no summary provided"
    return f"npm audit reported an error ({code}): {summary}"


def _format_schema_errors(parser: ReportParser, document: dict[str, Any]) -> str | None:
    errors = sorted(parser.validator.iter_errors(document), key=lambda e: e.json_path)
    if not errors:
        return None
    lines = [f"- {error.json_path}: {error.message}" for error in errors[:_MAX_REPORTED_ERRORS]]
    if len(errors) > _MAX_REPORTED_ERRORS:
        lines.append(f"- ... {len(errors) - _MAX_REPORTED_ERRORS} more")
    return "\n".join(lines)


def parse_audit_report(text: str) -> AuditReport:
    """Parse captured audit output into a normalised AuditReport.

    Raises:
        AuditReportParseError: the output is empty, not JSON, an npm error
            envelope, an unrecognized shape, or violates its variant's schema.
    """
    _LOG.debug("Parsing audit output (%d characters)", len(text))
    document = extract_payload(text)

    envelope = _error_envelope_message(document)
    if envelope is not None:
        raise AuditReportParseError(envelope)

    variant = detect_variant(document)
    parser = REPORT_PARSERS.get(variant)
    if parser is None:
        fields = ", ".join(sorted(str(key) for key in document)) or "none"
        raise AuditReportParseError(
            "Audit output does not match any supported report format "
            f"(top-level fields: {fields}). Supported: "
            + ", ".join(p.display_name for p in REPORT_PARSERS.values())
        )

    problems = _format_schema_errors(parser, document)
    if problems is not None:
        raise AuditReportParseError(f"Invalid {parser.display_name}:\n{problems}")

    advisories: dict[AdvisoryKey, Advisory] = {}
    for advisory in parser.parse(document):
        advisories.setdefault(advisory.key, advisory)

    _LOG.debug("Parsed %d advisories from %s", len(advisories), parser.display_name)
    return AuditReport(variant=variant, advisories=advisories)
