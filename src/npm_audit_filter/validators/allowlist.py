"""Allowlist schema validation.

The allowlist is a JSON array of reviewed exceptions. Its shape is declared in
``ALLOWLIST_SCHEMA`` and checked with a draft 2020-12 validator; every
violation is collected as a ``ValidationIssue`` with a slash-separated field
path, so authors see all typos in one run.

Also usable as a CLI to check an allowlist file before committing it.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Iterable
from typing import Any

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import ValidationError

from ..dates import parse_calendar_date
from ..errors import AuditFilterError
from ..models.allowlist_entry import AllowlistEntry

_LOG = logging.getLogger(__name__)

_DEFAULT_INPUT = Path(".audit-allowlist.json")

ROOT_PATH = "<root>"

ALLOWLIST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "npm audit allowlist",
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "string", "minLength": 1},
            "package": {"type": "string", "minLength": 1},
            "reason": {"type": "string", "minLength": 1},
            "notes": {"type": "string"},
            "expires": {"type": "string", "format": "calendar-date"},
            "reviewedOn": {"type": "string", "format": "calendar-date"},
        },
        "required": ["id", "package", "reason"],
        "additionalProperties": False,
    },
}

_FORMAT_CHECKER = FormatChecker(formats=())


@_FORMAT_CHECKER.checks("calendar-date", raises=ValueError)
def _is_calendar_date(instance: object) -> bool:
    if not isinstance(instance, str):
        return True
    parse_calendar_date(instance)
    return True


_VALIDATOR = Draft202012Validator(ALLOWLIST_SCHEMA, format_checker=_FORMAT_CHECKER)


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found in the allowlist document."""

    field_path: str
    message: str

    def __str__(self) -> str:
        return f"{self.field_path}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"fieldPath": self.field_path, "message": self.message}


class AllowlistParseError(AuditFilterError):
    """Raised when the allowlist is not valid JSON or violates the schema."""

    def __init__(self, issues: Iterable[ValidationIssue]) -> None:
        self.issues = tuple(issues)
        lines = "\n".join(f"- {issue}" for issue in self.issues)
        super().__init__(f"Allowlist is invalid ({len(self.issues)} issue(s)):\n{lines}")


def _pointer(parts: Iterable[object]) -> str:
    segments = [str(p) for p in parts]
    if not segments:
        return ROOT_PATH
    return "/" + "/".join(segments)


def _issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    path = list(error.absolute_path)
    keyword = error.validator

    if keyword == "required" and isinstance(error.instance, dict):
        missing = [name for name in error.validator_value if name not in error.instance]
        return [ValidationIssue(_pointer([*path, name]), "is required") for name in missing]

    if keyword == "additionalProperties" and isinstance(error.instance, dict):
        known = set(error.schema.get("properties", {}))
        unexpected = [name for name in error.instance if name not in known]
        return [
            ValidationIssue(_pointer([*path, name]), "is not an allowed property")
            for name in unexpected
        ]

    if keyword == "minLength":
        return [ValidationIssue(_pointer(path), "must not be empty")]

    if keyword == "type":
        if not path and error.validator_value == "array":
            return [ValidationIssue(ROOT_PATH, "allowlist must be a JSON array of entries")]
        return [ValidationIssue(_pointer(path), f"must be of type {error.validator_value}")]

    if keyword == "format":
        return [
            ValidationIssue(
                _pointer(path),
                f"'{error.instance}' is not a valid date (expected YYYY-MM-DD)",
            )
        ]

    return [ValidationIssue(_pointer(path), error.message)]


def validate_allowlist_document(document: Any) -> list[ValidationIssue]:
    """Return every schema violation in a decoded allowlist document."""
    errors = sorted(_VALIDATOR.iter_errors(document), key=lambda e: tuple(e.absolute_path))
    issues: list[ValidationIssue] = []
    for error in errors:
        issues.extend(_issues_from_error(error))
    # "required" errors for the same entry report the same missing fields
    return list(dict.fromkeys(issues))


def _warn_duplicates(entries: Iterable[AllowlistEntry]) -> None:
    first_seen: dict[tuple[str, str], int] = {}
    for index, entry in enumerate(entries):
        if entry.key in first_seen:
            _LOG.warning(
                "Duplicate allowlist entry for %s@%s at index %d; using entry at index %d",
                entry.package,
                entry.id,
                index,
                first_seen[entry.key],
            )
            continue
        first_seen[entry.key] = index


def parse_allowlist(text: str | None) -> tuple[AllowlistEntry, ...]:
    """Parse and validate allowlist JSON.

    ``None`` means no allowlist exists and yields an empty allowlist, so every
    high/critical advisory is treated as new. Anything else must be a valid
    document: a malformed allowlist raises AllowlistParseError and is never
    treated as empty.
    """
    if text is None:
        _LOG.info("No allowlist provided; all high/critical vulnerabilities will fail the audit")
        return ()

    _LOG.debug("Parsing allowlist (%d characters)", len(text))

    try:
        document = json.loads(text.lstrip("\ufeff"))
    except json.JSONDecodeError as exc:
        raise AllowlistParseError(
            [
                ValidationIssue(
                    ROOT_PATH,
                    f"invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
                )
            ]
        ) from exc

    issues = validate_allowlist_document(document)
    if issues:
        _LOG.debug("Allowlist failed validation with %d issue(s)", len(issues))
        raise AllowlistParseError(issues)

    entries = tuple(AllowlistEntry.from_dict(item) for item in document)
    _warn_duplicates(entries)
    _LOG.debug("Loaded %d allowlist entries", len(entries))
    return entries


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate an npm audit allowlist file.")
    parser.add_argument(
        "--input",
        type=Path,
        default=_DEFAULT_INPUT,
        help="Path to the allowlist JSON to validate",
    )
    parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the normalised entries (dates as YYYY-MM-DD) instead of a listing",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        text = args.input.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"ERROR: Failed to read {args.input}: {exc}", file=sys.stderr)
        return 1

    try:
        entries = parse_allowlist(text)
    except AllowlistParseError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.as_json:
        print(json.dumps([entry.to_dict() for entry in entries], indent=2))
        return 0

    print(f"Allowlist {args.input} is valid ({len(entries)} entries)")
    for entry in entries:
        print(f"  - {entry.describe()}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
