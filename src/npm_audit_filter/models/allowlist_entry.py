"""Allowlist entry model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from collections.abc import Mapping
from typing import Any

from ..dates import format_date, parse_calendar_date


@dataclass(frozen=True)
class AllowlistEntry:
    """A reviewed exception letting one advisory pass the audit gate."""

    id: str
    package: str
    reason: str
    notes: str | None = None
    expires: date | None = None
    reviewed_on: date | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Allowlist entry id must be non-empty")
        if not self.package:
            raise ValueError("Allowlist entry package must be non-empty")
        if not self.reason:
            raise ValueError("Allowlist entry reason must be non-empty")

    @property
    def key(self) -> tuple[str, str]:
        return (self.id, self.package)

    def to_dict(self) -> dict[str, str]:
        data = {"id": self.id, "package": self.package, "reason": self.reason}
        if self.notes is not None:
            data["notes"] = self.notes
        if self.expires is not None:
            data["expires"] = self.expires.isoformat()
        if self.reviewed_on is not None:
            data["reviewedOn"] = self.reviewed_on.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AllowlistEntry:
        """Build an entry from an already schema-validated JSON object."""
        expires = data.get("expires")
        reviewed_on = data.get("reviewedOn")
        return cls(
            id=data["id"],
            package=data["package"],
            reason=data["reason"],
            notes=data.get("notes"),
            expires=parse_calendar_date(expires) if expires is not None else None,
            reviewed_on=parse_calendar_date(reviewed_on) if reviewed_on is not None else None,
        )

    def describe(self) -> str:
        expires = format_date(self.expires) or "never"
        return f"{self.package}@{self.id} (expires {expires})"
