"""Classification output models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..dates import format_date
from .advisory import Advisory
from .allowlist_entry import AllowlistEntry

STATUS_NEW = "new"
STATUS_EXPIRED = "expired"
STATUS_ALLOWED = "allowed"

_VALID_STATUSES = {STATUS_NEW, STATUS_EXPIRED, STATUS_ALLOWED}


@dataclass(frozen=True)
class VulnerabilityInfo:
    """An advisory together with its allowlist decision."""

    id: str
    package: str
    severity: str
    title: str
    url: str
    status: str
    reason: str | None = None
    expires_on: date | None = None

    def __post_init__(self) -> None:
        if self.status not in _VALID_STATUSES:
            raise ValueError(f"Invalid status: {self.status}")

    def to_dict(self) -> dict[str, str]:
        data = {
            "id": self.id,
            "package": self.package,
            "severity": self.severity,
            "title": self.title,
            "url": self.url,
            "status": self.status,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        expires_on = format_date(self.expires_on)
        if expires_on is not None:
            data["expiresOn"] = expires_on
        return data

    @classmethod
    def from_advisory(
        cls,
        advisory: Advisory,
        status: str,
        entry: AllowlistEntry | None = None,
    ) -> VulnerabilityInfo:
        return cls(
            id=advisory.id,
            package=advisory.package,
            severity=advisory.severity,
            title=advisory.title,
            url=advisory.url,
            status=status,
            reason=entry.reason if entry is not None else None,
            expires_on=entry.expires if entry is not None else None,
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Final verdict and categorized findings for one audit run."""

    vulnerabilities: tuple[VulnerabilityInfo, ...]
    allowed_vulnerabilities: tuple[VulnerabilityInfo, ...]
    expired_allowlist_entries: tuple[VulnerabilityInfo, ...]
    expiring_entries: tuple[VulnerabilityInfo, ...]
    is_successful: bool

    def to_dict(self) -> dict[str, object]:
        return {
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
            "allowedVulnerabilities": [v.to_dict() for v in self.allowed_vulnerabilities],
            "expiredAllowlistEntries": [v.to_dict() for v in self.expired_allowlist_entries],
            "expiringEntries": [v.to_dict() for v in self.expiring_entries],
            "isSuccessful": self.is_successful,
        }

    @property
    def totals(self) -> dict[str, int]:
        return {
            "new": len(self.vulnerabilities),
            "allowed": len(self.allowed_vulnerabilities),
            "expired": len(self.expired_allowlist_entries),
            "expiring": len(self.expiring_entries),
        }
