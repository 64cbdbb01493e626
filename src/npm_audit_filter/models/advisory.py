"""Advisory model for normalised audit findings."""

from __future__ import annotations

from dataclasses import dataclass

SEVERITY_INFO = "info"
SEVERITY_LOW = "low"
SEVERITY_MODERATE = "moderate"
SEVERITY_HIGH = "high"
SEVERITY_CRITICAL = "critical"

SEVERITIES = (
    SEVERITY_INFO,
    SEVERITY_LOW,
    SEVERITY_MODERATE,
    SEVERITY_HIGH,
    SEVERITY_CRITICAL,
)

SOURCE_NPM_V6 = "npm-v6"
SOURCE_NPM_V7_PLUS = "npm-v7+"

_VALID_SOURCES = {SOURCE_NPM_V6, SOURCE_NPM_V7_PLUS}


@dataclass(frozen=True)
class Advisory:
    """A single vulnerability finding reported against one package."""

    id: str
    package: str
    severity: str
    title: str
    url: str
    vulnerable_versions: str = "*"
    source: str = SOURCE_NPM_V6

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Advisory id must be non-empty")
        if not self.package:
            raise ValueError("Advisory package must be non-empty")
        if self.severity not in SEVERITIES:
            raise ValueError(f"Invalid severity: {self.severity}")
        if self.source not in _VALID_SOURCES:
            raise ValueError(f"Invalid advisory source: {self.source}")

    @property
    def key(self) -> tuple[str, str]:
        return (self.id, self.package)


def advisory_id(value: int | float | str) -> str:
    """Return the string form of a report id; ``1001.0`` becomes ``"1001"``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
