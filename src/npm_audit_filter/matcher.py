"""Exact ``(id, package)`` lookup of advisories in the allowlist."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable, Mapping

from .models.advisory import Advisory
from .models.allowlist_entry import AllowlistEntry


@dataclass(frozen=True)
class AllowlistIndex:
    """Allowlist entries keyed by ``(id, package)``.

    Matching is case-sensitive. When several entries share a key, the first in
    allowlist order is used.
    """

    entries: Mapping[tuple[str, str], AllowlistEntry]

    @classmethod
    def from_entries(cls, entries: Iterable[AllowlistEntry]) -> AllowlistIndex:
        index: dict[tuple[str, str], AllowlistEntry] = {}
        for entry in entries:
            index.setdefault(entry.key, entry)
        return cls(entries=index)

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, advisory: Advisory) -> AllowlistEntry | None:
        return self.entries.get((str(advisory.id), advisory.package))
