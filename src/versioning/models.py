"""Data models for version records and their lookup index."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional


@dataclass
class VersionRecord:
    """A persisted package version, as far as ordering is concerned."""
    normalized_version: str
    version: Optional[str] = None  # display form, e.g. "v1.0.0" or "dev-main"
    extra: Dict[str, Any] = field(default_factory=dict)
    released_at: Optional[datetime] = None
    is_default_branch: bool = False

    @property
    def branch_aliases(self) -> Dict[str, str]:
        aliases = (self.extra or {}).get("branch-alias")
        return aliases if isinstance(aliases, dict) else {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VersionRecord":
        """Build a record from a JSON-style mapping.

        ``released_at`` accepts an ISO 8601 string (a trailing ``Z`` is
        understood) or a datetime.
        """
        released = data.get("released_at")
        if isinstance(released, str):
            released = datetime.fromisoformat(released.replace("Z", "+00:00"))
        normalized = data.get("normalized_version") or data.get("version")
        if not normalized:
            raise ValueError("version record needs a normalized_version")
        return cls(
            normalized_version=str(normalized),
            version=data.get("version"),
            extra=data.get("extra") or {},
            released_at=released,
            is_default_branch=bool(data.get("is_default_branch", False)),
        )


class VersionIndex:
    """Case-insensitive lookup of records by normalized version.

    Built once when the version collection is finalized; later lookups never
    rebuild it.
    """

    def __init__(self, records: Iterable[VersionRecord]):
        self._records: List[VersionRecord] = list(records)
        self._by_version: Dict[str, VersionRecord] = {
            r.normalized_version.lower(): r for r in self._records
        }

    def get(self, normalized_version: str) -> Optional[VersionRecord]:
        return self._by_version.get(normalized_version.lower())

    def __contains__(self, normalized_version: str) -> bool:
        return normalized_version.lower() in self._by_version

    def __iter__(self) -> Iterator[VersionRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
