"""Data models for security advisories."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

PERSISTED_FIELDS = ("ghsa_id", "summary", "html_url", "published_at", "severity")


@dataclass
class Advisory:
    """A repository security advisory, reduced to the fields we keep."""

    ghsa_id: str
    summary: Optional[str] = None
    html_url: Optional[str] = None
    published_at: Optional[str] = None  # ISO-8601
    severity: Optional[str] = None  # critical | high | medium | low | unknown

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Advisory":
        """
        Build an advisory from an API or snapshot record, ignoring extra keys.

        Raises:
            ValueError: The record has no string ``ghsa_id``
        """
        ghsa_id = data.get("ghsa_id")
        if not isinstance(ghsa_id, str) or not ghsa_id:
            raise ValueError(f"Advisory record without a valid ghsa_id: {ghsa_id!r}")
        return cls(
            ghsa_id=ghsa_id,
            summary=data.get("summary"),
            html_url=data.get("html_url"),
            published_at=data.get("published_at"),
            severity=data.get("severity"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in PERSISTED_FIELDS}


@dataclass
class AdvisoryState:
    """Snapshot of advisories seen on the previous run."""

    advisories: List[Advisory] = field(default_factory=list)
    last_checked: Optional[str] = None

    @classmethod
    def empty(cls) -> "AdvisoryState":
        return cls()

    @property
    def ids(self) -> Set[str]:
        return {adv.ghsa_id for adv in self.advisories}
