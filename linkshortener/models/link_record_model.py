from dataclasses import dataclass, replace
from datetime import datetime, UTC
from typing import Any


@dataclass(frozen=True)
class LinkRecordModel:
    """Represent a short code to target URL mapping.

    Attributes:
        id (str):
            Opaque identifier assigned by the repository on insert.
            Empty until the record has been persisted.
        target (str):
            The destination URL that the short code resolves to.
        shortcode (str):
            The unique fixed-length identifier of the link.
        access_count (int):
            Number of successful resolutions/redirects.
        created_at (datetime):
            Creation timestamp (UTC). Never changes.
        updated_at (datetime):
            Last mutation timestamp (UTC). Refreshed on target updates and hits.

    Example:
        >>> link = LinkRecordModel.new(target='https://example.com', shortcode='abc123')
        >>> link.access_count
        0
        >>> link.created_at == link.updated_at
        True
        >>> link.with_target('https://example.org').target
        'https://example.org'
    """

    target: str
    shortcode: str
    id: str = ''
    access_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def new(cls, target: str, shortcode: str) -> 'LinkRecordModel':
        """Build a fresh, not yet persisted record stamped with the current time"""
        now = datetime.now(UTC)
        return cls(target=target, shortcode=shortcode, access_count=0, created_at=now, updated_at=now)

    def touched(self) -> datetime:
        """Return a refreshed `updated_at` that never goes back in time"""
        now = datetime.now(UTC)
        previous = self.updated_at or self.created_at
        return now if previous is None else max(now, previous)

    def with_target(self, target: str) -> 'LinkRecordModel':
        return replace(self, target=target, updated_at=self.touched())

    def with_hit(self) -> 'LinkRecordModel':
        return replace(self, access_count=self.access_count + 1, updated_at=self.touched())

    def to_dict(self) -> dict[str, Any]:
        """Serialize into a JSON-safe dictionary (ISO-8601 timestamps)"""
        return {
            'id': self.id,
            'target': self.target,
            'shortcode': self.shortcode,
            'access_count': self.access_count,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'LinkRecordModel':
        """Deserialize a dictionary produced by `to_dict()` (or a Redis hash)

        Raises:
            KeyError: If 'target' or 'shortcode' is missing.
            ValueError: If a timestamp or the access count is malformed.
        """
        created_at = data.get('created_at')
        updated_at = data.get('updated_at')
        return cls(
            id=str(data.get('id') or ''),
            target=data['target'],
            shortcode=data['shortcode'],
            access_count=int(data.get('access_count') or 0),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )
