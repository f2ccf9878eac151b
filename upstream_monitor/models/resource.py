"""
Resource model - last known state of a monitored URL.
"""

from dataclasses import dataclass


# Status recorded when a page could not be fetched at all
UNREACHABLE_STATUS = 0


@dataclass(frozen=True)
class Resource:
    """Last known fingerprint and HTTP status of a monitored URL."""

    url: str
    hash: str
    status: int
    last_checked: str
    description: str = ""

    @property
    def is_reachable(self) -> bool:
        return self.status != UNREACHABLE_STATUS

    @classmethod
    def from_dict(cls, url: str, data: dict) -> 'Resource':
        return cls(
            url=url,
            hash=str(data.get('hash', '')),
            status=int(data.get('status', UNREACHABLE_STATUS)),
            last_checked=str(data.get('last_checked', '')),
            description=str(data.get('description') or ''),
        )

    def to_dict(self) -> dict:
        return {
            'hash': self.hash,
            'status': self.status,
            'last_checked': self.last_checked,
            'description': self.description,
        }

    def __str__(self) -> str:
        state = f"HTTP {self.status}" if self.is_reachable else "UNREACHABLE"
        return f"[{state}] {self.url} ({self.hash or 'no hash'})"
