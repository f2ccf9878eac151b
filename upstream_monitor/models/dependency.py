"""
Dependency profile models and their cache entry.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List


@dataclass
class Dependency:
    """One upstream API a consumer relies on."""

    api: str
    endpoints: List[str] = field(default_factory=list)
    critical: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'Dependency':
        endpoints = data.get('endpoints') or []
        if not isinstance(endpoints, list):
            raise TypeError(f"endpoints must be a list, got {type(endpoints).__name__}")
        return cls(
            api=str(data['api']),
            endpoints=[str(endpoint) for endpoint in endpoints],
            critical=bool(data.get('critical', False)),
        )

    def to_dict(self) -> dict:
        return {
            'api': self.api,
            'endpoints': list(self.endpoints),
            'critical': self.critical,
        }


@dataclass
class DependencyProfile:
    """What a consumer uses from which upstream APIs."""

    consumer: str
    purpose: str
    uses: List[Dependency] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'DependencyProfile':
        uses = data.get('uses') or []
        if not isinstance(uses, list):
            raise TypeError(f"uses must be a list, got {type(uses).__name__}")
        return cls(
            consumer=str(data['consumer']),
            purpose=str(data.get('purpose') or ''),
            uses=[Dependency.from_dict(item) for item in uses],
        )

    def to_dict(self) -> dict:
        return {
            'consumer': self.consumer,
            'purpose': self.purpose,
            'uses': [dependency.to_dict() for dependency in self.uses],
        }


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class CacheEntry:
    """A dependency profile together with the time it was computed."""

    profile: DependencyProfile
    timestamp: datetime
    fallback: bool = False

    def is_fresh(self, now: datetime, window: timedelta) -> bool:
        return now - self.timestamp < window

    @classmethod
    def from_dict(cls, data: dict) -> 'CacheEntry':
        return cls(
            profile=DependencyProfile.from_dict(data['profile']),
            timestamp=parse_timestamp(data['timestamp']),
            fallback=bool(data.get('fallback', False)),
        )

    def to_dict(self) -> dict:
        return {
            'profile': self.profile.to_dict(),
            'timestamp': self.timestamp.isoformat(),
            'fallback': self.fallback,
        }
