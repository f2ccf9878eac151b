"""
Check State model - the persisted aggregate.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from upstream_monitor.models.dependency import CacheEntry
from upstream_monitor.models.resource import Resource


@dataclass
class CheckState:
    """Resources per provider, the dependency cache and the last run time."""

    sources: Dict[str, Dict[str, Resource]] = field(default_factory=dict)
    dependency_cache: Dict[str, CacheEntry] = field(default_factory=dict)
    last_check: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'CheckState':
        """
        Rebuild state from its JSON representation.

        Raises:
            KeyError, TypeError, ValueError, AttributeError: if the data does
            not have the expected shape
        """
        if not isinstance(data, dict):
            raise TypeError(f"state must be an object, got {type(data).__name__}")

        sources = {
            provider_key: {
                url: Resource.from_dict(url, entry)
                for url, entry in pages.items()
            }
            for provider_key, pages in (data.get('sources') or {}).items()
        }
        cache = {
            consumer: CacheEntry.from_dict(entry)
            for consumer, entry in (data.get('dependency_cache') or {}).items()
        }
        return cls(
            sources=sources,
            dependency_cache=cache,
            last_check=data.get('last_check'),
        )

    def to_dict(self) -> dict:
        return {
            'sources': {
                provider_key: {url: resource.to_dict() for url, resource in pages.items()}
                for provider_key, pages in self.sources.items()
            },
            'dependency_cache': {
                consumer: entry.to_dict()
                for consumer, entry in self.dependency_cache.items()
            },
            'last_check': self.last_check,
        }
