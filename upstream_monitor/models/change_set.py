"""
API change models produced by the change classifier.
"""

from dataclasses import dataclass, field
from typing import List, Optional


CHANGE_TYPES = ('deprecation', 'breaking', 'new_feature', 'maintenance', 'unknown')
RELEVANCE_LEVELS = ('high', 'medium', 'low')


@dataclass
class ApiChange:
    """A single API announcement extracted from a provider page."""

    title: str
    summary: str
    type: str = 'unknown'
    relevance: str = 'low'
    source_url: str = ""
    date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict, default_url: str = "") -> 'ApiChange':
        """
        Build an ApiChange from analysis output.

        Unknown types and relevance levels are coerced rather than rejected,
        a missing title is not.
        """
        title = data['title']
        if not isinstance(title, str) or not title.strip():
            raise ValueError("change entry has no title")

        change_type = data.get('type')
        if change_type not in CHANGE_TYPES:
            change_type = 'unknown'

        relevance = data.get('relevance')
        if relevance not in RELEVANCE_LEVELS:
            relevance = 'low'

        return cls(
            title=title,
            summary=str(data.get('summary') or ''),
            type=change_type,
            relevance=relevance,
            source_url=data.get('sourceUrl') or data.get('source_url') or default_url,
            date=data.get('date') or None,
        )

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'summary': self.summary,
            'type': self.type,
            'relevance': self.relevance,
            'source_url': self.source_url,
            'date': self.date,
        }


@dataclass
class ProviderChangeSet:
    """All API changes found for one provider in the current cycle."""

    provider: str
    changes: List[ApiChange] = field(default_factory=list)
    no_changes_detected: bool = True

    @classmethod
    def empty(cls, provider: str) -> 'ProviderChangeSet':
        return cls(provider=provider, changes=[], no_changes_detected=True)

    def to_dict(self) -> dict:
        return {
            'provider': self.provider,
            'changes': [change.to_dict() for change in self.changes],
            'no_changes_detected': self.no_changes_detected,
        }
