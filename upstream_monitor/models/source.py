"""
Monitored source models.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class WebPage:
    """A single monitored page of a provider."""

    url: str
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> 'WebPage':
        """Create WebPage from configuration dictionary."""
        return cls(
            url=data['url'],
            description=data.get('description', ''),
        )

    def to_dict(self) -> dict:
        return {'url': self.url, 'description': self.description}


@dataclass
class ProviderSource:
    """Represents an upstream API provider and the pages watched for it."""

    key: str
    name: str
    web_pages: List[WebPage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, key: str, data: dict) -> 'ProviderSource':
        """Create ProviderSource from configuration dictionary."""
        return cls(
            key=key,
            name=data.get('name', key),
            web_pages=[WebPage.from_dict(page) for page in data.get('web_pages') or []],
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'web_pages': [page.to_dict() for page in self.web_pages],
        }
