"""
Change Record model.
"""

from dataclasses import dataclass
from typing import Optional


CHANGE_NEW = 'new'
CHANGE_MODIFIED = 'modified'
CHANGE_UNAVAILABLE = 'unavailable'


@dataclass
class ChangeRecord:
    """A page that appeared, changed or became unreachable during a check cycle."""

    provider_key: str
    provider_name: str
    url: str
    description: str
    change_type: str
    content: Optional[str] = None
    previous_hash: Optional[str] = None
    current_hash: Optional[str] = None
    previous_status: Optional[int] = None
    current_status: Optional[int] = None

    @property
    def has_content(self) -> bool:
        return self.content is not None

    def __str__(self) -> str:
        return (
            f"[{self.change_type.upper()}] {self.provider_name}: {self.description}\n"
            f"  URL: {self.url}"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'provider_key': self.provider_key,
            'provider_name': self.provider_name,
            'url': self.url,
            'description': self.description,
            'change_type': self.change_type,
            'content': self.content,
            'previous_hash': self.previous_hash,
            'current_hash': self.current_hash,
            'previous_status': self.previous_status,
            'current_status': self.current_status,
        }
