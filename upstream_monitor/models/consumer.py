"""
Consumer models supplied by discovery.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class UpstreamApi:
    """An external API base URL found in a consumer's source code."""

    name: str
    base_url: str
    source: str = ""


@dataclass
class Consumer:
    """A project whose behavior depends on upstream APIs."""

    name: str
    path: str
    use_case: str = ""
    target_audience: str = ""
    tools: List[str] = field(default_factory=list)
    upstream_apis: List[UpstreamApi] = field(default_factory=list)

    def unique_apis(self) -> List[UpstreamApi]:
        """Upstream APIs with one entry per base URL, first seen wins."""
        seen = {}
        for api in self.upstream_apis:
            seen.setdefault(api.base_url, api)
        return list(seen.values())


@dataclass
class UsageSnapshot:
    """Documentation and code excerpts showing how a consumer uses its APIs."""

    documentation: str = ""
    source_snippets: List[str] = field(default_factory=list)
