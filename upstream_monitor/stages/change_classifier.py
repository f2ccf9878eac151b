"""
Change Classifier - extracts API announcements from changed provider pages.
"""

import logging
from typing import List, Tuple

from upstream_monitor.models.change_set import ApiChange, ProviderChangeSet
from upstream_monitor.utils.llm_client import LLMClient


SYSTEM_PROMPT = """You are an API change researcher. Your job is to analyze web page content from API documentation or news pages and extract any announcements about API changes.

Focus on changes that would affect developers using these APIs:
- Deprecation notices (endpoints being removed, versions being sunset)
- Breaking changes (parameter changes, response format changes, authentication changes)
- New features (new endpoints, new parameters, new data available)
- Maintenance notices (scheduled downtime, migrations)

For each change you find, determine:
- Title: A short descriptive title
- Summary: What developers need to know
- Type: deprecation, breaking, new_feature, maintenance, or unknown
- Relevance: high (action required), medium (should review), low (informational)
- Date: When announced or when it takes effect (if mentioned)

If the page content doesn't contain any API-related changes or announcements, indicate that no changes were detected.

Respond with a JSON object in this exact format:
{
  "provider": "Provider Name",
  "changes": [
    {
      "title": "Change title",
      "summary": "What developers need to know",
      "type": "deprecation|breaking|new_feature|maintenance|unknown",
      "relevance": "high|medium|low",
      "sourceUrl": "URL of the page",
      "date": "2026-02-01 or null if not specified"
    }
  ],
  "noChangesDetected": false
}

If no changes are found, set "noChangesDetected": true and "changes": []."""


class ChangeClassifier:
    """Stage 1: turns changed page text into classified API changes."""

    def __init__(self, llm_client: LLMClient, content_limit: int = 15000):
        """
        Args:
            llm_client: Analysis service client
            content_limit: Maximum page characters sent for analysis
        """
        self.llm_client = llm_client
        self.content_limit = content_limit
        self.logger = logging.getLogger(self.__class__.__name__)

    def analyze_page(self, provider: str, url: str, content: str) -> ProviderChangeSet:
        """
        Analyze one changed page.

        Args:
            provider: Provider display name
            url: Page URL
            content: Normalized page text

        Returns:
            ProviderChangeSet for this page; empty with no_changes_detected
            set when the analysis fails
        """
        user_message = f"""Analyze this web page content from {provider} ({url}) for any API changes or announcements:

---
{content[:self.content_limit]}
---

Extract any API-related changes and return as JSON."""

        response = self.llm_client.call(SYSTEM_PROMPT, user_message)
        if not response.success:
            self.logger.error(f"Change analysis failed for {url} ({response.failure}): {response.error}")
            return ProviderChangeSet.empty(provider)

        try:
            raw_changes = response.data.get('changes') or []
            if not isinstance(raw_changes, list):
                raise TypeError(f"changes must be a list, got {type(raw_changes).__name__}")
            changes = [ApiChange.from_dict(item, default_url=url) for item in raw_changes]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self.logger.error(f"Malformed change analysis for {url}: {e}")
            return ProviderChangeSet.empty(provider)

        return ProviderChangeSet(
            provider=provider,
            changes=changes,
            no_changes_detected=bool(response.data.get('noChangesDetected')) or not changes,
        )

    def analyze_provider(self, provider: str, pages: List[Tuple[str, str]]) -> ProviderChangeSet:
        """
        Analyze every changed page of a provider and merge the results.

        Changes are deduplicated by exact title; the first occurrence wins.

        Args:
            provider: Provider display name
            pages: (url, content) pairs

        Returns:
            Merged ProviderChangeSet
        """
        unique = {}
        for url, content in pages:
            result = self.analyze_page(provider, url, content)
            for change in result.changes:
                unique.setdefault(change.title, change)

        changes = list(unique.values())
        self.logger.info(f"{provider}: {len(changes)} change(s) detected in {len(pages)} page(s)")
        return ProviderChangeSet(
            provider=provider,
            changes=changes,
            no_changes_detected=not changes,
        )
