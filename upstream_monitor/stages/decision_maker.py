"""
Decision Maker - matches API changes against consumer dependencies.
"""

import logging
from typing import List

from upstream_monitor.models.change_set import ProviderChangeSet
from upstream_monitor.models.decision import (
    ACTION_NONE,
    ACTION_NOTIFY,
    NO_ACTION_NEEDED,
    Decision,
)
from upstream_monitor.models.dependency import DependencyProfile
from upstream_monitor.utils.llm_client import LLMClient


SYSTEM_PROMPT = """You are a software engineer reviewing API changes to determine their impact on the services that depend on those APIs.

Given:
1. API changes detected from provider documentation/news pages
2. Service dependencies (what APIs each service uses)

Your job is to:
1. Match API changes to affected services
2. Determine if any action is needed
3. Provide a clear summary and recommendation

Action levels:
- "urgent": Breaking changes or deprecations that require immediate attention
- "notify": Changes worth knowing about but not immediately critical
- "none": No actionable changes (either no changes detected, or changes don't affect any service)

Consider:
- Is the change relevant to any service's dependencies?
- How critical is the affected API to the service?
- What's the timeline for action (if any)?

Respond with a JSON object in this exact format:
{
  "action": "urgent|notify|none",
  "summary": "One-sentence summary of the situation",
  "affectedConsumers": ["service-name-1", "service-name-2"],
  "recommendedAction": "What the developer should do (or 'No action needed')",
  "details": [
    {
      "consumer": "service-name",
      "changes": ["Brief description of relevant change"],
      "impact": "high|medium|low"
    }
  ]
}

If no changes affect any service, set action to "none" with an appropriate summary."""


def no_changes_decision() -> Decision:
    return Decision(
        action=ACTION_NONE,
        summary='No API changes detected in monitored sources.',
        affected_consumers=[],
        recommended_action=NO_ACTION_NEEDED,
        details=[],
    )


def failed_analysis_decision(change_count: int) -> Decision:
    """Decision used when the analysis cannot be completed; always notifies."""
    return Decision(
        action=ACTION_NOTIFY,
        summary=(
            f"{change_count} API change(s) detected but automated analysis failed. "
            "Manual review recommended."
        ),
        affected_consumers=[],
        recommended_action='Review API changes manually',
        details=[],
    )


class DecisionMaker:
    """Stage 3: decides the action level for the current cycle."""

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client
        self.logger = logging.getLogger(self.__class__.__name__)

    def decide(
        self,
        change_sets: List[ProviderChangeSet],
        profiles: List[DependencyProfile]
    ) -> Decision:
        """
        Decide what to do about the detected changes.

        Args:
            change_sets: Stage 1 output for every changed provider
            profiles: Stage 2 output for every consumer

        Returns:
            Decision; 'none' without any analysis when there are no changes,
            'notify' when the analysis fails
        """
        change_count = sum(len(change_set.changes) for change_set in change_sets)
        if change_count == 0:
            return no_changes_decision()

        user_message = self.build_message(change_sets, profiles)
        response = self.llm_client.call(SYSTEM_PROMPT, user_message)
        if not response.success:
            self.logger.error(f"Decision analysis failed ({response.failure}): {response.error}")
            return failed_analysis_decision(change_count)

        try:
            return Decision.from_dict(response.data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self.logger.error(f"Malformed decision analysis: {e}")
            return failed_analysis_decision(change_count)

    @staticmethod
    def build_message(
        change_sets: List[ProviderChangeSet],
        profiles: List[DependencyProfile]
    ) -> str:
        """Render changes and dependencies as the Markdown analysis payload."""
        provider_sections = []
        for change_set in change_sets:
            if change_set.no_changes_detected:
                body = 'No changes detected'
            else:
                body = "\n".join(
                    f"- **{c.title}** ({c.type}, {c.relevance} relevance)\n"
                    f"  {c.summary}\n"
                    f"  Source: {c.source_url}" + (f" | Date: {c.date}" if c.date else "")
                    for c in change_set.changes
                )
            provider_sections.append(f"### {change_set.provider}\n{body}")

        consumer_sections = []
        for profile in profiles:
            uses = "\n".join(
                f"- {u.api}{' (critical)' if u.critical else ''}: "
                f"{', '.join(u.endpoints) or 'general usage'}"
                for u in profile.uses
            )
            consumer_sections.append(
                f"### {profile.consumer}\nPurpose: {profile.purpose}\nDependencies:\n{uses}"
            )

        changes_text = "\n\n".join(provider_sections)
        dependencies_text = "\n\n".join(consumer_sections)

        return f"""Analyze these API changes and determine their impact on the dependent services:

## API Changes Detected

{changes_text}

## Service Dependencies

{dependencies_text}

Based on this information, determine what action is needed and return as JSON."""
