"""
Dependency Resolver - works out which upstream APIs each consumer relies on.

Profiles are expensive to compute, so they are cached in the state store and
reused until they are older than the freshness window.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from upstream_monitor.core.discovery import ConsumerDiscovery
from upstream_monitor.core.state_manager import StateManager
from upstream_monitor.models.consumer import Consumer
from upstream_monitor.models.dependency import CacheEntry, Dependency, DependencyProfile
from upstream_monitor.utils.llm_client import LLMClient


DEFAULT_FRESHNESS_WINDOW = timedelta(days=30)

SYSTEM_PROMPT = """You are analyzing a consumer service (for example an MCP server) to understand what upstream APIs it uses.

These services wrap external APIs to make them available to their users. Your job is to identify:
1. What external APIs the service depends on
2. What endpoints or features it uses from each API
3. How critical each dependency is (would the service break without it?)

Analyze the documentation and source code snippets provided.

Respond with a JSON object in this exact format:
{
  "consumer": "service-name",
  "uses": [
    {
      "api": "API Name (e.g., SMHI Forecast API)",
      "endpoints": ["/path/to/endpoint", "/another/endpoint"],
      "critical": true
    }
  ],
  "purpose": "Brief description of what this service does"
}

Focus on external HTTP APIs, not internal code dependencies."""


class DependencyResolver:
    """Stage 2: cache-backed dependency analysis per consumer."""

    def __init__(
        self,
        llm_client: LLMClient,
        state_manager: StateManager,
        discovery: ConsumerDiscovery,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        documentation_limit: int = 5000,
        snippet_limit: int = 5000
    ):
        self.llm_client = llm_client
        self.state_manager = state_manager
        self.discovery = discovery
        self.freshness_window = freshness_window
        self.documentation_limit = documentation_limit
        self.snippet_limit = snippet_limit
        self.logger = logging.getLogger(self.__class__.__name__)

    def resolve(self, consumer: Consumer, now: Optional[datetime] = None) -> DependencyProfile:
        """
        Get the dependency profile of a consumer.

        A fresh cached profile is returned as is. Otherwise the profile is
        computed (or, if analysis fails, derived from the discovered APIs)
        and cached with the current time.

        Args:
            consumer: Consumer to resolve
            now: Current time, defaults to the wall clock

        Returns:
            DependencyProfile, never None
        """
        now = now or datetime.now(timezone.utc)

        cached = self.state_manager.get_cached_profile(consumer.name)
        if cached is not None and cached.is_fresh(now, self.freshness_window):
            self.logger.debug(f"Using cached dependency profile for {consumer.name}")
            return cached.profile

        try:
            profile = self._analyze(consumer)
        except Exception as e:
            self.logger.exception(f"Dependency analysis failed for {consumer.name}: {e}")
            profile = None

        fallback = profile is None
        if fallback:
            profile = self.fallback_profile(consumer)

        self.state_manager.put_cached_profile(
            consumer.name,
            CacheEntry(profile=profile, timestamp=now, fallback=fallback)
        )
        return profile

    def resolve_all(self, consumers: List[Consumer], now: Optional[datetime] = None) -> List[DependencyProfile]:
        """Resolve every consumer in order."""
        now = now or datetime.now(timezone.utc)
        profiles = []
        for consumer in consumers:
            profile = self.resolve(consumer, now)
            self.logger.info(f"{consumer.name}: {len(profile.uses)} API dependencies")
            profiles.append(profile)
        return profiles

    @staticmethod
    def fallback_profile(consumer: Consumer) -> DependencyProfile:
        """Profile built only from statically discovered facts."""
        return DependencyProfile(
            consumer=consumer.name,
            purpose=consumer.use_case or 'Unknown',
            uses=[
                Dependency(api=api.name, endpoints=[], critical=True)
                for api in consumer.unique_apis()
            ],
        )

    def _analyze(self, consumer: Consumer) -> Optional[DependencyProfile]:
        snapshot = self.discovery.read_usage_snapshot(consumer)
        discovered = "\n".join(
            f"- {api.name}: {api.base_url}" for api in consumer.unique_apis()
        ) or "- None detected"
        snippets = "\n\n".join(snapshot.source_snippets)

        user_message = f"""Analyze this service ({consumer.name}) to identify its upstream API dependencies:

## Documentation
{snapshot.documentation[:self.documentation_limit]}

## Source Code Snippets
{snippets[:self.snippet_limit]}

## Discovered Upstream APIs (from code scanning)
{discovered}

Extract the API dependencies and return as JSON."""

        response = self.llm_client.call(SYSTEM_PROMPT, user_message)
        if not response.success:
            self.logger.error(
                f"Dependency analysis failed for {consumer.name} ({response.failure}): {response.error}"
            )
            return None

        try:
            uses = response.data.get('uses') or []
            if not isinstance(uses, list):
                raise TypeError(f"uses must be a list, got {type(uses).__name__}")
            return DependencyProfile(
                consumer=consumer.name,
                purpose=str(response.data.get('purpose') or consumer.use_case or 'Unknown'),
                uses=[Dependency.from_dict(item) for item in uses],
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self.logger.error(f"Malformed dependency analysis for {consumer.name}: {e}")
            return None
