"""
Models package - Data classes for the application.
"""

from upstream_monitor.models.source import ProviderSource, WebPage
from upstream_monitor.models.resource import Resource, UNREACHABLE_STATUS
from upstream_monitor.models.change_record import (
    ChangeRecord,
    CHANGE_NEW,
    CHANGE_MODIFIED,
    CHANGE_UNAVAILABLE,
)
from upstream_monitor.models.change_set import ApiChange, ProviderChangeSet
from upstream_monitor.models.dependency import CacheEntry, Dependency, DependencyProfile
from upstream_monitor.models.decision import Decision, DecisionDetail
from upstream_monitor.models.consumer import Consumer, UpstreamApi, UsageSnapshot
from upstream_monitor.models.check_state import CheckState

__all__ = [
    'ProviderSource',
    'WebPage',
    'Resource',
    'UNREACHABLE_STATUS',
    'ChangeRecord',
    'CHANGE_NEW',
    'CHANGE_MODIFIED',
    'CHANGE_UNAVAILABLE',
    'ApiChange',
    'ProviderChangeSet',
    'CacheEntry',
    'Dependency',
    'DependencyProfile',
    'Decision',
    'DecisionDetail',
    'Consumer',
    'UpstreamApi',
    'UsageSnapshot',
    'CheckState',
]
