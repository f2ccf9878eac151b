"""
Core package - Contains main business logic.
"""

from upstream_monitor.core.config import MonitorConfig
from upstream_monitor.core.registry import SourceRegistry
from upstream_monitor.core.state_manager import StateManager
from upstream_monitor.core.change_detector import ChangeDetector, group_changes_by_provider
from upstream_monitor.core.discovery import ConsumerDiscovery
from upstream_monitor.core.monitor import Monitor, CycleReport, PipelineState

__all__ = [
    'MonitorConfig',
    'SourceRegistry',
    'StateManager',
    'ChangeDetector',
    'group_changes_by_provider',
    'ConsumerDiscovery',
    'Monitor',
    'CycleReport',
    'PipelineState',
]
