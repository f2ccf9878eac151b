"""
Upstream Monitor - Automated upstream API change monitoring

Watches provider documentation and news pages for changes, analyzes them with
an LLM against the dependencies of local consumer projects, and alerts when
action is needed.
"""

from upstream_monitor.core.monitor import Monitor, CycleReport
from upstream_monitor.core.config import MonitorConfig
from upstream_monitor.core.registry import SourceRegistry
from upstream_monitor.core.state_manager import StateManager
from upstream_monitor.models.decision import Decision

__version__ = "2.0.0"
__all__ = [
    'Monitor',
    'CycleReport',
    'MonitorConfig',
    'SourceRegistry',
    'StateManager',
    'Decision',
]
