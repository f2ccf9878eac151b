"""
Stages package - The three analysis steps of a check cycle.
"""

from upstream_monitor.stages.change_classifier import ChangeClassifier
from upstream_monitor.stages.dependency_resolver import DependencyResolver
from upstream_monitor.stages.decision_maker import DecisionMaker

__all__ = [
    'ChangeClassifier',
    'DependencyResolver',
    'DecisionMaker',
]
