"""
Decision model - the terminal artifact of a check cycle.
"""

from dataclasses import dataclass, field
from typing import List


ACTION_NONE = 'none'
ACTION_NOTIFY = 'notify'
ACTION_URGENT = 'urgent'
ACTION_LEVELS = (ACTION_NONE, ACTION_NOTIFY, ACTION_URGENT)

IMPACT_LEVELS = ('high', 'medium', 'low')

NO_ACTION_NEEDED = 'No action needed'


@dataclass
class DecisionDetail:
    """How the detected changes affect one consumer."""

    consumer: str
    changes: List[str] = field(default_factory=list)
    impact: str = 'low'

    @classmethod
    def from_dict(cls, data: dict) -> 'DecisionDetail':
        impact = data.get('impact')
        if impact not in IMPACT_LEVELS:
            impact = 'low'
        changes = data.get('changes') or []
        if not isinstance(changes, list):
            raise TypeError(f"changes must be a list, got {type(changes).__name__}")
        return cls(
            consumer=str(data['consumer']),
            changes=[str(change) for change in changes],
            impact=impact,
        )

    def to_dict(self) -> dict:
        return {
            'consumer': self.consumer,
            'changes': list(self.changes),
            'impact': self.impact,
        }


@dataclass
class Decision:
    """Action level and report produced by the decision maker."""

    action: str
    summary: str
    affected_consumers: List[str] = field(default_factory=list)
    recommended_action: str = NO_ACTION_NEEDED
    details: List[DecisionDetail] = field(default_factory=list)

    @property
    def requires_notification(self) -> bool:
        return self.action != ACTION_NONE

    @classmethod
    def from_dict(cls, data: dict) -> 'Decision':
        """
        Build a Decision from analysis output.

        Raises:
            ValueError: if the action level is not one of ACTION_LEVELS
        """
        action = data.get('action')
        if action not in ACTION_LEVELS:
            raise ValueError(f"invalid action level: {action!r}")

        affected = data.get('affectedConsumers', data.get('affected_consumers')) or []
        details = data.get('details') or []
        if not isinstance(affected, list) or not isinstance(details, list):
            raise TypeError("affected consumers and details must be lists")

        return cls(
            action=action,
            summary=str(data.get('summary') or ''),
            affected_consumers=[str(name) for name in affected],
            recommended_action=str(
                data.get('recommendedAction') or data.get('recommended_action') or NO_ACTION_NEEDED
            ),
            details=[DecisionDetail.from_dict(item) for item in details],
        )

    def to_dict(self) -> dict:
        return {
            'action': self.action,
            'summary': self.summary,
            'affected_consumers': list(self.affected_consumers),
            'recommended_action': self.recommended_action,
            'details': [detail.to_dict() for detail in self.details],
        }
