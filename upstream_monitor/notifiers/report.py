"""
Console rendering of check results.
"""

from datetime import datetime, timezone
from typing import List, Optional

from upstream_monitor.models.change_record import ChangeRecord
from upstream_monitor.models.decision import (
    ACTION_NOTIFY,
    ACTION_URGENT,
    NO_ACTION_NEEDED,
    Decision,
)


RULE = '═' * 63
THIN_RULE = '─' * 63

ACTION_LABELS = {
    ACTION_URGENT: '[!!!] URGENT',
    ACTION_NOTIFY: '[!] NOTIFY',
}

IMPACT_MARKERS = {
    'high': '[!]',
    'medium': '[~]',
}


def format_console_report(
    decision: Decision,
    unavailable: Optional[List[ChangeRecord]] = None,
    now: Optional[datetime] = None
) -> str:
    """
    Format a decision as a console-friendly report.

    Args:
        decision: Outcome of the check cycle
        unavailable: Pages that became unreachable this cycle
        now: Report time, defaults to the wall clock

    Returns:
        Multi-line report text
    """
    lines = [
        '',
        RULE,
        'UPSTREAM API MONITOR REPORT'.center(63),
        RULE,
        '',
        f"Action: {ACTION_LABELS.get(decision.action, '[ ] NO ACTION')}",
        '',
        f"Summary: {decision.summary}",
        '',
    ]

    if decision.affected_consumers:
        lines.append(f"Affected consumers: {', '.join(decision.affected_consumers)}")
        lines.append('')

    if decision.details:
        lines.extend([THIN_RULE, 'DETAILS'.center(63), THIN_RULE])
        for detail in decision.details:
            lines.append('')
            lines.append(
                f"{IMPACT_MARKERS.get(detail.impact, '[ ]')} {detail.consumer} ({detail.impact} impact)"
            )
            lines.extend(f"    • {change}" for change in detail.changes)
        lines.append('')

    if unavailable:
        lines.extend([THIN_RULE, 'UNAVAILABLE SOURCES'.center(63), THIN_RULE])
        for change in unavailable:
            lines.append(
                f"  {change.provider_name}: {change.description} "
                f"(HTTP {change.previous_status} -> unreachable)"
            )
            lines.append(f"    {change.url}")
        lines.append('')

    if decision.recommended_action != NO_ACTION_NEEDED:
        lines.append(THIN_RULE)
        lines.append(f"Recommended Action: {decision.recommended_action}")

    lines.append('')
    lines.append(f"Report generated: {(now or datetime.now(timezone.utc)).isoformat()}")
    return '\n'.join(lines)


def format_change_list(changes: List[ChangeRecord], preview_length: int = 100) -> str:
    """List detected page changes, one block per change."""
    markers = {'unavailable': '[X]', 'new': '[+]'}
    lines = []
    for change in changes:
        lines.append(f"{markers.get(change.change_type, '[*]')} {change.provider_name}: {change.description}")
        lines.append(f"   Type: {change.change_type}")
        lines.append(f"   URL: {change.url}")
        if change.content:
            lines.append(f"   Content: {change.content[:preview_length]}...")
        lines.append('')
    return '\n'.join(lines)
