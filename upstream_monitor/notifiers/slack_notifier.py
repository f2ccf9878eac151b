"""
Slack notifier - delivers decisions through an incoming webhook.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from upstream_monitor.models.decision import ACTION_URGENT, NO_ACTION_NEEDED, Decision


IMPACT_EMOJI = {
    'high': ':red_circle:',
    'medium': ':large_yellow_circle:',
}


class SlackNotifier:
    """Posts Block Kit messages to a Slack incoming webhook."""

    def __init__(self, webhook_url: str, timeout: float = 10):
        """
        Args:
            webhook_url: Slack incoming webhook URL
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    def notify(self, decision: Decision) -> bool:
        """
        Send a decision to Slack.

        Args:
            decision: Outcome of the check cycle

        Returns:
            True if a message was delivered; False for action 'none' (nothing
            is sent) or on delivery failure
        """
        if not decision.requires_notification:
            self.logger.info("No action needed. Skipping notification.")
            return False

        return self._send({
            'text': f"Upstream Monitor: {decision.summary}",
            'blocks': build_blocks(decision),
        })

    def send_test_notification(self) -> bool:
        """Send a test message to verify the webhook configuration."""
        return self._send({
            'text': 'Upstream Monitor Test',
            'blocks': [
                _header('Upstream Monitor - Test Notification'),
                _section(
                    'This is a test notification from the Upstream API Monitor. '
                    'If you see this, your Slack webhook is configured correctly!'
                ),
                _context(f"Sent at: {_now_iso()}"),
            ],
        })

    def _send(self, payload: Dict[str, Any]) -> bool:
        try:
            response = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Failed to send Slack notification: {e}")
            return False
        return True


def build_blocks(decision: Decision, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Render a decision as Slack Block Kit blocks."""
    urgent = decision.action == ACTION_URGENT
    header_emoji = ':rotating_light:' if urgent else ':bell:'
    header_text = (
        'Upstream Monitor - URGENT Action Required' if urgent
        else 'Upstream Monitor - Changes Detected'
    )

    blocks = [
        _header(header_text),
        _section(f"{header_emoji} *{decision.summary}*"),
    ]

    if decision.affected_consumers:
        blocks.append(_section(f"*Affected consumers:* {', '.join(decision.affected_consumers)}"))

    blocks.append({'type': 'divider'})

    for detail in decision.details:
        emoji = IMPACT_EMOJI.get(detail.impact, ':white_circle:')
        changes = "\n".join(f"• {change}" for change in detail.changes)
        blocks.append(_section(f"{emoji} *{detail.consumer}*\n{changes}"))

    if decision.recommended_action != NO_ACTION_NEEDED:
        blocks.append({'type': 'divider'})
        blocks.append(_section(f":clipboard: *Recommended Action:*\n{decision.recommended_action}"))

    blocks.append(_context(f"Report generated at {_now_iso(now)} | Upstream Monitor"))
    return blocks


def _header(text: str) -> Dict[str, Any]:
    return {'type': 'header', 'text': {'type': 'plain_text', 'text': text, 'emoji': True}}


def _section(text: str) -> Dict[str, Any]:
    return {'type': 'section', 'text': {'type': 'mrkdwn', 'text': text}}


def _context(text: str) -> Dict[str, Any]:
    return {'type': 'context', 'elements': [{'type': 'mrkdwn', 'text': text}]}


def _now_iso(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()
