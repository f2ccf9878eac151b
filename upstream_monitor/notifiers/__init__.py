"""
Notifiers package - Alert delivery and report rendering.
"""

from upstream_monitor.notifiers.slack_notifier import SlackNotifier
from upstream_monitor.notifiers.report import format_console_report, format_change_list

__all__ = ['SlackNotifier', 'format_console_report', 'format_change_list']
