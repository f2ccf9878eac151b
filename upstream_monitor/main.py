#!/usr/bin/env python3
"""
Command line entry point for the Upstream API Monitor.

Usage:
    upstream-monitor discover          # List discovered consumer projects
    upstream-monitor check-sources     # Detect page changes only
    upstream-monitor check             # Full check with LLM analysis
    upstream-monitor notify-test       # Send a test Slack notification
"""

import argparse
import sys
from typing import List, Optional

from upstream_monitor.core.config import MonitorConfig
from upstream_monitor.core.exceptions import ConfigurationError, StateSaveError
from upstream_monitor.core.monitor import Monitor
from upstream_monitor.notifiers.report import format_change_list
from upstream_monitor.utils.logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='upstream-monitor',
        description='Upstream API Monitor - detect and triage upstream API changes'
    )
    parser.add_argument(
        '--config-dir',
        type=str,
        help='Directory holding sources.yaml and settings.yaml (default: ./config)'
    )
    parser.add_argument(
        '--settings',
        type=str,
        help='Path to settings.yaml (default: <config-dir>/settings.yaml)'
    )
    parser.add_argument(
        '--state-file',
        type=str,
        help='Path to the state file (default: from settings)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True
    subparsers.add_parser('discover', help='List discovered consumer projects')
    subparsers.add_parser('check-sources', help='Check sources for changes (no analysis)')
    subparsers.add_parser('check', help='Run full check with LLM analysis')
    subparsers.add_parser('notify-test', help='Send a test Slack notification')
    return parser


def cmd_discover(monitor: Monitor) -> int:
    print("Discovering consumer projects...\n")
    consumers = monitor.discover_consumers()

    if not consumers:
        print(f"No consumers found under {monitor.discovery.root}")
        return 0

    print(f"Found {len(consumers)} consumer(s):\n")
    for consumer in consumers:
        print(f"  {consumer.name}")
        print(f"    Use case: {consumer.use_case}")
        if consumer.tools:
            print(f"    Tools:    {', '.join(consumer.tools)}")
        apis = consumer.unique_apis()
        if apis:
            print("    Upstream APIs:")
            for api in apis:
                print(f"      - {api.name}: {api.base_url}")
        print()
    return 0


def cmd_check_sources(monitor: Monitor) -> int:
    print("Checking sources for changes...")
    print("-" * 50)

    try:
        changes = monitor.check_sources()
    except StateSaveError as e:
        print(f"\nError: {e}")
        return 1

    if not changes:
        print("\nNo changes detected.")
        return 0

    print(f"\nFound {len(changes)} change(s):\n")
    print(format_change_list(changes))
    return 0


def cmd_check(monitor: Monitor, config: MonitorConfig) -> int:
    if not config.groq_api_key:
        print("Error: GROQ_API_KEY environment variable is required for analysis")
        return 1

    print("Running full check...")
    print("-" * 50)
    report = monitor.run_full_check()
    print(report.report_text)

    if report.notified is None:
        print("\nSlack notification: not configured")
    elif report.notified:
        print("\nSlack notification: sent")
    elif report.decision and report.decision.requires_notification:
        print("\nSlack notification: FAILED")

    if report.persistence_errors:
        print("\nState could not be saved:")
        for error in report.persistence_errors:
            print(f"  {error}")
        return 1
    return 0


def cmd_notify_test(monitor: Monitor, config: MonitorConfig) -> int:
    if not config.slack_webhook_url:
        print("Error: SLACK_WEBHOOK_URL environment variable is required")
        return 1

    print("Sending test notification to Slack...")
    if monitor.send_test_notification():
        print("Test notification sent successfully")
        return 0
    print("Failed to send test notification")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = MonitorConfig.load(
        config_dir=args.config_dir,
        settings_path=args.settings,
        state_path=args.state_file,
    )

    # Setup logging
    log_level = 'DEBUG' if args.verbose else config.log_level
    setup_logging(level=log_level, format_str=config.log_format, log_file=config.log_file)

    monitor = Monitor(config)

    try:
        if args.command == 'discover':
            return cmd_discover(monitor)
        if args.command == 'check-sources':
            return cmd_check_sources(monitor)
        if args.command == 'check':
            return cmd_check(monitor, config)
        return cmd_notify_test(monitor, config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
