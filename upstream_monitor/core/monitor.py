"""
Monitor - orchestrates a check cycle from page detection to notification.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from upstream_monitor.core.change_detector import ChangeDetector, group_changes_by_provider
from upstream_monitor.core.config import MonitorConfig
from upstream_monitor.core.discovery import ConsumerDiscovery
from upstream_monitor.core.exceptions import StateSaveError
from upstream_monitor.core.registry import SourceRegistry
from upstream_monitor.core.state_manager import StateManager
from upstream_monitor.handlers.base_handler import BaseHandler
from upstream_monitor.handlers.http_handler import HTTPHandler
from upstream_monitor.models.change_record import ChangeRecord, CHANGE_UNAVAILABLE
from upstream_monitor.models.change_set import ProviderChangeSet
from upstream_monitor.models.consumer import Consumer
from upstream_monitor.models.decision import Decision
from upstream_monitor.models.dependency import DependencyProfile
from upstream_monitor.notifiers.report import format_console_report
from upstream_monitor.notifiers.slack_notifier import SlackNotifier
from upstream_monitor.stages.change_classifier import ChangeClassifier
from upstream_monitor.stages.decision_maker import DecisionMaker
from upstream_monitor.stages.dependency_resolver import DependencyResolver
from upstream_monitor.utils.llm_client import LLMClient


class PipelineState(Enum):
    """Phases of a check cycle, entered strictly in this order."""

    IDLE = 'idle'
    DETECTING = 'detecting'
    CLASSIFYING = 'classifying'
    RESOLVING = 'resolving'
    DECIDING = 'deciding'
    REPORTING = 'reporting'
    DONE = 'done'


_ORDER = list(PipelineState)


@dataclass
class CycleReport:
    """Everything produced by one full check cycle."""

    changes: List[ChangeRecord] = field(default_factory=list)
    change_sets: List[ProviderChangeSet] = field(default_factory=list)
    consumers: List[Consumer] = field(default_factory=list)
    profiles: List[DependencyProfile] = field(default_factory=list)
    decision: Optional[Decision] = None
    notified: Optional[bool] = None
    report_text: str = ''
    states: List[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    persistence_errors: List[str] = field(default_factory=list)

    @property
    def state(self) -> PipelineState:
        return self.states[-1]

    @property
    def unavailable(self) -> List[ChangeRecord]:
        return [change for change in self.changes if change.change_type == CHANGE_UNAVAILABLE]

    def enter(self, state: PipelineState) -> None:
        """Move forward to a later phase."""
        if _ORDER.index(state) <= _ORDER.index(self.state):
            raise ValueError(f"Cannot move from {self.state.value} to {state.value}")
        self.states.append(state)


class Monitor:
    """Main monitoring agent that runs check cycles."""

    def __init__(
        self,
        config: MonitorConfig,
        registry: Optional[SourceRegistry] = None,
        state_manager: Optional[StateManager] = None,
        handler: Optional[BaseHandler] = None,
        llm_client: Optional[LLMClient] = None,
        discovery: Optional[ConsumerDiscovery] = None,
        notifier: Optional[SlackNotifier] = None
    ):
        """
        Initialize the monitor from configuration.

        Collaborators default to the ones described by the configuration;
        passing them in replaces them.

        Args:
            config: Monitor configuration
            registry: Source registry; loaded from config.sources_path on
                every cycle when omitted
            state_manager: State store
            handler: Page retrieval handler
            llm_client: Analysis service client
            discovery: Consumer discovery
            notifier: Alert delivery; defaults to Slack when a webhook is set
        """
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.registry = registry
        self.state_manager = state_manager or StateManager(config.state_path)
        self.llm_client = llm_client or LLMClient(
            config.groq_api_key,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
        self.discovery = discovery or ConsumerDiscovery.from_settings(config.discovery)

        if notifier is None and config.slack_webhook_url:
            notifier = SlackNotifier(config.slack_webhook_url)
        self.notifier = notifier

        self.detector = ChangeDetector(
            handler or HTTPHandler(config.http_settings),
            self.state_manager,
            hash_length=config.hash_length,
            max_workers=config.max_workers,
        )
        self.classifier = ChangeClassifier(self.llm_client, config.page_content_limit)
        self.resolver = DependencyResolver(
            self.llm_client,
            self.state_manager,
            self.discovery,
            freshness_window=config.freshness_window,
            documentation_limit=config.documentation_limit,
            snippet_limit=config.snippet_limit,
        )
        self.decision_maker = DecisionMaker(self.llm_client)

    def load_registry(self) -> SourceRegistry:
        """
        Get the source registry for this cycle.

        Raises:
            ConfigurationError: if sources.yaml is missing or malformed
        """
        return self.registry or SourceRegistry(self.config.sources_path)

    def discover_consumers(self) -> List[Consumer]:
        return self.discovery.discover()

    def check_sources(self) -> List[ChangeRecord]:
        """
        Check all sources for page changes without any analysis.

        Returns:
            ChangeRecords of this cycle

        Raises:
            ConfigurationError: if the source registry cannot be loaded
            StateSaveError: if the updated state cannot be written
        """
        changes = self._detect()
        self.state_manager.save()
        return changes

    def run_full_check(self) -> CycleReport:
        """
        Run a complete cycle: detect, classify, resolve, decide, report.

        Stage failures are absorbed into fallback values so a Decision is
        always produced. State save failures are collected on the report.

        Returns:
            CycleReport of the cycle

        Raises:
            ConfigurationError: if the source registry cannot be loaded
        """
        report = CycleReport()

        report.enter(PipelineState.DETECTING)
        self.logger.info("Step 1/4: Checking sources for changes...")
        report.changes = self._detect()
        self._persist(report)

        grouped = group_changes_by_provider(report.changes)
        self.logger.info(
            f"Found {len(report.changes)} change(s) across {len(grouped)} provider(s)"
        )

        if grouped:
            report.enter(PipelineState.CLASSIFYING)
            self.logger.info("Step 2/4: Classifying changes...")
            report.change_sets = [
                self._classify_provider(name, pages)
                for name, pages in grouped.values()
            ]

            report.enter(PipelineState.RESOLVING)
            self.logger.info("Step 3/4: Resolving consumer dependencies...")
            report.consumers = self.discover_consumers()
            report.profiles = self.resolver.resolve_all(report.consumers)
            self._persist(report)
        else:
            self.logger.info("Steps 2-3/4: No changes to analyze")

        report.enter(PipelineState.DECIDING)
        self.logger.info("Step 4/4: Making action decision...")
        report.decision = self.decision_maker.decide(report.change_sets, report.profiles)
        self.logger.info(f"Action: {report.decision.action}")

        report.enter(PipelineState.REPORTING)
        report.report_text = format_console_report(report.decision, report.unavailable)
        if self.notifier is not None:
            report.notified = self.notifier.notify(report.decision)
        self._persist(report)

        report.enter(PipelineState.DONE)
        return report

    def send_test_notification(self) -> bool:
        if self.notifier is None:
            self.logger.error("No notifier configured (SLACK_WEBHOOK_URL not set)")
            return False
        return self.notifier.send_test_notification()

    def _detect(self) -> List[ChangeRecord]:
        registry = self.load_registry()
        changes = self.detector.check_all(registry.get_all_providers())
        self.state_manager.mark_checked()
        return changes

    def _classify_provider(self, name: str, pages: List[Tuple[str, str]]) -> ProviderChangeSet:
        try:
            return self.classifier.analyze_provider(name, pages)
        except Exception as e:
            self.logger.exception(f"Change classification failed for {name}: {e}")
            return ProviderChangeSet.empty(name)

    def _persist(self, report: CycleReport) -> None:
        try:
            self.state_manager.save()
        except StateSaveError as e:
            self.logger.error(str(e))
            report.persistence_errors.append(str(e))
