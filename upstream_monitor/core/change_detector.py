"""
Change Detector - fetches monitored pages and compares their fingerprints.
"""

import logging
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from upstream_monitor.core.exceptions import FetchError
from upstream_monitor.core.state_manager import StateManager
from upstream_monitor.handlers.base_handler import BaseHandler
from upstream_monitor.models.change_record import (
    ChangeRecord,
    CHANGE_MODIFIED,
    CHANGE_NEW,
    CHANGE_UNAVAILABLE,
)
from upstream_monitor.models.resource import Resource, UNREACHABLE_STATUS
from upstream_monitor.models.source import ProviderSource, WebPage
from upstream_monitor.utils.content import DEFAULT_HASH_LENGTH, fingerprint, normalize


class ChangeDetector:
    """Detects new, modified and unreachable pages against stored state."""

    def __init__(
        self,
        handler: BaseHandler,
        state_manager: StateManager,
        hash_length: int = DEFAULT_HASH_LENGTH,
        max_workers: int = 4
    ):
        """
        Args:
            handler: Page retrieval handler
            state_manager: Store holding the previous fingerprints
            hash_length: Fingerprint width in hex characters
            max_workers: Concurrent fetches; 1 checks pages sequentially
        """
        self.handler = handler
        self.state_manager = state_manager
        self.hash_length = hash_length
        self.max_workers = max(1, max_workers)
        self.logger = logging.getLogger(self.__class__.__name__)

    def check_resource(self, provider: ProviderSource, page: WebPage) -> Optional[ChangeRecord]:
        """
        Check a single page for changes.

        The stored Resource for the page is always replaced, whether the
        fetch succeeded or not.

        Args:
            provider: Provider the page belongs to
            page: Page to check

        Returns:
            ChangeRecord, or None when nothing worth reporting happened
        """
        previous = self.state_manager.get_resource(provider.key, page.url)
        checked_at = datetime.now(timezone.utc).isoformat()

        try:
            result = self.handler.fetch(page.url)
        except FetchError as e:
            self.logger.warning(f"{provider.name}: {page.url} unavailable: {e}")
            self.state_manager.put_resource(provider.key, Resource(
                url=page.url,
                hash='',
                status=UNREACHABLE_STATUS,
                last_checked=checked_at,
                description=page.description,
            ))

            # Only alert on the transition from reachable to unreachable
            if previous is not None and previous.is_reachable:
                return self._record(
                    provider, page, CHANGE_UNAVAILABLE,
                    previous_hash=previous.hash or None,
                    previous_status=previous.status,
                    current_status=UNREACHABLE_STATUS,
                )
            return None

        current_hash = fingerprint(result.text, self.hash_length)
        changed = previous is None or previous.hash != current_hash
        # Text is extracted before the new hash is stored
        content = normalize(result.text) if changed else None

        self.state_manager.put_resource(provider.key, Resource(
            url=page.url,
            hash=current_hash,
            status=result.status_code,
            last_checked=checked_at,
            description=page.description,
        ))

        if previous is None:
            self.logger.info(f"{provider.name}: first observation of {page.url}")
            return self._record(
                provider, page, CHANGE_NEW,
                content=content,
                current_hash=current_hash,
                current_status=result.status_code,
            )

        if changed:
            self.logger.info(
                f"{provider.name}: {page.url} changed ({previous.hash or '-'} -> {current_hash})"
            )
            return self._record(
                provider, page, CHANGE_MODIFIED,
                content=content,
                previous_hash=previous.hash,
                current_hash=current_hash,
                previous_status=previous.status,
                current_status=result.status_code,
            )

        self.logger.debug(f"{provider.name}: {page.url} unchanged")
        return None

    def check_all(self, providers: List[ProviderSource]) -> List[ChangeRecord]:
        """
        Check every page of every provider.

        A page that fails unexpectedly is logged and skipped; the others
        are still checked.

        Returns:
            ChangeRecords in configuration order
        """
        targets = [(provider, page) for provider in providers for page in provider.web_pages]
        self.logger.info(f"Checking {len(targets)} page(s) across {len(providers)} provider(s)...")

        if self.max_workers == 1 or len(targets) <= 1:
            results = [self._check_isolated(provider, page) for provider, page in targets]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(lambda target: self._check_isolated(*target), targets))

        return [change for change in results if change is not None]

    def _check_isolated(self, provider: ProviderSource, page: WebPage) -> Optional[ChangeRecord]:
        try:
            return self.check_resource(provider, page)
        except Exception as e:
            self.logger.exception(f"{provider.name}: checking {page.url} failed: {e}")
            return None

    @staticmethod
    def _record(provider: ProviderSource, page: WebPage, change_type: str, **fields) -> ChangeRecord:
        return ChangeRecord(
            provider_key=provider.key,
            provider_name=provider.name,
            url=page.url,
            description=page.description,
            change_type=change_type,
            **fields
        )


def group_changes_by_provider(
    changes: List[ChangeRecord]
) -> Dict[str, Tuple[str, List[Tuple[str, str]]]]:
    """
    Group analyzable changes by provider.

    Args:
        changes: ChangeRecords of the current cycle

    Returns:
        Ordered mapping of provider key to (provider name, [(url, content)]);
        records without content (unavailable pages) are left out
    """
    grouped = OrderedDict()
    for change in changes:
        if not change.has_content:
            continue
        _, pages = grouped.setdefault(change.provider_key, (change.provider_name, []))
        pages.append((change.url, change.content))
    return grouped
