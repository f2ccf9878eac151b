"""
State Manager - Handles persistence of page fingerprints and the dependency cache.
"""

import os
import json
import logging
import tempfile
from datetime import datetime, timezone
from typing import Optional
from threading import Lock

from upstream_monitor.core.exceptions import StateSaveError
from upstream_monitor.models.check_state import CheckState
from upstream_monitor.models.dependency import CacheEntry
from upstream_monitor.models.resource import Resource


class StateManager:
    """Manages the persisted CheckState of the monitor."""

    def __init__(self, state_file: str):
        """
        Initialize state manager and load any existing state.

        Args:
            state_file: Path to state JSON file
        """
        self.state_file = state_file
        self.logger = logging.getLogger(self.__class__.__name__)
        self._lock = Lock()
        self.state = CheckState()
        self.load()

    def load(self) -> CheckState:
        """
        Load state from file.

        A missing, unreadable or malformed file yields an empty state so the
        next cycle starts from a fresh baseline.
        """
        state = self._read_state()
        with self._lock:
            self.state = state
        return state

    def _read_state(self) -> CheckState:
        if not os.path.exists(self.state_file):
            self.logger.info(f"No state file at {self.state_file}, starting with empty state")
            return CheckState()

        try:
            with open(self.state_file, 'r', encoding='utf-8') as f:
                state = CheckState.from_dict(json.load(f))
        except (OSError, ValueError) as e:
            self.logger.warning(f"Could not load state file: {e}")
            return CheckState()
        except (KeyError, TypeError, AttributeError) as e:
            self.logger.warning(f"State file has unexpected structure, ignoring it: {e}")
            return CheckState()

        return state

    def save(self) -> None:
        """
        Atomically rewrite the state file.

        Raises:
            StateSaveError: if the file cannot be written; the previous file
            is left untouched
        """
        with self._lock:
            data = self.state.to_dict()

        directory = os.path.dirname(os.path.abspath(self.state_file))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.state_file)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StateSaveError(self.state_file, str(e))

        self.logger.debug(f"State saved to {self.state_file}")

    def get_resource(self, provider_key: str, url: str) -> Optional[Resource]:
        """
        Get last known record of a page.

        Args:
            provider_key: Provider key
            url: Page URL

        Returns:
            Resource or None if never checked
        """
        with self._lock:
            return self.state.sources.get(provider_key, {}).get(url)

    def put_resource(self, provider_key: str, resource: Resource) -> None:
        """Replace the record of a page."""
        with self._lock:
            self.state.sources.setdefault(provider_key, {})[resource.url] = resource

    def get_cached_profile(self, consumer: str) -> Optional[CacheEntry]:
        with self._lock:
            return self.state.dependency_cache.get(consumer)

    def put_cached_profile(self, consumer: str, entry: CacheEntry) -> None:
        """Store a newly computed dependency profile."""
        with self._lock:
            self.state.dependency_cache[consumer] = entry

    def mark_checked(self, now: Optional[datetime] = None) -> None:
        """Record the time of the current run."""
        now = now or datetime.now(timezone.utc)
        with self._lock:
            self.state.last_check = now.isoformat()

