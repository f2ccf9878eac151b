"""
HTTP GET handler for documentation and news pages.
"""

import requests
from typing import Optional, Dict, Any

from .base_handler import BaseHandler, FetchResult


DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = 'Upstream-Monitor/2.0 (API change monitoring)'


class HTTPHandler(BaseHandler):
    """Handler that downloads a page body with a plain GET request."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        super().__init__(settings)
        self.timeout = self.settings.get('timeout', DEFAULT_TIMEOUT)
        self.max_retries = max(1, int(self.settings.get('max_retries', 1)))
        self.user_agent = self.settings.get('user_agent', DEFAULT_USER_AGENT)

    def get_method_name(self) -> str:
        return "http_get"

    def fetch(self, url: str) -> FetchResult:
        """
        Fetch a page with a bounded timeout.

        Non-2xx responses are returned with their status code; only
        transport-level failures raise.

        Args:
            url: Page URL

        Returns:
            FetchResult with body text and status

        Raises:
            FetchError: when every attempt fails
        """
        headers = {'User-Agent': self.user_agent}
        last_error = None

        for attempt in range(self.max_retries):
            try:
                self.logger.debug(f"Fetching {url} (attempt {attempt + 1})")
                response = requests.get(
                    url,
                    headers=headers,
                    timeout=self.timeout,
                    allow_redirects=True
                )
                return FetchResult(
                    url=url,
                    status_code=response.status_code,
                    text=response.text,
                )

            except (requests.exceptions.RequestException, UnicodeDecodeError) as e:
                self.logger.warning(f"Attempt {attempt + 1} for {url} failed: {e}")
                last_error = e

        raise self.handle_error(url, last_error)
