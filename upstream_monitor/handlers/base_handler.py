"""
Abstract base handler for page retrieval.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any
import logging

from upstream_monitor.core.exceptions import FetchError


@dataclass
class FetchResult:
    """Body and status of a retrieved page."""

    url: str
    status_code: int
    text: str


class BaseHandler(ABC):
    """Abstract base class for all page handlers."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        """
        Initialize handler with HTTP settings.

        Args:
            settings: The ``http`` section of settings.yaml
        """
        self.settings = settings or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def fetch(self, url: str) -> FetchResult:
        """
        Retrieve a page.

        Args:
            url: Page URL

        Returns:
            FetchResult with the decoded body and HTTP status

        Raises:
            FetchError: on timeout, DNS or transport failure
        """
        pass

    @abstractmethod
    def get_method_name(self) -> str:
        """
        Get the name of the retrieval method.

        Returns:
            String identifier for this method
        """
        pass

    def handle_error(self, url: str, exception: Exception) -> FetchError:
        """Log a retrieval failure and wrap it in a FetchError."""
        self.logger.error(
            f"Error fetching {url}: {type(exception).__name__}: {str(exception)}"
        )
        return FetchError(url, f"{type(exception).__name__}: {exception}")
