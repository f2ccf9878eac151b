"""
Exceptions raised by the monitor.
"""


class MonitorError(Exception):
    """Base class for monitor errors."""


class ConfigurationError(MonitorError):
    """The source registry is missing or cannot be parsed."""


class StateSaveError(MonitorError):
    """The state file could not be written."""

    def __init__(self, path: str, message: str):
        super().__init__(f"Could not save state to {path}: {message}")
        self.path = path


class FetchError(MonitorError):
    """A page could not be retrieved at all."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url
