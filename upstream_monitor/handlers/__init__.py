"""
Handlers package - Page retrieval implementations.
"""

from upstream_monitor.handlers.base_handler import BaseHandler, FetchError, FetchResult
from upstream_monitor.handlers.http_handler import HTTPHandler

__all__ = [
    'BaseHandler',
    'FetchError',
    'FetchResult',
    'HTTPHandler',
]
