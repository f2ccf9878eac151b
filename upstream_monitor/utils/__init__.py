"""
Utils package - Shared utility functions.
"""

from upstream_monitor.utils.content import normalize, fingerprint
from upstream_monitor.utils.logger import setup_logging
from upstream_monitor.utils.llm_client import LLMClient, LLMResponse

__all__ = ['normalize', 'fingerprint', 'setup_logging', 'LLMClient', 'LLMResponse']
