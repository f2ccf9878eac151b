"""
Monitor configuration - built once per process and passed explicitly.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from upstream_monitor.handlers.http_handler import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from upstream_monitor.utils.content import DEFAULT_HASH_LENGTH
from upstream_monitor.utils.llm_client import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
)


logger = logging.getLogger('MonitorConfig')


def load_yaml(path: str) -> Dict[str, Any]:
    """Load an optional YAML file, returning {} when it is absent or invalid."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Settings file not found: {path}, using defaults")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file {path}: {e}")
        return {}


@dataclass
class MonitorConfig:
    """All tunables of a check cycle."""

    config_dir: str
    sources_path: str
    state_path: str

    # http
    http_timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    max_retries: int = 1
    max_workers: int = 4

    # analysis
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    cache_days: float = 30
    hash_length: int = DEFAULT_HASH_LENGTH
    page_content_limit: int = 15000
    documentation_limit: int = 5000
    snippet_limit: int = 5000

    # discovery
    discovery: Dict[str, Any] = field(default_factory=dict)

    # logging
    log_level: str = 'INFO'
    log_format: Optional[str] = None
    log_file: Optional[str] = None

    # secrets
    groq_api_key: Optional[str] = None
    slack_webhook_url: Optional[str] = None

    @property
    def freshness_window(self) -> timedelta:
        return timedelta(days=self.cache_days)

    @property
    def http_settings(self) -> Dict[str, Any]:
        return {
            'timeout': self.http_timeout,
            'user_agent': self.user_agent,
            'max_retries': self.max_retries,
        }

    @classmethod
    def load(
        cls,
        config_dir: Optional[str] = None,
        settings_path: Optional[str] = None,
        state_path: Optional[str] = None,
        env_file: Optional[str] = None
    ) -> 'MonitorConfig':
        """
        Build configuration from settings.yaml and the environment.

        Args:
            config_dir: Directory holding sources.yaml and settings.yaml
                (default: MONITOR_CONFIG_DIR or ./config)
            settings_path: Explicit settings.yaml path
            state_path: Explicit state file path, overrides settings
            env_file: Optional .env file to load

        Returns:
            MonitorConfig instance
        """
        load_dotenv(env_file)

        if config_dir is None:
            config_dir = os.getenv('MONITOR_CONFIG_DIR') or os.path.join(os.getcwd(), 'config')
        if settings_path is None:
            settings_path = os.path.join(config_dir, 'settings.yaml')

        settings = load_yaml(settings_path)
        http = settings.get('http') or {}
        analysis = settings.get('analysis') or {}
        log_settings = settings.get('logging') or {}
        state = settings.get('state') or {}

        if state_path is None:
            state_path = (
                os.getenv('MONITOR_STATE_FILE')
                or state.get('path')
                or os.path.join(os.getcwd(), 'state', 'last-check.json')
            )

        discovery = dict(settings.get('discovery') or {})
        discovery.setdefault('root', os.getcwd())

        return cls(
            config_dir=config_dir,
            sources_path=os.path.join(config_dir, 'sources.yaml'),
            state_path=state_path,
            http_timeout=http.get('timeout', DEFAULT_TIMEOUT),
            user_agent=http.get('user_agent', DEFAULT_USER_AGENT),
            max_retries=http.get('max_retries', 1),
            max_workers=http.get('max_workers', 4),
            model=analysis.get('model', DEFAULT_MODEL),
            max_tokens=analysis.get('max_tokens', DEFAULT_MAX_TOKENS),
            temperature=analysis.get('temperature', DEFAULT_TEMPERATURE),
            cache_days=analysis.get('cache_days', 30),
            hash_length=analysis.get('hash_length', DEFAULT_HASH_LENGTH),
            page_content_limit=analysis.get('page_content_limit', 15000),
            documentation_limit=analysis.get('documentation_limit', 5000),
            snippet_limit=analysis.get('snippet_limit', 5000),
            discovery=discovery,
            log_level=log_settings.get('level', 'INFO'),
            log_format=log_settings.get('format'),
            log_file=log_settings.get('file'),
            groq_api_key=os.getenv('GROQ_API_KEY'),
            slack_webhook_url=os.getenv('SLACK_WEBHOOK_URL'),
        )

