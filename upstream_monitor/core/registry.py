"""
Source Registry - Maps provider keys to their monitored pages.
"""

import logging
from typing import Dict, List, Optional

import yaml

from upstream_monitor.core.exceptions import ConfigurationError
from upstream_monitor.models.source import ProviderSource


class SourceRegistry:
    """Registry of upstream providers loaded from sources.yaml."""

    def __init__(self, config_path: str):
        """
        Initialize the registry from a configuration file.

        Args:
            config_path: Path to sources.yaml

        Raises:
            ConfigurationError: if the file is missing or malformed
        """
        self.config_path = config_path
        self.logger = logging.getLogger(self.__class__.__name__)
        self.providers = self._load_config(config_path)

    def _load_config(self, path: str) -> Dict[str, ProviderSource]:
        """Load and validate the YAML registry."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise ConfigurationError(f"Source registry not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML file {path}: {e}")

        sources = data.get('sources') if isinstance(data, dict) else None
        if not isinstance(sources, dict):
            raise ConfigurationError(f"No 'sources' mapping in {path}")

        providers = {}
        for key, entry in sources.items():
            try:
                providers[key] = ProviderSource.from_dict(key, entry or {})
            except (KeyError, TypeError, AttributeError) as e:
                raise ConfigurationError(f"Invalid source '{key}' in {path}: {e}")

        self.logger.debug(f"Loaded {len(providers)} provider(s) from {path}")
        return providers

    def get_provider(self, key: str) -> Optional[ProviderSource]:
        """
        Get provider configuration by key.

        Args:
            key: Provider key

        Returns:
            ProviderSource or None
        """
        return self.providers.get(key)

    def get_all_providers(self) -> List[ProviderSource]:
        """All providers in configuration order."""
        return list(self.providers.values())

    def list_providers(self) -> List[str]:
        """List all provider keys."""
        return list(self.providers.keys())

    def page_count(self) -> int:
        return sum(len(provider.web_pages) for provider in self.providers.values())
