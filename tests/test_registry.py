"""
Tests for SourceRegistry and MonitorConfig.
"""

import pytest
from datetime import timedelta

from upstream_monitor.core.config import MonitorConfig, load_yaml
from upstream_monitor.core.exceptions import ConfigurationError
from upstream_monitor.core.registry import SourceRegistry


class TestSourceRegistry:
    """Tests for SourceRegistry."""

    def test_load_providers(self, sources_file):
        registry = SourceRegistry(sources_file)

        assert registry.list_providers() == ['smhi', 'sgu']
        assert registry.page_count() == 3

        smhi = registry.get_provider('smhi')
        assert smhi.name == 'SMHI Open Data'
        assert [p.url for p in smhi.web_pages] == [
            'https://opendata.smhi.se/apidocs/',
            'https://www.smhi.se/news',
        ]
        assert smhi.web_pages[0].description == 'API documentation'

    def test_get_unknown_provider(self, sources_file):
        assert SourceRegistry(sources_file).get_provider('nope') is None

    def test_all_providers_in_order(self, sources_file):
        providers = SourceRegistry(sources_file).get_all_providers()
        assert [p.key for p in providers] == ['smhi', 'sgu']

    def test_name_defaults_to_key(self, tmp_path):
        path = tmp_path / 'sources.yaml'
        path.write_text('sources:\n  acme:\n    web_pages:\n      - url: https://acme.test\n')

        provider = SourceRegistry(str(path)).get_provider('acme')

        assert provider.name == 'acme'
        assert provider.web_pages[0].description == ''

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            SourceRegistry(str(tmp_path / 'absent.yaml'))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'sources.yaml'
        path.write_text('sources: [unclosed')

        with pytest.raises(ConfigurationError):
            SourceRegistry(str(path))

    def test_missing_sources_key(self, tmp_path):
        path = tmp_path / 'sources.yaml'
        path.write_text('providers: {}\n')

        with pytest.raises(ConfigurationError):
            SourceRegistry(str(path))

    def test_page_without_url(self, tmp_path):
        path = tmp_path / 'sources.yaml'
        path.write_text('sources:\n  acme:\n    web_pages:\n      - description: no url\n')

        with pytest.raises(ConfigurationError):
            SourceRegistry(str(path))


class TestMonitorConfig:
    """Tests for MonitorConfig loading."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ('GROQ_API_KEY', 'SLACK_WEBHOOK_URL', 'MONITOR_CONFIG_DIR', 'MONITOR_STATE_FILE'):
            monkeypatch.delenv(name, raising=False)

    def _load(self, config_dir, **kwargs):
        return MonitorConfig.load(config_dir=str(config_dir), env_file=str(config_dir / 'missing.env'), **kwargs)

    def test_defaults_without_settings(self, tmp_path):
        config = self._load(tmp_path)

        assert config.sources_path == str(tmp_path / 'sources.yaml')
        assert config.http_timeout == 30
        assert config.max_workers == 4
        assert config.cache_days == 30
        assert config.freshness_window == timedelta(days=30)
        assert config.hash_length == 16
        assert config.page_content_limit == 15000
        assert config.documentation_limit == 5000
        assert config.snippet_limit == 5000
        assert config.groq_api_key is None
        assert config.slack_webhook_url is None
        assert config.state_path.endswith('last-check.json')

    def test_settings_file(self, tmp_path):
        (tmp_path / 'settings.yaml').write_text(
            'http:\n  timeout: 5\n  max_workers: 2\n'
            'analysis:\n  cache_days: 7\n  model: some-model\n'
            'state:\n  path: /tmp/custom-state.json\n'
            'discovery:\n  prefix: svc-\n'
            'logging:\n  level: DEBUG\n'
        )

        config = self._load(tmp_path)

        assert config.http_timeout == 5
        assert config.max_workers == 2
        assert config.freshness_window == timedelta(days=7)
        assert config.model == 'some-model'
        assert config.state_path == '/tmp/custom-state.json'
        assert config.discovery['prefix'] == 'svc-'
        assert 'root' in config.discovery
        assert config.log_level == 'DEBUG'
        assert config.http_settings == {
            'timeout': 5,
            'user_agent': config.user_agent,
            'max_retries': 1,
        }

    def test_explicit_state_path_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv('MONITOR_STATE_FILE', '/tmp/from-env.json')
        config = self._load(tmp_path, state_path='/tmp/explicit.json')
        assert config.state_path == '/tmp/explicit.json'

    def test_state_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv('MONITOR_STATE_FILE', '/tmp/from-env.json')
        assert self._load(tmp_path).state_path == '/tmp/from-env.json'

    def test_secrets_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv('GROQ_API_KEY', 'gsk_test')
        monkeypatch.setenv('SLACK_WEBHOOK_URL', 'https://hooks.slack.test/x')

        config = self._load(tmp_path)

        assert config.groq_api_key == 'gsk_test'
        assert config.slack_webhook_url == 'https://hooks.slack.test/x'

    def test_invalid_settings_yaml_uses_defaults(self, tmp_path):
        (tmp_path / 'settings.yaml').write_text('http: [broken')
        assert self._load(tmp_path).http_timeout == 30

    def test_load_yaml_missing(self, tmp_path):
        assert load_yaml(str(tmp_path / 'nope.yaml')) == {}


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
