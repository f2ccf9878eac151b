"""
Pytest configuration and fixtures.
"""

import pytest
import os
import tempfile
import json
from unittest.mock import Mock

from upstream_monitor.handlers.base_handler import FetchResult
from upstream_monitor.models.consumer import Consumer, UpstreamApi
from upstream_monitor.models.source import ProviderSource, WebPage
from upstream_monitor.utils.llm_client import LLMResponse


SAMPLE_SOURCES_YAML = """
sources:
  smhi:
    name: SMHI Open Data
    web_pages:
      - url: https://opendata.smhi.se/apidocs/
        description: API documentation
      - url: https://www.smhi.se/news
        description: News
  sgu:
    name: SGU
    web_pages:
      - url: https://www.sgu.se/api
        description: Geological data
"""


@pytest.fixture
def temp_state_file():
    """Create a temporary state file for testing."""
    fd, path = tempfile.mkstemp(suffix='.json')
    os.close(fd)
    with open(path, 'w') as f:
        json.dump({}, f)
    yield path
    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def sources_file(tmp_path):
    """Sample sources.yaml with two providers."""
    path = tmp_path / 'sources.yaml'
    path.write_text(SAMPLE_SOURCES_YAML)
    return str(path)


@pytest.fixture
def smhi_provider():
    return ProviderSource(
        key='smhi',
        name='SMHI Open Data',
        web_pages=[
            WebPage(url='https://opendata.smhi.se/apidocs/', description='API documentation'),
            WebPage(url='https://www.smhi.se/news', description='News'),
        ],
    )


@pytest.fixture
def sample_consumer(tmp_path):
    return Consumer(
        name='mcp-weather',
        path=str(tmp_path / 'mcp-weather'),
        use_case='SMHI weather forecasts',
        upstream_apis=[
            UpstreamApi(name='SMHI Open Data', base_url='https://opendata-download-metfcst.smhi.se'),
        ],
    )


@pytest.fixture
def mock_llm():
    """Stand-in for LLMClient; set call.return_value or call.side_effect per test."""
    llm = Mock()
    llm.is_configured = True
    llm.call.return_value = LLMResponse.failed('no_result', 'not configured in test')
    return llm


def ok(data):
    """Successful analysis response carrying data."""
    return LLMResponse(success=True, data=data)


def page(text, status_code=200, url='https://example.com'):
    return FetchResult(url=url, status_code=status_code, text=text)
