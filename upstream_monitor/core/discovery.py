"""
Consumer Discovery - finds consumer projects and the upstream APIs they call.

A consumer is a directory under the discovery root whose name starts with the
configured prefix. Its documentation file describes its purpose and tools;
its source files reveal which external API hosts it talks to.
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from upstream_monitor.models.consumer import Consumer, UpstreamApi, UsageSnapshot


DEFAULT_PREFIX = 'mcp-'
DEFAULT_DOC_FILENAME = 'CLAUDE.md'
DEFAULT_SOURCE_DIRS = ['src/clients', 'src/lib', 'src/types', 'src/tools', 'src']
DEFAULT_SNAPSHOT_DIRS = ['src/clients', 'src/tools']
DEFAULT_EXTENSIONS = ['.ts', '.js', '.py']
DEFAULT_EXCLUDED_HOSTS = ['localhost', '127.0.0.1', 'vercel.app']
UNKNOWN_API = 'Unknown API'

SNAPSHOT_FILES_PER_DIR = 3
SNAPSHOT_LINES_PER_FILE = 20
SNAPSHOT_KEYWORDS = ('http', 'fetch', 'API', 'endpoint')

_URL_CHARS = r"""[^'"`)\s]"""
_GENERIC_API_RE = re.compile(rf'https?://{_URL_CHARS}*/api/{_URL_CHARS}*')
_TRAILING_PUNCT_RE = re.compile(r"""['"`,;)}\]]+$""")

_USE_CASE_RE = re.compile(r'^(?:MCP )?server (?:wrapping|for)\s+(.+?)(?:\.|$)', re.I | re.M)
_TARGET_AUDIENCE_RE = re.compile(r'## Target Audience\s*\n([\s\S]*?)(?=\n##|\Z)', re.I)
_TOOL_ROW_RE = re.compile(r'\|\s*`([^`]+)`\s*\|')
_BULLET_RE = re.compile(r'[-*]\s*')


class ConsumerDiscovery:
    """Scans a directory tree for consumers and their upstream APIs."""

    def __init__(
        self,
        root: str,
        prefix: str = DEFAULT_PREFIX,
        doc_filename: str = DEFAULT_DOC_FILENAME,
        source_dirs: Optional[List[str]] = None,
        snapshot_dirs: Optional[List[str]] = None,
        extensions: Optional[List[str]] = None,
        api_names: Optional[Dict[str, str]] = None,
        excluded_hosts: Optional[List[str]] = None
    ):
        """
        Args:
            root: Directory containing the consumer projects
            prefix: Directory name prefix identifying a consumer
            doc_filename: Documentation file read from each consumer
            source_dirs: Directories (relative to a consumer) scanned for URLs
            snapshot_dirs: Directories excerpted for dependency analysis
            extensions: Source file extensions to scan
            api_names: Host substring to display name, also used as URL patterns
            excluded_hosts: Host substrings that never count as upstream APIs
        """
        self.root = root
        self.prefix = prefix
        self.doc_filename = doc_filename
        self.source_dirs = source_dirs or DEFAULT_SOURCE_DIRS
        self.snapshot_dirs = snapshot_dirs or DEFAULT_SNAPSHOT_DIRS
        self.extensions = tuple(extensions or DEFAULT_EXTENSIONS)
        self.api_names = api_names or {}
        self.excluded_hosts = excluded_hosts or DEFAULT_EXCLUDED_HOSTS
        self.logger = logging.getLogger(self.__class__.__name__)

        self._url_patterns = [
            re.compile(rf'https?://{_URL_CHARS}*{re.escape(host)}{_URL_CHARS}*')
            for host in self.api_names
        ]
        self._url_patterns.append(_GENERIC_API_RE)

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'ConsumerDiscovery':
        """Create discovery from the ``discovery`` section of settings.yaml."""
        return cls(
            root=settings.get('root', os.getcwd()),
            prefix=settings.get('prefix', DEFAULT_PREFIX),
            doc_filename=settings.get('doc_filename', DEFAULT_DOC_FILENAME),
            source_dirs=settings.get('source_dirs'),
            snapshot_dirs=settings.get('snapshot_dirs'),
            extensions=settings.get('extensions'),
            api_names=settings.get('api_names'),
            excluded_hosts=settings.get('excluded_hosts'),
        )

    def discover(self) -> List[Consumer]:
        """
        Find all consumers under the root directory.

        Returns:
            Consumers sorted by directory name
        """
        try:
            entries = sorted(os.listdir(self.root))
        except OSError as e:
            self.logger.warning(f"Cannot scan {self.root}: {e}")
            return []

        consumers = []
        for name in entries:
            path = os.path.join(self.root, name)
            if not name.startswith(self.prefix) or not os.path.isdir(path):
                continue
            try:
                consumers.append(self.inspect(path, name))
            except OSError as e:
                self.logger.warning(f"Could not extract info from {name}: {e}")

        self.logger.info(f"Discovered {len(consumers)} consumer(s) in {self.root}")
        return consumers

    def inspect(self, path: str, name: str) -> Consumer:
        """Build the Consumer descriptor for one project directory."""
        documentation = self._read_documentation(path)
        if documentation is None:
            use_case = f'Unknown - {self.doc_filename} not found'
            target_audience = 'Unknown'
            tools = []
        else:
            use_case, target_audience, tools = parse_documentation(documentation)

        return Consumer(
            name=name,
            path=path,
            use_case=use_case,
            target_audience=target_audience,
            tools=tools,
            upstream_apis=self._extract_api_urls(path),
        )

    def read_usage_snapshot(self, consumer: Consumer) -> UsageSnapshot:
        """
        Collect documentation and API-related source lines of a consumer.

        Args:
            consumer: Consumer to excerpt

        Returns:
            UsageSnapshot for dependency analysis
        """
        documentation = self._read_documentation(consumer.path)
        snippets = []

        for directory in self.snapshot_dirs:
            search_path = os.path.join(consumer.path, directory)
            if not os.path.isdir(search_path):
                continue
            try:
                entries = sorted(os.listdir(search_path))
            except OSError as e:
                self.logger.warning(f"Cannot read {search_path}: {e}")
                continue
            files = [f for f in entries if f.endswith(self.extensions)]
            for filename in files[:SNAPSHOT_FILES_PER_DIR]:
                try:
                    with open(os.path.join(search_path, filename), 'r', encoding='utf-8', errors='replace') as f:
                        lines = f.read().splitlines()
                except OSError as e:
                    self.logger.debug(f"Skipping {filename}: {e}")
                    continue
                relevant = [
                    line for line in lines
                    if any(keyword in line for keyword in SNAPSHOT_KEYWORDS)
                ][:SNAPSHOT_LINES_PER_FILE]
                if relevant:
                    snippets.append(f"// {filename}\n" + "\n".join(relevant))

        return UsageSnapshot(
            documentation=documentation if documentation is not None else f'{self.doc_filename} not found',
            source_snippets=snippets,
        )

    def _read_documentation(self, path: str) -> Optional[str]:
        try:
            with open(os.path.join(path, self.doc_filename), 'r', encoding='utf-8') as f:
                return f.read()
        except OSError:
            return None

    def _extract_api_urls(self, consumer_path: str) -> List[UpstreamApi]:
        apis = []
        seen = set()

        for directory in self.source_dirs:
            search_path = os.path.join(consumer_path, directory)
            if not os.path.isdir(search_path):
                continue
            for file_path in self._find_source_files(search_path):
                try:
                    with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
                        content = f.read()
                except OSError as e:
                    self.logger.debug(f"Skipping {file_path}: {e}")
                    continue
                for api in self.extract_apis_from_source(content, file_path):
                    if api.base_url not in seen:
                        seen.add(api.base_url)
                        apis.append(api)

        return apis

    def _find_source_files(self, directory: str) -> List[str]:
        files = []
        for current, dirnames, filenames in os.walk(directory):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith('.'))
            files.extend(
                os.path.join(current, filename)
                for filename in sorted(filenames)
                if filename.endswith(self.extensions)
            )
        return files

    def extract_apis_from_source(self, content: str, file_path: str) -> List[UpstreamApi]:
        """Find upstream API base URLs mentioned in a source file."""
        apis = []
        for pattern in self._url_patterns:
            for match in pattern.finditer(content):
                url = _TRAILING_PUNCT_RE.sub('', match.group(0))
                base_url = extract_base_url(url)
                if base_url and self._is_valid_api_url(base_url):
                    apis.append(UpstreamApi(
                        name=self.guess_api_name(base_url),
                        base_url=base_url,
                        source=file_path,
                    ))
        return apis

    def guess_api_name(self, base_url: str) -> str:
        for host, name in self.api_names.items():
            if host in base_url:
                return name
        return UNKNOWN_API

    def _is_valid_api_url(self, base_url: str) -> bool:
        return not any(host in base_url for host in self.excluded_hosts)


def extract_base_url(url: str) -> str:
    """Scheme and host of a URL, or '' if it does not parse."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return ''
    if not parsed.scheme or not parsed.netloc:
        return ''
    return f"{parsed.scheme}://{parsed.netloc}"


def parse_documentation(content: str):
    """
    Extract use case, target audience and tool names from a consumer's docs.

    Returns:
        Tuple of (use_case, target_audience, tools)
    """
    use_case = ''
    match = _USE_CASE_RE.search(content)
    if match:
        use_case = match.group(1).strip()

    target_audience = ''
    match = _TARGET_AUDIENCE_RE.search(content)
    if match:
        lines = match.group(1).strip().split('\n')[:5]
        target_audience = _BULLET_RE.sub('', ' '.join(lines)).strip()

    tools = [
        name for name in _TOOL_ROW_RE.findall(content)
        if not name.startswith('Tool') and 'Description' not in name
    ]

    return use_case, target_audience, tools
