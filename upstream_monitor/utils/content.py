"""
Content normalization and fingerprinting.

normalize() produces readable text for analysis; fingerprint() produces a
short change indicator that ignores whitespace and rendered timestamps.
The two are independent: a page is hashed from its raw markup, not from the
normalized text.
"""

import hashlib
import re
from typing import Union

from bs4 import BeautifulSoup, ParserRejectedMarkup


DEFAULT_HASH_LENGTH = 16
TIMESTAMP_PLACEHOLDER = '[timestamp]'

_WHITESPACE_RE = re.compile(r'\s+')
_TIMESTAMP_RE = re.compile(r'\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}')

# Elements whose text is never page content
_NON_CONTENT_TAGS = ['script', 'style', 'noscript']


def _to_text(raw: Union[str, bytes]) -> str:
    if isinstance(raw, bytes):
        return raw.decode('utf-8', errors='replace')
    return raw


def normalize(raw: Union[str, bytes]) -> str:
    """
    Extract analyzable text from an HTML (or plain text) document.

    Markup the parser rejects is returned as whitespace-collapsed raw text
    so the page can still be analyzed.

    Args:
        raw: Fetched document body

    Returns:
        Text with markup, scripts and styles removed, entities decoded and
        whitespace collapsed
    """
    text = _to_text(raw)
    try:
        soup = BeautifulSoup(text, 'html.parser')
    except ParserRejectedMarkup:
        return _WHITESPACE_RE.sub(' ', text).strip()

    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()

    text = soup.get_text(separator=' ')
    return _WHITESPACE_RE.sub(' ', text).strip()


def fingerprint(raw: Union[str, bytes], length: int = DEFAULT_HASH_LENGTH) -> str:
    """
    Compute a short, stable digest of a document.

    Args:
        raw: Fetched document body
        length: Number of hex characters to keep

    Returns:
        Truncated SHA-256 hex digest of the whitespace- and
        timestamp-normalized content
    """
    normalized = _WHITESPACE_RE.sub(' ', _to_text(raw))
    normalized = _TIMESTAMP_RE.sub(TIMESTAMP_PLACEHOLDER, normalized).strip()
    return hashlib.sha256(normalized.encode('utf-8')).hexdigest()[:length]
