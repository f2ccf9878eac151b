"""
Tests for content normalization and fingerprinting.
"""

import pytest
from unittest.mock import patch

from bs4 import ParserRejectedMarkup

from upstream_monitor.utils.content import fingerprint, normalize


class TestFingerprint:
    """Tests for fingerprint()."""

    def test_default_length(self):
        assert len(fingerprint('<p>hello</p>')) == 16

    def test_custom_length(self):
        assert len(fingerprint('<p>hello</p>', length=32)) == 32

    def test_empty_document(self):
        """Empty input hashes like the SHA-256 of the empty string."""
        assert fingerprint('') == 'e3b0c44298fc1c14'

    def test_whitespace_insensitive(self):
        assert fingerprint('a  b\n\tc') == fingerprint('a b c')
        assert fingerprint('  a b c  ') == fingerprint('a b c')

    def test_timestamps_ignored(self):
        """Rendered timestamps do not count as changes."""
        first = '<p>Generated 2025-01-15T10:30:00 by server</p>'
        second = '<p>Generated 2026-02-01T23:59:59 by server</p>'
        assert fingerprint(first) == fingerprint(second)

    def test_date_without_time_is_content(self):
        assert fingerprint('Deprecated on 2025-01-15') != fingerprint('Deprecated on 2025-02-15')

    def test_content_change_detected(self):
        assert fingerprint('<p>v1 endpoint</p>') != fingerprint('<p>v2 endpoint</p>')

    def test_bytes_and_text_agree(self):
        assert fingerprint('Väder API'.encode('utf-8')) == fingerprint('Väder API')

    def test_markup_is_hashed(self):
        """The fingerprint works on raw markup, not on extracted text."""
        assert fingerprint('<p>same</p>') != fingerprint('<div>same</div>')


class TestNormalize:
    """Tests for normalize()."""

    def test_strips_tags(self):
        assert normalize('<html><body><h1>Title</h1><p>Body text</p></body></html>') == 'Title Body text'

    def test_removes_scripts_and_styles(self):
        html = (
            '<html><head><style>p { color: red; }</style>'
            '<script>var tracking = 1;</script></head>'
            '<body><p>Visible</p><noscript>Enable JS</noscript></body></html>'
        )
        assert normalize(html) == 'Visible'

    def test_decodes_entities(self):
        assert normalize('<p>Fish &amp; chips&nbsp;&lt;3</p>') == 'Fish & chips <3'

    def test_collapses_whitespace(self):
        assert normalize('<p>a\n\n   b</p>\n<p>c</p>') == 'a b c'

    def test_plain_text_passthrough(self):
        assert normalize('Just some text') == 'Just some text'

    def test_accepts_bytes(self):
        assert normalize(b'<p>bytes</p>') == 'bytes'

    def test_empty(self):
        assert normalize('') == ''

    def test_rejected_markup_falls_back_to_raw_text(self):
        with patch('upstream_monitor.utils.content.BeautifulSoup', side_effect=ParserRejectedMarkup('bad')):
            assert normalize('<![foo[ x ]]>\n\n  tail') == '<![foo[ x ]]> tail'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
