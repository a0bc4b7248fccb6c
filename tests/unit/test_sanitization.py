"""
Unit tests for bleach-based HTML sanitization.
"""

import pytest

from yarn_core.utils.sanitization import ALLOWED_TAGS, sanitize_html


@pytest.mark.unit
class TestSanitizeHtml:
    """Allow-list enforcement, attribute stripping and idempotence."""

    def test_plain_text_unchanged(self):
        assert sanitize_html('Once upon a time') == 'Once upon a time'

    @pytest.mark.parametrize('tag', sorted(ALLOWED_TAGS - {'br'}))
    def test_allowed_tags_survive(self, tag):
        assert sanitize_html(f'<{tag}>text</{tag}>') == f'<{tag}>text</{tag}>'

    def test_line_break_survives(self):
        assert '<br>' in sanitize_html('one<br>two')

    def test_disallowed_tag_stripped_text_kept(self):
        assert sanitize_html('<div>hello</div>') == 'hello'
        assert sanitize_html('<span>a</span><b>b</b>') == 'ab'

    def test_attributes_removed_from_allowed_tags(self):
        assert sanitize_html('<p class="x" style="color: red">hi</p>') == '<p>hi</p>'

    def test_script_tag_never_survives(self):
        cleaned = sanitize_html('<script>alert(1)</script>Hello')
        assert '<script' not in cleaned
        assert cleaned.endswith('Hello')

    def test_link_removed(self):
        cleaned = sanitize_html('<a href="http://example.com">link</a>')
        assert '<a' not in cleaned
        assert 'href' not in cleaned
        assert 'link' in cleaned

    def test_comments_removed(self):
        assert sanitize_html('before<!-- note -->after') == 'beforeafter'

    def test_stray_angle_bracket_escaped(self):
        assert sanitize_html('3 < 4') == '3 &lt; 4'

    @pytest.mark.parametrize('value', [
        'Plain words',
        '<p>Hello <strong>world</strong></p>',
        '<div><em>nested</em></div>',
        '3 < 4 & 5 > 2',
        '<ul><li>one</li><li>two</li></ul>',
    ])
    def test_idempotent(self, value):
        once = sanitize_html(value)
        assert sanitize_html(once) == once
