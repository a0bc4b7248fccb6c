"""
HTML sanitization for user-authored thread and strand text.

Uses bleach with a fixed allow-list of formatting tags. Anything outside the
list, including every script-bearing construct, is stripped and any stray
markup is re-escaped, so the result never carries an executable tag.
"""

import bleach

ALLOWED_TAGS = frozenset({'p', 'br', 'strong', 'em', 'u', 'ol', 'ul', 'li'})
ALLOWED_ATTRIBUTES = {}

# bleach output is normally stable after one pass; the cap bounds pathological input
MAX_PASSES = 5


def _clean_once(content: str) -> str:
    return bleach.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=[],
        strip=True,
        strip_comments=True,
    )


def sanitize_html(content: str) -> str:
    """
    Sanitize HTML down to the formatting allow-list.

    Allowed tags (``p, br, strong, em, u, ol, ul, li``) survive without any
    attributes. Disallowed tags are removed while their text is kept, and
    comments are dropped. The function is idempotent: its output is already
    a fixed point of the cleaner.

    Args:
        content: Untrusted text, possibly containing markup.

    Returns:
        str: Safe HTML fragment.
    """
    cleaned = _clean_once(content)
    for _ in range(MAX_PASSES):
        again = _clean_once(cleaned)
        if again == cleaned:
            break
        cleaned = again
    return cleaned
