"""
Input sanitization applied to every admin payload before validation.
Strips markup so that CMS text fields only ever store plain text.
"""

import html
import re

import bleach

# Script/style elements are dropped with their content; bleach keeps the text of stripped tags
_EXECUTABLE_BLOCKS = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def _strip_tags(value: str) -> str:
    # bleach escapes the text it keeps; stored values are plain text
    return html.unescape(bleach.clean(value, tags=[], attributes={}, strip=True))


def sanitize_string(value: str) -> str:
    """
    Remove HTML tags and control characters, then trim.

    Comparison signs that are not part of a tag are kept.

    >>> sanitize_string("  <b>Eye exam</b><script>x()</script> ")
    'Eye exam'
    >>> sanitize_string("Lenses < 1.5 index; > 1.67 costs more")
    'Lenses < 1.5 index; > 1.67 costs more'
    """
    if not isinstance(value, str):
        return ""

    cleaned = _CONTROL_CHARS.sub("", value)
    cleaned = _EXECUTABLE_BLOCKS.sub("", cleaned)
    cleaned = _strip_tags(cleaned)
    # Unescaping may reveal encoded markup such as &lt;img&gt;
    cleaned = _EXECUTABLE_BLOCKS.sub("", cleaned)
    cleaned = _strip_tags(cleaned)
    return cleaned.strip()


def sanitize_email(value: str) -> str:
    """Lowercase and trim an email address."""
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def sanitize_optional(value: str | None) -> str | None:
    """Sanitize a string, turning blank results into None."""
    if value is None:
        return None
    cleaned = sanitize_string(value)
    return cleaned or None
