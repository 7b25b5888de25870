"""
TextNormalizer: turns Intercom HTML message bodies into plain text.
Strips markup, links and whitespace noise, and drops short UI fragments.
"""

import html
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)


# --- PATTERNS ---

_LINE_BREAK_RE = re.compile(r'<\s*br\s*/?\s*>|</\s*(?:p|div|li|h[1-6]|tr|blockquote)\s*>', re.IGNORECASE)
_TAG_RE = re.compile(r'</?[A-Za-z!][^>]*>')
_URL_RE = re.compile(r'(?:https?://|www\.)[^\s<>"]+', re.IGNORECASE)
_SPACES_RE = re.compile(r'[ \t\r\f\v\u00a0]+')
_BLANK_LINES_RE = re.compile(r'\n{2,}')

# --- GARBAGE FILTER ---

GARBAGE_MAX_LENGTH = 80

_ATTRIBUTE_RE = re.compile(r'\b[\w-]+\s*=\s*"[^"]*"')
_UI_VOCABULARY_RE = re.compile(r'\b(?:menu|dropdown|select|option|button|checkbox)s?\b', re.IGNORECASE)


def is_garbage(text: str) -> bool:
    """Short leftovers that look like markup attributes or widget labels, not a message."""
    if len(text) >= GARBAGE_MAX_LENGTH:
        return False
    return bool(_ATTRIBUTE_RE.search(text) or _UI_VOCABULARY_RE.search(text))


def _strip_markup(text: str) -> str:
    text = _LINE_BREAK_RE.sub("\n", text)
    return _TAG_RE.sub("", text)


def normalize(raw: Optional[str]) -> str:
    """
    Convert a raw message body into a NormalizedMessage.

    Returns "" for missing input and for short UI/markup noise.
    """
    if not raw:
        return ""

    text = _strip_markup(raw)
    # Escaped markup (&lt;b&gt;) becomes real tags once unescaped
    text = _strip_markup(html.unescape(text))
    text = _URL_RE.sub("", text)

    lines = [_SPACES_RE.sub(" ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = _BLANK_LINES_RE.sub("\n", text).strip()

    if text and is_garbage(text):
        logger.info("UI/markup fragment discarded: '%s'", text[:50])
        return ""

    return text
