"""
DuplicateSuppressor: short-lived memory of (conversation, message) pairs.
Intercom retries webhooks and can fire several topics for the same message;
only the first delivery inside the window gets processed.
"""

import hashlib
import logging

from app.services.ttl_cache import TTLCache

logger = logging.getLogger(__name__)


def fingerprint(conversation_id: str, text: str) -> str:
    """Short stable hash identifying "the same message"."""
    raw = f"{conversation_id}\x1f{text}".encode("utf-8")
    return hashlib.sha256(raw).hexdigest()[:16]


class DuplicateSuppressor:

    def __init__(self, clock, window_seconds: float = 60.0, max_entries: int = 10000):
        self.window_seconds = window_seconds
        self._seen = TTLCache(clock, default_ttl=window_seconds, max_entries=max_entries)

    def should_process(self, conversation_id: str, text: str) -> bool:
        """True the first time a pair is seen inside the window; marks it as seen."""
        key = fingerprint(conversation_id, text)
        if self._seen.add(key):
            return True

        logger.info("Duplicate event suppressed: conversation=%s fingerprint=%s", conversation_id, key)
        return False
