"""
TTLCache: small thread-safe in-memory key/value store with per-entry expiry.
Backs both the translation cache and the duplicate suppressor.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any, Hashable, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


class TTLCache:

    def __init__(self, clock, default_ttl: float, max_entries: int = 5000):
        self._clock = clock
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._entries: "OrderedDict[Hashable, tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired_locked()
            return len(self._entries)

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Value for key, or default if absent or expired."""
        with self._lock:
            value = self._get_locked(key)
            return default if value is _MISSING else value

    def contains(self, key: Hashable) -> bool:
        with self._lock:
            return self._get_locked(key) is not _MISSING

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            self._set_locked(key, value, ttl)

    def add(self, key: Hashable, value: Any = True, ttl: Optional[float] = None) -> bool:
        """
        Atomic check-and-set: store value only if key is absent (or expired).
        Returns True when the value was stored.
        """
        with self._lock:
            if self._get_locked(key) is not _MISSING:
                return False
            self._set_locked(key, value, ttl)
            return True

    def delete(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        with self._lock:
            return self._purge_expired_locked()

    # --- Internals (caller holds the lock) ---

    def _get_locked(self, key):
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        expires_at, value = entry
        if expires_at <= self._clock.now():
            del self._entries[key]
            return _MISSING
        return value

    def _set_locked(self, key, value, ttl):
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = (self._clock.now() + ttl, value)
        self._entries.move_to_end(key)

        if len(self._entries) > self.max_entries:
            self._purge_expired_locked()
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache full, evicted oldest entry %s", evicted)

    def _purge_expired_locked(self) -> int:
        now = self._clock.now()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)
