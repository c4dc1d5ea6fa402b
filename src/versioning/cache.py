"""Bounded, thread-safe memo for parse results."""

from __future__ import annotations

import threading
from typing import Any, Dict, Hashable, Optional

from constants import Constants


class ParseCache:
    """Dictionary cache that is cleared wholesale once it reaches its bound.

    The bound is read from ``Constants.PARSE_CACHE_MAX_ENTRIES`` at insert time
    unless one is given explicitly, so config overrides apply to live caches.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self._max_entries = max_entries
        self._entries: Dict[Hashable, Any] = {}
        # Guarded by _lock; parsers may be called from several threads.
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        if self._max_entries is not None:
            return self._max_entries
        return int(Constants.PARSE_CACHE_MAX_ENTRIES)

    def get(self, key: Hashable) -> Any:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            if len(self._entries) >= self.max_entries:
                self._entries = {}
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
