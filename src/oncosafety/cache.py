"""Optional in-process cache for analysis results.

Analyses are cheap and deterministic, so caching is purely an
optimization: a cache miss (or no cache at all) always gives the same
answer. Entries expire after a TTL and the oldest entry is dropped once the
cache is full.

The key includes the medication display names in list order, not just the
sorted drug set, because alert titles repeat the names exactly as given.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable, Sequence
from typing import Any

from oncosafety.config import CACHE_MAX_ENTRIES, CACHE_TTL_SECONDS
from oncosafety.models import Medication, PatientContext


class AnalysisCache:
    """Thread-safe TTL cache keyed by (medication list, patient context)."""

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        max_entries: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def make_key(medications: Sequence[Medication], context: PatientContext) -> Hashable:
        return (tuple((med.name, med.key) for med in medications), context)

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)
            self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
