"""Process-lifetime TTL cache for resolved domain contexts."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from dashcontext.models.domain import DomainContext

logger = structlog.get_logger(__name__)

CacheKey = tuple[str, str]  # (raw domain, path)

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_MAX_ENTRIES = 1000


class ContextCache:
    """Maps ``(domain, path)`` to a previously resolved context.

    Stale entries are skipped by ``get`` but stay in place. They are purged
    in one scan by ``maybe_evict``, which only does work once the entry count
    exceeds ``max_entries``.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        # key -> (value, created_at)
        self._entries: dict[CacheKey, tuple[DomainContext, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> DomainContext | None:
        """Return the live entry for ``key``, or None when absent or stale."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        value, created_at = entry
        if self._clock() - created_at > self._ttl:
            return None
        return value

    def put(self, key: CacheKey, value: DomainContext) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock())
        self.maybe_evict()

    def maybe_evict(self) -> int:
        """Drop stale entries if above the high-water mark. Returns the number removed."""
        with self._lock:
            if len(self._entries) <= self._max_entries:
                return 0
            now = self._clock()
            expired = [k for k, (_, created) in self._entries.items() if now - created > self._ttl]
            for k in expired:
                del self._entries[k]
            remaining = len(self._entries)
        if expired:
            logger.debug("context_cache_evicted", removed=len(expired), remaining=remaining)
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
