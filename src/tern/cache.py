"""In-memory response cache with a fixed time-to-live.

The cache maps a request path to the final HTML rendered for it.
Entries are never swept in the background: a stale entry is evicted by
the read that finds it.  Entry count is bounded by the number of
routes, not by traffic, so no size limit is applied.

Which requests may use the cache is the HTTP layer's decision (only
``GET`` without a query string); the cache itself stores whatever it is
given.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from tern.context import RenderContext

logger = logging.getLogger("tern.cache")

RenderFn = Callable[[str, RenderContext], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A rendered page and the clock reading when it was stored."""

    content: str
    created_at: float


class ResponseCache:
    """Path → rendered HTML, valid for ``max_age`` seconds.

    Owned by whoever runs the request loop (normally the
    :class:`~tern.app.App`) and lives as long as it does.

    Thread safety:
        ``get`` (including its eviction) and ``set`` each run under one
        lock, so the cache is safe to share between worker threads.

    Args:
        max_age: Seconds an entry stays valid.  An entry is fresh while
            ``now - created_at <= max_age``.
        clock: Monotonic time source in seconds.
    """

    __slots__ = ("_clock", "_entries", "_lock", "max_age")

    def __init__(self, max_age: float = 300.0, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.max_age = max_age
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> CacheEntry | None:
        """Return the fresh entry for *path*, evicting it if stale."""
        with self._lock:
            entry = self._entries.get(path)
            if entry is None:
                return None
            if self._clock() - entry.created_at > self.max_age:
                del self._entries[path]
                logger.debug("Evicted stale cache entry for %s", path)
                return None
            return entry

    def set(self, path: str, content: str) -> CacheEntry:
        """Store *content* for *path*, replacing any previous entry."""
        entry = CacheEntry(content=content, created_at=self._clock())
        with self._lock:
            self._entries[path] = entry
        return entry

    async def warm(self, paths: Iterable[str], render: RenderFn) -> int:
        """Render and store each path with an empty context.

        Best-effort: a path that fails to render (for example one that
        needs query parameters it does not get) is logged and skipped.

        Returns:
            Number of entries stored.
        """
        stored = 0
        for path in paths:
            try:
                content = await render(path, RenderContext.empty())
            except Exception as exc:
                logger.warning("Skipped pre-rendering %s: %s", path, exc)
                continue
            self.set(path, content)
            stored += 1
            logger.debug("Cached %s", path)
        return stored

    def invalidate(self, path: str) -> bool:
        """Drop the entry for *path*.  Returns whether one existed."""
        with self._lock:
            return self._entries.pop(path, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ResponseCache(max_age={self.max_age!r}, entries={len(self)})"
