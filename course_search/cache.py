"""Per-query ref cache with age-based eviction."""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Iterable, Optional, Tuple

from loguru import logger

from . import config
from .pipeline_types import CacheEntry, ScoredRef

Clock = Callable[[], float]


class QueryCache:
    """
    Maps a normalized query to its ranked refs.

    Entries are evicted only by ``sweep`` and only by age: anything not read
    or written within ``ttl_seconds`` goes.  There is no size bound, so the
    map grows with the number of distinct queries seen in one TTL period.
    """

    def __init__(self, ttl_seconds: float = config.CACHE_TTL_SECONDS, clock: Clock = time.time):
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._data: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for ``key`` and mark it as just used."""
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            entry.last_access = self._clock()
            return entry

    def put(self, key: str, refs: Iterable[ScoredRef], was_subject_match: bool) -> CacheEntry:
        entry = CacheEntry(
            refs=tuple(refs),
            was_subject_match=was_subject_match,
            last_access=self._clock(),
        )
        with self._lock:
            self._data[key] = entry
        return entry

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Tuple[Iterable[ScoredRef], bool]],
    ) -> Tuple[CacheEntry, bool]:
        """
        Cached entry for ``key``, computing and storing it on a miss.
        ``compute`` returns ``(refs, was_subject_match)``.  Returns
        ``(entry, hit)``.
        """
        entry = self.get(key)
        if entry is not None:
            logger.debug("Query cache hit: '{}'", key)
            return entry, True
        refs, was_subject_match = compute()
        return self.put(key, refs, was_subject_match), False

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop entries last used more than ``ttl_seconds`` ago. Returns the count."""
        if now is None:
            now = self._clock()
        cutoff = now - self._ttl_seconds
        evicted = 0
        with self._lock:
            for key in list(self._data):
                if self._data[key].last_access < cutoff:
                    del self._data[key]
                    evicted += 1
            remaining = len(self._data)
        logger.info("Query cache sweep: evicted {} entries, {} remaining", evicted, remaining)
        return evicted

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data


class CacheSweeper:
    """
    Background thread that calls ``cache.sweep()`` every ``interval_seconds``.

    ``start`` is idempotent; ``stop`` wakes the thread and waits for it.
    ``run_once`` sweeps synchronously, which is what tests drive.
    """

    def __init__(
        self,
        cache: QueryCache,
        interval_seconds: float = config.CACHE_SWEEP_INTERVAL_SECONDS,
    ):
        self._cache = cache
        self._interval_seconds = float(interval_seconds)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        return self._cache.sweep()

    def _loop(self) -> None:
        while not self._stop_event.wait(self._interval_seconds):
            try:
                self.run_once()
            except Exception as e:  # keep the sweeper alive
                logger.exception("Query cache sweep failed: {}", e)

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._loop, name="query-cache-sweeper", daemon=True)
            self._thread.start()
        logger.info("Started query cache sweeper (every {}s)", self._interval_seconds)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            self._thread = None
        thread.join(timeout)
        logger.info("Stopped query cache sweeper")
