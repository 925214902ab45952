"""
Bounded cache of per-document analysis results.

Entries are keyed by document URI and remain valid only for the exact
(version, language id) they were computed from. Stale entries are swept
periodically, and the least recently accessed entry is evicted when the
cache grows past its bound.

Thread Safety:
- At most one computation runs per URI at a time
- Different URIs may compute concurrently
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Optional, TypeVar

from .models import Snapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _CacheEntry(Generic[T]):
    version: int
    language_id: Optional[str]
    accessed_at: float
    model: T


class LanguageModelCache(Generic[T]):
    """
    Get-or-compute cache for models derived from document snapshots.

    Args:
        max_entries: Maximum number of cached documents
        cleanup_interval: Seconds between sweeps and maximum idle age of an
            entry; 0 disables the sweep thread
        parse: Function computing the model for a snapshot
        clock: Time source, overridable for tests
    """

    def __init__(
        self,
        max_entries: int,
        cleanup_interval: float,
        parse: Callable[[Snapshot], T],
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max_entries = max_entries
        self._cleanup_interval = cleanup_interval
        self._parse = parse
        self._clock = clock
        self._entries: Dict[str, _CacheEntry[T]] = {}
        self._lock = threading.Lock()
        self._uri_locks: Dict[str, threading.Lock] = {}
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

        if cleanup_interval > 0:
            self._sweeper = threading.Thread(
                target=self._sweep_loop, name="language-model-cache-sweep", daemon=True
            )
            self._sweeper.start()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, uri: str) -> bool:
        with self._lock:
            return uri in self._entries

    def _uri_lock(self, uri: str) -> threading.Lock:
        with self._lock:
            return self._uri_locks.setdefault(uri, threading.Lock())

    def get(self, snapshot: Snapshot) -> T:
        """
        Return the cached model for a snapshot, computing it if needed.

        A cached entry is reused only when its version and language id match
        the snapshot; otherwise the model is recomputed and replaces it.
        """
        with self._uri_lock(snapshot.uri):
            with self._lock:
                entry = self._entries.get(snapshot.uri)
                if (entry is not None
                        and entry.version == snapshot.version
                        and entry.language_id == snapshot.language_id):
                    entry.accessed_at = self._clock()
                    return entry.model

            model = self._parse(snapshot)

            with self._lock:
                self._entries[snapshot.uri] = _CacheEntry(
                    version=snapshot.version,
                    language_id=snapshot.language_id,
                    accessed_at=self._clock(),
                    model=model,
                )
                if len(self._entries) > self._max_entries:
                    self._evict_oldest()
            return model

    def _evict_oldest(self) -> None:
        oldest = min(self._entries, key=lambda uri: self._entries[uri].accessed_at)
        del self._entries[oldest]
        logger.debug(f"Evicted cached model for {oldest}")

    def sweep(self) -> int:
        """Remove entries idle for longer than the cleanup interval; return the count."""
        cutoff = self._clock() - self._cleanup_interval
        with self._lock:
            expired = [uri for uri, entry in self._entries.items() if entry.accessed_at < cutoff]
            for uri in expired:
                del self._entries[uri]
        if expired:
            logger.debug(f"Swept {len(expired)} stale cached models")
        return len(expired)

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self._cleanup_interval):
            self.sweep()

    def on_document_removed(self, uri: str) -> None:
        with self._lock:
            self._entries.pop(uri, None)
            self._uri_locks.pop(uri, None)

    def dispose(self) -> None:
        """Stop the sweep thread and drop every entry."""
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=1)
            self._sweeper = None
        with self._lock:
            self._entries.clear()
            self._uri_locks.clear()
