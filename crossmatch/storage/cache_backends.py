# crossmatch/storage/cache_backends.py

"""Key → serialized-value stores behind the result cache."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Protocol

from redis import Redis

from crossmatch.config.settings import Settings

logger = logging.getLogger("crossmatch.cache")


class CacheBackend(Protocol):
    """Minimal store contract: get, set-with-expiry, delete."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: int) -> None: ...

    def delete(self, key: str) -> None: ...


@dataclass
class CacheEntry:
    """A serialized value and the wall-clock time it stops being valid."""

    value: str
    expires_at: float


class MemoryCacheBackend:
    """Thread-safe in-process store with TTL expiry.

    Expired entries are dropped lazily on read and by a coarse periodic
    sweep running in a daemon thread (see :meth:`start_sweeper`).
    """

    def __init__(
        self, sweep_interval: float = Settings.CACHE_SWEEP_INTERVAL,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._sweep_interval = sweep_interval
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if missing or expired."""
        now = time.time()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= now:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: str, ttl: int) -> None:
        """Store *value* under *key* for *ttl* seconds."""
        with self._lock:
            self._entries[key] = CacheEntry(
                value=value, expires_at=time.time() + ttl
            )

    def delete(self, key: str) -> None:
        """Remove *key* if present."""
        with self._lock:
            self._entries.pop(key, None)

    def evict_expired(self) -> int:
        """Remove entries past their expiry; returns the eviction count."""
        now = time.time()
        with self._lock:
            expired = [
                key
                for key, entry in self._entries.items()
                if entry.expires_at <= now
            ]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(
                "Evicted %d expired cache entries", len(expired)
            )
        return len(expired)

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self._sweep_interval):
            self.evict_expired()

    def start_sweeper(self) -> None:
        """Start the background eviction sweep (idempotent)."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop.clear()
        self._sweeper = threading.Thread(
            target=self._sweep_loop,
            name="crossmatch-cache-sweeper",
            daemon=True,
        )
        self._sweeper.start()

    def stop_sweeper(self) -> None:
        """Signal the sweep thread to exit and wait for it."""
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=self._sweep_interval)
            self._sweeper = None


class RedisCacheBackend:
    """Redis-backed store; Redis enforces the expiry itself."""

    def __init__(self, client: Redis) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheBackend":
        """Connect with string responses so values round-trip as str."""
        return cls(Redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> str | None:
        value = self.client.get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str, ttl: int) -> None:
        self.client.set(key, value, ex=ttl)

    def delete(self, key: str) -> None:
        self.client.delete(key)


def build_cache_backend() -> CacheBackend | None:
    """Build the backend selected by CACHE_BACKEND.

    Returns None (pass-through caching) for ``none``, for ``redis``
    without a reachable REDIS_URL, and for unknown values.
    """
    kind = Settings.CACHE_BACKEND.strip().lower()

    if kind == "memory":
        backend = MemoryCacheBackend()
        backend.start_sweeper()
        return backend

    if kind == "redis":
        if not Settings.REDIS_URL:
            logger.warning("REDIS_URL not configured, caching disabled")
            return None
        try:
            redis_backend = RedisCacheBackend.from_url(Settings.REDIS_URL)
            redis_backend.client.ping()
        except Exception as exc:
            logger.warning(
                "Redis unreachable (%s), caching disabled", exc
            )
            return None
        return redis_backend

    if kind != "none":
        logger.warning(
            "Unknown CACHE_BACKEND '%s', caching disabled", kind
        )
    return None
