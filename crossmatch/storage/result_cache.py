# crossmatch/storage/result_cache.py

"""Best-effort read-through cache over a pluggable backend."""

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from crossmatch.storage.cache_backends import CacheBackend

logger = logging.getLogger("crossmatch.cache")

T = TypeVar("T")


def _identity(value: Any) -> Any:
    return value


class ResultCache:
    """Read-through cache that never fails the request.

    Values are stored as JSON.  Without a backend every call recomputes,
    and backend errors are logged and treated as a miss (on read) or
    ignored (on write).
    """

    def __init__(self, backend: CacheBackend | None) -> None:
        self.backend = backend

    @property
    def enabled(self) -> bool:
        """True when a backing store is attached."""
        return self.backend is not None

    def _read(self, key: str) -> str | None:
        if self.backend is None:
            return None
        try:
            return self.backend.get(key)
        except Exception as exc:
            logger.warning("Cache get error for '%s': %s", key, exc)
            return None

    def _write(self, key: str, payload: str, ttl: int) -> None:
        if self.backend is None:
            return
        try:
            self.backend.set(key, payload, ttl)
        except Exception as exc:
            logger.warning("Cache set error for '%s': %s", key, exc)

    def get_or_compute(
        self,
        key: str,
        ttl: int,
        compute: Callable[[], T],
        dump: Callable[[T], Any] = _identity,
        load: Callable[[Any], T] = _identity,
    ) -> T:
        """Return the cached value for *key*, computing and storing on miss.

        *dump* turns the computed value into something ``json.dumps``
        accepts and *load* reverses it on a hit.
        """
        raw = self._read(key)
        if raw is not None:
            try:
                value = load(json.loads(raw))
            except (ValueError, KeyError, TypeError) as exc:
                logger.warning(
                    "Discarding undecodable cache entry '%s': %s",
                    key,
                    exc,
                )
            else:
                logger.debug("Cache hit for '%s'", key)
                return value

        logger.debug("Cache miss for '%s'", key)
        result = compute()
        self._write(key, json.dumps(dump(result)), ttl)
        return result

    def invalidate(self, key: str) -> None:
        """Drop *key* from the backing store, if any."""
        if self.backend is None:
            return
        try:
            self.backend.delete(key)
        except Exception as exc:
            logger.warning("Cache delete error for '%s': %s", key, exc)
