"""
Keyed memoization for config resolution.

One cache type serves both loader variants. What differs between them is the
key policy: per-directory loaders key entries by the value they are given,
legacy loaders collapse every request onto a single constant key.

Entries are never replaced or evicted. A value stays until the owning loader
is discarded.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

KeyPolicy = Callable[[Any], Hashable]

_SINGLETON = object()


def per_key(raw_key: Any) -> Hashable:
    """Use the requested key as is"""
    return raw_key


def singleton_key(raw_key: Any) -> Hashable:
    """Map every request onto one shared entry"""
    return _SINGLETON


class KeyedCache(Generic[T]):
    """
    Memoizes async computations by key, at most one in flight per key.

    While a computation for a key is running, later callers for the same key
    await the same task instead of starting their own. Only successful results
    are stored; a failed computation is forgotten so the next call retries.
    """

    def __init__(self, name: str, key_policy: KeyPolicy = per_key):
        """
        Initialize keyed cache.

        Args:
            name: Label used in log messages and stats
            key_policy: Maps a requested key to the storage key
        """
        self.name = name
        self.key_policy = key_policy
        self._values: Dict[Hashable, T] = {}
        self._pending: Dict[Hashable, "asyncio.Future[T]"] = {}

        # Statistics
        self._hits = 0
        self._misses = 0
        self._joins = 0

    def __contains__(self, raw_key: Any) -> bool:
        return self.key_policy(raw_key) in self._values

    def __len__(self) -> int:
        return len(self._values)

    def peek(self, raw_key: Any) -> Optional[T]:
        """Settled value for a key, without waiting or computing"""
        return self._values.get(self.key_policy(raw_key))

    async def get_or_create(
        self,
        raw_key: Any,
        factory: Callable[[], Awaitable[T]]
    ) -> T:
        """
        Return the cached value for a key, computing it on first use.

        Args:
            raw_key: Requested key (passed through the key policy)
            factory: Produces the value; called at most once per key at a time

        Returns:
            The value stored for the key
        """
        key = self.key_policy(raw_key)

        if key in self._values:
            self._hits += 1
            logger.debug(f"{self.name}: cache hit for {raw_key}")
            return self._values[key]

        pending = self._pending.get(key)

        # A task nobody awaited may have failed in the meantime
        if pending is not None and pending.done() and (
            pending.cancelled() or pending.exception() is not None
        ):
            del self._pending[key]
            pending = None

        if pending is None:
            self._misses += 1
            logger.debug(f"{self.name}: cache miss for {raw_key}")
            pending = asyncio.ensure_future(factory())
            self._pending[key] = pending
        else:
            self._joins += 1
            logger.debug(f"{self.name}: joining in-flight computation for {raw_key}")

        try:
            value = await asyncio.shield(pending)
        except BaseException:
            if pending.done() and self._pending.get(key) is pending:
                del self._pending[key]
            raise

        if self._pending.get(key) is pending:
            del self._pending[key]

        return self._values.setdefault(key, value)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        total_requests = self._hits + self._misses + self._joins
        hit_rate = (self._hits + self._joins) / total_requests if total_requests > 0 else 0.0

        return {
            "name": self.name,
            "size": len(self._values),
            "pending": len(self._pending),
            "hits": self._hits,
            "misses": self._misses,
            "joins": self._joins,
            "hit_rate": hit_rate,
            "total_requests": total_requests
        }
