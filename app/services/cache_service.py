"""
Cache invalidation signal.

Tells the presentation layer that cached views (identified by path) are
stale. Fire-and-forget: failures are logged and never propagate.

Backends:
- memory: records stale paths in-process (development, tests)
- redis: publishes each path on a pub/sub channel the frontend listens to
"""
import logging
from collections import Counter
from typing import Iterable, List, Optional, Set

import redis.asyncio as redis

from app.core.config import settings

logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Base invalidator; subclasses implement _publish"""

    async def connect(self) -> None:
        return None

    async def disconnect(self) -> None:
        return None

    async def invalidate(self, *paths: str) -> None:
        """Mark every path stale. Never raises."""
        for path in _unique(paths):
            try:
                await self._publish(path)
            except Exception as e:
                logger.warning(f"Cache invalidation failed for {path}: {e}")

    async def _publish(self, path: str) -> None:
        raise NotImplementedError

    def pending(self) -> Optional[int]:
        """Number of stale paths not yet picked up, when the backend can tell"""
        return None


class MemoryCacheInvalidator(CacheInvalidator):
    """Keeps stale paths in memory until consumed"""

    def __init__(self):
        self.stale: Set[str] = set()
        self.counts: Counter = Counter()

    async def _publish(self, path: str) -> None:
        self.stale.add(path)
        self.counts[path] += 1

    def pending(self) -> Optional[int]:
        return len(self.stale)

    def consume(self, path: str) -> bool:
        """Return True (and clear the flag) if the path was marked stale"""
        if path in self.stale:
            self.stale.discard(path)
            return True
        return False

    def reset(self) -> None:
        self.stale.clear()
        self.counts.clear()


class RedisCacheInvalidator(CacheInvalidator):
    """Publishes stale paths to a Redis channel"""

    def __init__(self, redis_client: Optional[redis.Redis] = None, channel: Optional[str] = None):
        self.redis = redis_client
        self.channel = channel or settings.CACHE_INVALIDATION_CHANNEL
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self._connected:
            return
        try:
            self.redis = redis.from_url(settings.REDIS_URL, decode_responses=True, socket_connect_timeout=5)
            await self.redis.ping()
            self._connected = True
            logger.info("Redis cache invalidation connected")
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning(f"Redis connection failed: {e}. Cache invalidation disabled.")
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        if self.redis:
            await self.redis.close()
            self.redis = None
            self._connected = False
            logger.info("Redis cache invalidation disconnected")

    async def _publish(self, path: str) -> None:
        if not self._connected or self.redis is None:
            # Stale reads until natural expiry
            logger.debug(f"Redis unavailable, skipping invalidation of {path}")
            return
        await self.redis.publish(self.channel, path)


def _unique(paths: Iterable[str]) -> List[str]:
    seen = []
    for path in paths:
        if path and path not in seen:
            seen.append(path)
    return seen


def build_invalidator(backend: Optional[str] = None) -> CacheInvalidator:
    backend = backend or settings.CACHE_INVALIDATION_BACKEND
    if backend == "redis":
        return RedisCacheInvalidator()
    return MemoryCacheInvalidator()


# Global invalidator instance
cache_invalidator = build_invalidator()
