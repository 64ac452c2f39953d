import json
import logging

import redis.asyncio as redis

from app.config import settings

logger = logging.getLogger(__name__)

# Key layout
#   comments:list:all            every comment
#   comments:list:post:<post>    comments of one post
#   comments:detail:<comment>    a single comment
COMMENTS_ALL_KEY = "comments:list:all"


def post_comments_key(post_id: str) -> str:
    return f"comments:list:post:{post_id}"


def comment_detail_key(comment_id: str) -> str:
    return f"comments:detail:{comment_id}"


class CacheManager:
    """
    Cache-aside store for comment reads, backed by Redis.

    Every method tolerates a missing or failing Redis: reads report a miss
    and writes are skipped, so requests always fall through to the database.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool at startup."""
        self._redis = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", settings.REDIS_URL)
        except Exception as exc:  # pragma: no cover
            logger.warning("Redis ping failed, comment cache disabled: %s", exc)
            self._redis = None

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> dict | list | None:
        """
        Return the cached value for *key*, or None on a miss or error.
        Increments the hit and miss counters reported by the metrics endpoint.
        """
        if not self._redis:
            self._misses += 1
            return None
        try:
            data = await self._redis.get(key)
        except Exception as exc:
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            self._misses += 1
            return None
        if data is None:
            self._misses += 1
            return None
        self._hits += 1
        return json.loads(data)

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        """Store *value* as JSON under *key* with an optional TTL in seconds."""
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except Exception as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    async def delete(self, *keys: str) -> None:
        """Remove *keys*; a failure is logged and ignored."""
        if not self._redis or not keys:
            return
        try:
            await self._redis.delete(*keys)
            logger.debug("Cache invalidated %s", ", ".join(keys))
        except Exception as exc:
            logger.debug("Cache DELETE error for keys=%r: %s", keys, exc)

    # ------------------------------------------------------------------
    # Comment invalidation
    # ------------------------------------------------------------------

    async def invalidate_comment(self, post_id: str, comment_id: str | None = None) -> None:
        """
        Drop every cached view a comment write can make stale: the global
        list, the list of *post_id*, and the detail entry of *comment_id*.
        """
        keys = [COMMENTS_ALL_KEY, post_comments_key(post_id)]
        if comment_id is not None:
            keys.append(comment_detail_key(comment_id))
        await self.delete(*keys)

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @property
    def stats(self) -> dict:
        """Snapshot of the hit and miss counters for /api/metrics."""
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


cache = CacheManager()
