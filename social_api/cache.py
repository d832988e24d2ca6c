import logging

import redis.asyncio as redis

from social_api.config import settings

logger = logging.getLogger(__name__)


def like_generation_key(comment_id: str) -> str:
    return f"comments:{comment_id}:like_gen"


def like_count_key(comment_id: str, generation: str) -> str:
    return f"comments:{comment_id}:like_count:{generation}"


class CacheManager:
    """
    Cache-aside store for read-side like counts, backed by Redis.

    Counts are stored under a per-comment generation number.  A committed
    toggle bumps the generation, so a count computed before the toggle
    and written afterwards lands under a key nobody reads any more.

    Every method is safe to call without a Redis connection: reads miss
    and writes are skipped, so requests never fail because of the cache.
    The toggle endpoint never reads from here; it always counts inside
    its own transaction.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool.  Called once at application startup."""
        self._redis = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", settings.REDIS_URL)
        except redis.RedisError as exc:  # pragma: no cover
            logger.warning("Redis ping failed, like-count cache disabled: %s", exc)
            await self._redis.aclose()
            self._redis = None

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Like counts
    # ------------------------------------------------------------------

    async def like_count_generation(self, comment_id: str) -> str | None:
        """
        Return the current generation for *comment_id*, or None when the
        cache is unavailable.  Read it before counting in the database.
        """
        if not self._redis:
            return None
        try:
            generation = await self._redis.get(like_generation_key(comment_id))
        except redis.RedisError as exc:
            logger.debug("Cache GET error for comment=%r: %s", comment_id, exc)
            return None
        return generation or "0"

    async def get_like_count(self, comment_id: str, generation: str | None) -> int | None:
        if not self._redis or generation is None:
            self._misses += 1
            return None
        try:
            value = await self._redis.get(like_count_key(comment_id, generation))
        except redis.RedisError as exc:
            logger.debug("Cache GET error for comment=%r: %s", comment_id, exc)
            self._misses += 1
            return None
        if value is None:
            self._misses += 1
            return None
        self._hits += 1
        return int(value)

    async def set_like_count(self, comment_id: str, generation: str | None, count: int) -> None:
        if not self._redis or generation is None:
            return
        try:
            await self._redis.set(
                like_count_key(comment_id, generation), count, ex=settings.CACHE_TTL_LIKE_COUNT
            )
        except redis.RedisError as exc:
            logger.debug("Cache SET error for comment=%r: %s", comment_id, exc)

    async def invalidate_like_count(self, comment_id: str) -> None:
        """Start a new generation after a committed toggle."""
        if not self._redis:
            return
        key = like_generation_key(comment_id)
        try:
            await self._redis.incr(key)
            # Outlives every count written under it.
            await self._redis.expire(key, settings.CACHE_TTL_LIKE_COUNT * 100)
        except redis.RedisError as exc:
            logger.debug("Cache INCR error for comment=%r: %s", comment_id, exc)

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @property
    def stats(self) -> dict:
        """Hit/miss counters, reported by ``/health``."""
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


# Module-level singleton shared across all request handlers.
cache = CacheManager()
