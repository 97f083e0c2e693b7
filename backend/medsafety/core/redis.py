"""Redis connection management."""

from redis.asyncio import Redis

from medsafety.core.config import settings

# Redis connection instance (lazy initialized)
_redis_client: Redis | None = None


def get_redis() -> Redis:
    """Get or create the asyncio Redis connection.

    Connection is lazily created on first call. Responses are decoded to
    ``str`` so cached JSON payloads come back as text.

    Returns:
        Redis client instance.
    """
    global _redis_client
    if _redis_client is None:
        _redis_client = Redis.from_url(
            settings.redis_url,
            decode_responses=True,
        )
    return _redis_client


async def close_redis() -> None:
    """Close Redis connection.

    Should be called during application shutdown.
    """
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


async def ping_redis() -> bool:
    """Check if Redis connection is healthy.

    Returns:
        True if Redis responds to ping, False otherwise.
    """
    try:
        return bool(await get_redis().ping())
    except Exception:
        return False
