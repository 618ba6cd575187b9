"""Redis client factory — used for the sweeper lease only.

NOT used for listing state or bids (those go through PostgreSQL).
"""

import redis.asyncio as aioredis

from config.settings import Settings


def build_redis(settings: Settings) -> aioredis.Redis:
    """Create a Redis client; the connection pool opens lazily on first command."""
    return aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )


async def close_redis(client: aioredis.Redis | None) -> None:
    if client is not None:
        await client.aclose()
