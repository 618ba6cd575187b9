"""Redis lease so that one API process sweeps per tick.

SET key token NX EX ttl to take the lease, compare-and-delete to release it.
The lease only saves duplicate work: settlement is already safe to run
concurrently (row locks + idempotent re-read), so when Redis is unreachable
the tick proceeds without it.
"""

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


class SweepLease:
    def __init__(
        self,
        client: aioredis.Redis,
        key: str = "auc:settlement:sweep-lease",
        ttl_seconds: int = 30,
    ) -> None:
        self._client = client
        self._key = key
        self._ttl = ttl_seconds

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[bool]:
        """Yields True when this process may sweep now."""
        token = uuid.uuid4().hex
        reachable = True
        acquired = False
        try:
            acquired = bool(await self._client.set(self._key, token, nx=True, ex=self._ttl))
        except RedisError as exc:
            reachable = False
            logger.warning("Sweep lease unavailable (%s); sweeping without it", exc)

        if not reachable:
            yield True
            return
        if not acquired:
            yield False
            return
        try:
            yield True
        finally:
            try:
                await self._client.eval(_RELEASE_SCRIPT, 1, self._key, token)
            except RedisError as exc:
                logger.warning("Sweep lease release failed (%s); it expires in %ds", exc, self._ttl)
