"""
Matchmaking queue kept in Redis lists, one per mode.
"""

import logging
import os
from typing import Any, Dict, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from .constants import MODE_TRESILLO

logger = logging.getLogger(__name__)

PLAYERS_NEEDED = {MODE_TRESILLO: 3}
DEFAULT_PLAYERS_NEEDED = 4


def players_needed(mode: str) -> int:
    return PLAYERS_NEEDED.get(mode, DEFAULT_PLAYERS_NEEDED)


class Lobby:
    """
    Queues client ids until a full table is waiting.

    Without a Redis URL, or once Redis fails, every call answers
    ``{"queued": False, "note": ...}``.
    """

    def __init__(self, url: Optional[str] = None, client=None):
        self.url = url
        self.client = client

    async def connect(self) -> bool:
        if self.client is not None:
            return True
        url = self.url or os.getenv("REDIS_URL")
        if not url:
            logger.warning("No REDIS_URL; running without Redis")
            return False
        try:
            self.client = aioredis.from_url(url, decode_responses=True)
            await self.client.ping()
            logger.info("Redis connected")
            return True
        except (RedisError, ValueError) as e:
            logger.error(f"Redis initial connect failed: {e}")
            self.client = None
            return False

    async def join_queue(self, client_id: str, mode: str) -> Dict[str, Any]:
        """
        Push ``client_id`` onto the queue for ``mode``.

        Returns:
            ``{"ready": True, "clients": [...]}`` when a table is complete,
            else ``{"queued": True, "size": n}``
        """
        if self.client is None:
            return {"queued": False, "note": "redis not configured"}

        key = f"queue:{mode}"
        need = players_needed(mode)
        try:
            await self.client.lpush(key, client_id)
            size = await self.client.llen(key)
            if size >= need:
                clients = []
                for _ in range(need):
                    value = await self.client.rpop(key)
                    if value:
                        clients.append(value)
                return {"ready": True, "clients": clients}
            return {"queued": True, "size": size}
        except RedisError as e:
            logger.error(f"Redis queue operation failed: {e}")
            return {"queued": False, "note": "queue operation failed"}

    async def close(self) -> None:
        if self.client is None:
            return
        try:
            await self.client.aclose()
            logger.info("Redis disconnected")
        except RedisError as e:
            logger.error(f"Redis error during close: {e}")
        finally:
            self.client = None
