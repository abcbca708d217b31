"""
Optional Postgres store for finished hands and games.

Everything here degrades: without a database URL, or after a failure, the
store logs and turns itself off instead of disturbing play.
"""

import asyncio
import logging
import os
from typing import Any, Dict, Optional, Set

import orjson
import psycopg

from .constants import EVENT_GAME_END, EVENT_HAND_RESULT, EVENT_PENETRO_RESULT

logger = logging.getLogger(__name__)

RECORDED_EVENTS = (EVENT_HAND_RESULT, EVENT_PENETRO_RESULT, EVENT_GAME_END)

SCHEMA = """
CREATE TABLE IF NOT EXISTS hand_results (
    id BIGSERIAL PRIMARY KEY,
    room_id TEXT NOT NULL,
    event TEXT NOT NULL,
    payload JSONB NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""

INSERT_RESULT = "INSERT INTO hand_results (room_id, event, payload) VALUES (%s, %s, %s::jsonb)"


def database_url() -> Optional[str]:
    return os.getenv("DATABASE_URL") or os.getenv("POSTGRES_URL")


class HandStore:
    """Records hand results through a single async psycopg connection."""

    def __init__(self, url: Optional[str] = None):
        self.url = url
        self.conn: Optional[psycopg.AsyncConnection] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return self.conn is not None

    async def connect(self) -> bool:
        """Open the connection and make sure the table exists."""
        url = self.url or database_url()
        if not url:
            logger.warning("No DATABASE_URL; starting without persistence")
            return False
        try:
            self.conn = await psycopg.AsyncConnection.connect(url, autocommit=True)
            await self.conn.execute("select 1")
            await self.conn.execute(SCHEMA)
            logger.info("Database connected")
            return True
        except psycopg.Error as e:
            logger.error(f"Database connection failed, continuing without DB: {e}")
            await self._drop()
            return False

    def record_event(self, room_id: str, name: str, payload: Dict[str, Any]) -> None:
        """
        Room event listener. Schedules the insert and returns at once.

        Only hand and game results are stored.
        """
        if not self.enabled or name not in RECORDED_EVENTS:
            return
        task = asyncio.get_running_loop().create_task(self._insert(room_id, name, payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _insert(self, room_id: str, name: str, payload: Dict[str, Any]) -> None:
        if self.conn is None:
            return
        try:
            await self.conn.execute(INSERT_RESULT, (room_id, name, orjson.dumps(payload).decode()))
        except psycopg.Error as e:
            logger.error(f"Failed to record {name} for room {room_id}, disabling persistence: {e}")
            await self._drop()

    async def _drop(self) -> None:
        conn, self.conn = self.conn, None
        if conn is not None:
            try:
                await conn.close()
            except psycopg.Error as e:
                logger.error(f"Database close error: {e}")

    async def close(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self.conn is not None:
            await self._drop()
            logger.info("Database closed")
