"""
Connections a room can seat: live websocket clients and synthetic bots.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

import orjson

from .constants import BOT_HANDLE

logger = logging.getLogger(__name__)

_CLOSE = object()


class Connection:
    """
    Something that sits at a seat and can be sent messages.

    The room only ever calls ``deliver``; whether the other side is a human or
    a bot is answered by ``is_bot``.
    """

    is_bot = False

    def __init__(self, conn_id: Optional[str] = None, handle: str = "Player"):
        self.id = conn_id or str(uuid.uuid4())
        self.handle = handle
        self.seat: Optional[str] = None

    def deliver(self, message: Dict[str, Any]) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, seat={self.seat!r})"


class BotConnection(Connection):
    """A synthetic seat holder; messages sent to it are dropped."""

    is_bot = True

    def __init__(self, conn_id: Optional[str] = None):
        super().__init__(conn_id or f"bot-{uuid.uuid4().hex[:8]}", BOT_HANDLE)

    def deliver(self, message: Dict[str, Any]) -> None:
        return None


class WebSocketConnection(Connection):
    """
    A live client. Messages are queued and written by ``pump``.

    ``deliver`` never blocks so the room can broadcast from inside its
    mailbox without awaiting slow sockets.
    """

    def __init__(self, conn_id: Optional[str] = None, handle: str = "Player"):
        super().__init__(conn_id, handle)
        self.outbox: asyncio.Queue = asyncio.Queue()
        self.closed = False

    def deliver(self, message: Dict[str, Any]) -> None:
        if self.closed:
            return
        self.outbox.put_nowait(message)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.outbox.put_nowait(_CLOSE)

    async def pump(self, websocket) -> None:
        """Write queued messages to ``websocket`` until closed."""
        while True:
            message = await self.outbox.get()
            if message is _CLOSE:
                try:
                    await websocket.close()
                except Exception as e:
                    logger.debug(f"Close for {self.id} failed: {e}")
                return
            try:
                await websocket.send_text(orjson.dumps(message).decode())
            except Exception as e:
                logger.warning(f"Send to {self.id} failed, closing writer: {e}")
                self.closed = True
                return
