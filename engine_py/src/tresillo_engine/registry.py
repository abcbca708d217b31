"""
Owned map of live rooms, each wrapped in its actor.
"""

import logging
import random
import uuid
from typing import Dict, List, Optional

from .actor import MailboxScheduler, RoomActor
from .engine import EventListener, TresilloRoom
from .rules import RuleConfig, default_rules

logger = logging.getLogger(__name__)


def generate_room_id() -> str:
    return f"r-{uuid.uuid4().hex[:6]}"


class RoomRegistry:
    """
    Creates rooms on demand and tears them down once nobody is left.

    Must be used from inside a running event loop; every room gets its own
    actor task and mailbox-backed clock.
    """

    def __init__(
        self,
        rules: Optional[RuleConfig] = None,
        listeners: Optional[List[EventListener]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.rules = rules or default_rules
        self.listeners = list(listeners or [])
        self.rng = rng
        self.rooms: Dict[str, RoomActor] = {}

    def __len__(self) -> int:
        return len(self.rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self.rooms

    def get(self, room_id: str) -> Optional[RoomActor]:
        return self.rooms.get(room_id)

    def ensure(self, room_id: Optional[str] = None) -> RoomActor:
        """Return the actor for ``room_id``, creating and starting it if needed."""
        room_id = room_id or generate_room_id()
        actor = self.rooms.get(room_id)
        if actor is not None:
            return actor

        actor = RoomActor(room_id)
        room = TresilloRoom(
            room_id,
            rules=self.rules,
            scheduler=MailboxScheduler(actor),
            rng=self.rng,
        )
        for listener in self.listeners:
            room.add_listener(listener)
        actor.room = room
        actor.start()
        self.rooms[room_id] = actor
        logger.info(f"Created room {room_id}")
        return actor

    def connection_count(self) -> int:
        return sum(actor.room.live_connection_count() for actor in self.rooms.values())

    async def release_if_idle(self, room_id: str) -> bool:
        """Close and forget a room with no live connections and an empty mailbox."""
        actor = self.rooms.get(room_id)
        if actor is None:
            return False
        if actor.room.live_connection_count() > 0 or actor.pending > 0:
            return False

        del self.rooms[room_id]
        actor.post(actor.room.close)
        await actor.stop()
        logger.info(f"Released idle room {room_id}")
        return True

    async def close_all(self) -> None:
        for room_id in list(self.rooms):
            actor = self.rooms.pop(room_id)
            actor.post(actor.room.close)
            await actor.stop()
        logger.info("All rooms closed")
