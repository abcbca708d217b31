"""
Shared fixtures for the Tresillo engine tests.
"""

import random
from typing import Any, Dict, List, Optional

import pytest

from tresillo_engine.clock import ManualScheduler
from tresillo_engine.connections import Connection
from tresillo_engine.engine import TresilloRoom
from tresillo_engine.rules import create_rules


class FakeConnection(Connection):
    """Records every message the room sends it."""

    def __init__(self, conn_id: Optional[str] = None, handle: str = "Tester"):
        super().__init__(conn_id, handle)
        self.messages: List[Dict[str, Any]] = []
        self.closed = False

    def deliver(self, message: Dict[str, Any]) -> None:
        self.messages.append(message)

    def close(self) -> None:
        self.closed = True

    def of_type(self, message_type: str) -> List[Dict[str, Any]]:
        return [m for m in self.messages if m["type"] == message_type]

    def events(self, name: str) -> List[Dict[str, Any]]:
        return [m["payload"] for m in self.of_type("EVENT") if m["name"] == name]

    def errors(self) -> List[str]:
        return [m["code"] for m in self.of_type("ERROR")]

    def last_state(self) -> Dict[str, Any]:
        return self.of_type("STATE")[-1]


def make_room(mode: str = "tresillo", seed: int = 7, **rule_overrides):
    """A room with one human who joined in ``mode``. Returns (room, human, scheduler)."""
    scheduler = ManualScheduler()
    room = TresilloRoom(
        "test-room",
        rules=create_rules(**rule_overrides),
        scheduler=scheduler,
        rng=random.Random(seed),
    )
    human = FakeConnection("h1", "Alice")
    room.attach(human)
    room.handle(human, {"type": "JOIN", "mode": mode})
    return room, human, scheduler


@pytest.fixture
def tresillo():
    return make_room("tresillo")


@pytest.fixture
def quadrille():
    return make_room("quadrille")


@pytest.fixture
def room_factory():
    return make_room


@pytest.fixture
def connection_factory():
    return FakeConnection
