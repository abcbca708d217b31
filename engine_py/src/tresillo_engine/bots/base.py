"""
Base bot interface and utilities.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..comparator import legal_plays
from ..models import Card


class BotAction:
    """Represents a bot action."""

    def __init__(self, action_type: str, **kwargs):
        self.type = action_type
        self.data = kwargs

    @classmethod
    def bid(cls, value: str) -> 'BotAction':
        """Create a bid action (``pass`` included)."""
        return cls('bid', value=value)

    @classmethod
    def choose_trump(cls, suit: str) -> 'BotAction':
        """Create a trump choice action."""
        return cls('choose_trump', suit=suit)

    @classmethod
    def exchange(cls, discard_ids: List[str]) -> 'BotAction':
        """Create an exchange action."""
        return cls('exchange', discard_ids=discard_ids)

    @classmethod
    def play(cls, card_id: str) -> 'BotAction':
        """Create a play action."""
        return cls('play', card_id=card_id)

    def __repr__(self) -> str:
        return f"BotAction({self.type!r}, {self.data!r})"


class BaseBot(ABC):
    """Abstract base class for the policy that acts for bot and idle seats."""

    @abstractmethod
    def choose_action(self, room, seat: str) -> Optional[BotAction]:
        """
        Choose an action for ``seat`` based on the current room.

        Args:
            room: The TresilloRoom to act in (read only)
            seat: Seat to act for

        Returns:
            BotAction to take, or None if the seat has nothing to do
        """
        pass

    def get_hand(self, room, seat: str) -> List[Card]:
        return room.hands.get(seat, [])

    def is_my_turn(self, room, seat: str) -> bool:
        return room.state.turn == seat

    def get_legal_plays(self, room, seat: str) -> List[Card]:
        """Cards ``seat`` may put on the current trick."""
        table = room.state.table
        led = table[0] if table else None
        return legal_plays(room.state.trump, self.get_hand(room, seat), led)
