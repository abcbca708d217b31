"""
Heuristic bot: bids from hand strength, plays the first legal card.
"""

import random
from typing import Optional

from .base import BaseBot, BotAction
from ..bidding import choose_bid
from ..constants import (
    OROS_CONTRACTS, PHASE_AUCTION, PHASE_EXCHANGE, PHASE_PLAY, PHASE_TRUMP_CHOICE, SUITS,
)
from ..exchange import discard_limit

MAX_BOT_DISCARDS = 2


class HeuristicBot(BaseBot):
    """
    Simple policy used for bot seats and for humans who let the clock run out.

    Strategy:
    - Bid from the trump points of the dealt hand
    - Name oros when the contract demands it, else a random suit
    - Swap up to two cards from the front of the hand
    - Play the first legal card
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose_action(self, room, seat: str) -> Optional[BotAction]:
        if not self.is_my_turn(room, seat):
            return None

        phase = room.state.phase
        if phase == PHASE_AUCTION:
            return self._choose_bid(room, seat)
        if phase == PHASE_TRUMP_CHOICE:
            return self._choose_trump(room)
        if phase == PHASE_EXCHANGE:
            return self._choose_discards(room, seat)
        if phase == PHASE_PLAY:
            return self._choose_play(room, seat)
        return None

    def _choose_bid(self, room, seat: str) -> BotAction:
        hand = room.original.get(seat) or self.get_hand(room, seat)
        return BotAction.bid(choose_bid(hand, room.state.auction, seat, self.rng))

    def _choose_trump(self, room) -> BotAction:
        if room.state.contract in OROS_CONTRACTS:
            return BotAction.choose_trump('oros')
        return BotAction.choose_trump(self.rng.choice(SUITS))

    def _choose_discards(self, room, seat: str) -> BotAction:
        state = room.state
        limit = discard_limit(state.contract, seat == state.ombre, len(room.talon))
        count = min(limit, self.rng.randint(0, MAX_BOT_DISCARDS))
        hand = self.get_hand(room, seat)
        return BotAction.exchange([card.id for card in hand[:count]])

    def _choose_play(self, room, seat: str) -> Optional[BotAction]:
        legal = self.get_legal_plays(room, seat)
        if not legal:
            return None
        return BotAction.play(legal[0].id)
