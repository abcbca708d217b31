"""
Deck construction, shuffling and dealing utilities.
"""

import random
from typing import Dict, Iterable, List, Optional, Tuple

from .constants import CARDS_PER_ROUND, DEAL_ROUNDS, RANKS, SUITS
from .models import Card


def card_id(suit: str, rank: int, rng: random.Random) -> str:
    """Build a fresh card identifier; suit and rank keep it unique within a deck."""
    return f"{suit}-{rank}-{rng.getrandbits(24):06x}"


def create_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Create the 40-card Spanish deck in suit order."""
    rng = rng or random.Random()
    return [Card(suit, rank, card_id(suit, rank, rng)) for suit in SUITS for rank in RANKS]


def make_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """
    Create a shuffled deck with fresh card ids.

    Args:
        rng: Optional random source; pass a seeded ``random.Random`` for
             deterministic deals

    Returns:
        The 40 cards in Fisher-Yates shuffled order
    """
    rng = rng or random.Random()
    deck = create_deck(rng)
    rng.shuffle(deck)
    return deck


def deal_hands(deck: List[Card], active: List[str]) -> Tuple[Dict[str, List[Card]], List[Card]]:
    """
    Deal three rounds of three cards to each active seat.

    Cards come off the end of the deck; whatever is left becomes the talon.

    Returns:
        Tuple of (hands by seat, talon)
    """
    remaining = list(deck)
    hands: Dict[str, List[Card]] = {seat: [] for seat in active}
    for _ in range(DEAL_ROUNDS):
        for seat in active:
            for _ in range(CARDS_PER_ROUND):
                hands[seat].append(remaining.pop())
    return hands, remaining


def validate_deck_integrity(piles: Iterable[Iterable[Card]]) -> bool:
    """
    Validate that the piles partition the full deck with no duplicates.

    Args:
        piles: Every place a card can be (hands, talon, table, discards, won tricks)

    Returns:
        True if all 40 suit/rank combinations appear exactly once
    """
    all_cards = [card for pile in piles for card in pile]
    keys = [(card.suit, card.rank) for card in all_cards]
    ids = {card.id for card in all_cards}
    expected = {(suit, rank) for suit in SUITS for rank in RANKS}
    return (
        len(keys) == len(expected) and
        set(keys) == expected and
        len(ids) == len(all_cards)
    )
