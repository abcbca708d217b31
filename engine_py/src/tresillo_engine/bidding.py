"""
Auction helpers: bid ordering, contract mapping and the hand-strength heuristic bots bid with.
"""

import random
from typing import List, Optional, Tuple

from .constants import (
    BID_BOLA, BID_CONTRABOLA, BID_ENTRADA, BID_OROS, BID_PASS, BID_SOLO,
    BID_SOLO_OROS, BID_VALUES, BID_VOLTEO, SUITS,
)
from .models import AuctionState, Card

RED_BID_THRESHOLD = 23
BLACK_BID_THRESHOLD = 22
VOLTEO_MARGIN = 3
SOLO_MARGIN = 6
BOLA_MARGIN = 12
CONTRABOLA_CHANCE = 0.1

# Points a trump card is worth to the bidder, by rank
TRUMP_POINTS = {1: 9, 2: 8, 3: 7, 12: 6, 11: 5, 10: 4, 7: 3}
OTHER_TRUMP_POINTS = 2
OFF_SUIT_KING_POINTS = 2


def bid_value(bid: str) -> int:
    return BID_VALUES[bid]


def beats(bid: str, current: str) -> bool:
    """True if ``bid`` is a raise over ``current``."""
    return bid != BID_PASS and bid_value(bid) > bid_value(current)


def contrabola_allowed(auction: AuctionState, seat: str) -> bool:
    """Contrabola is reserved for the last seat when everyone before it passed."""
    if not auction.order:
        return False
    all_passed = auction.current_bid == BID_PASS and len(auction.passed) == len(auction.order) - 1
    return all_passed and auction.order[-1] == seat


def contract_for_bid(bid: str) -> str:
    """Each winning bid maps to the contract of the same name."""
    if bid == BID_PASS:
        return BID_ENTRADA
    return bid


def trump_card_points(card: Card, trump: str) -> int:
    """Heuristic bidding worth of one card if ``trump`` were named."""
    if card.suit == trump:
        return TRUMP_POINTS.get(card.rank, OTHER_TRUMP_POINTS)
    if card.rank == 12:
        return OFF_SUIT_KING_POINTS
    return 0


def eval_trump_points(hand: List[Card], trump: str) -> int:
    return sum(trump_card_points(card, trump) for card in hand)


def best_trump_suit(hand: List[Card]) -> Tuple[str, int]:
    """The suit with the highest heuristic score; earlier suits win ties."""
    best_suit, best_points = SUITS[0], -1
    for suit in SUITS:
        points = eval_trump_points(hand, suit)
        if points > best_points:
            best_suit, best_points = suit, points
    return best_suit, best_points


def bid_threshold(suit: str) -> int:
    return RED_BID_THRESHOLD if suit in ('oros', 'copas') else BLACK_BID_THRESHOLD


def choose_bid(
    hand: List[Card],
    auction: AuctionState,
    seat: str,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Pick a bid for ``seat`` from the strength of its dealt hand.

    The chosen tier follows fixed margins over the suit threshold. A tier that
    does not raise the current bid turns into a pass, so the result is always
    legal for the seat.
    """
    rng = rng or random.Random()
    suit, points = best_trump_suit(hand)
    threshold = bid_threshold(suit)

    bid = BID_PASS
    if points >= threshold + BOLA_MARGIN:
        bid = BID_BOLA
    elif points >= threshold + SOLO_MARGIN:
        bid = BID_SOLO_OROS if suit == 'oros' else BID_SOLO
    elif points >= threshold + VOLTEO_MARGIN:
        bid = BID_OROS if suit == 'oros' else BID_VOLTEO
    elif points >= threshold:
        bid = BID_OROS if suit == 'oros' else BID_ENTRADA

    if bid == BID_PASS and contrabola_allowed(auction, seat) and rng.random() < CONTRABOLA_CHANCE:
        return BID_CONTRABOLA

    if bid != BID_PASS and not beats(bid, auction.current_bid):
        return BID_PASS
    return bid
