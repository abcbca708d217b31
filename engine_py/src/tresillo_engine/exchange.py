"""
Exchange phase logic: who swaps cards with the talon, in which order, and how many.
"""

from typing import List, Optional, Tuple

from .constants import (
    DEFENDER_MAX_DISCARDS, OMBRE_MAX_DISCARDS, OMBRE_OROS_MAX_DISCARDS,
    OROS_CONTRACTS, SOLO_CONTRACTS,
)
from .models import Card, ExchangeState


def exchange_order(active: List[str], ombre: str, contract: Optional[str]) -> List[str]:
    """
    Ombre first, then the seats to its left; a solo ombre keeps its hand.

    Args:
        active: Active seats in rotation order
        ombre: The declarer
        contract: The resolved contract
    """
    start = active.index(ombre)
    rotation = active[start:] + active[:start]
    if contract in SOLO_CONTRACTS:
        return rotation[1:]
    return rotation


def max_discards(contract: Optional[str], is_ombre: bool) -> int:
    """Contract and role dependent cap on the number of cards a seat may swap."""
    if not is_ombre:
        return DEFENDER_MAX_DISCARDS
    if contract in SOLO_CONTRACTS:
        return 0
    if contract in OROS_CONTRACTS:
        return OMBRE_OROS_MAX_DISCARDS
    return OMBRE_MAX_DISCARDS


def discard_limit(contract: Optional[str], is_ombre: bool, talon_size: int) -> int:
    return min(max_discards(contract, is_ombre), talon_size)


def next_exchanger(exchange: ExchangeState, seat: str) -> Optional[str]:
    """The next seat after ``seat`` in exchange order that has not exchanged yet."""
    order = exchange.order
    if seat not in order:
        return None
    current = order.index(seat)
    for step in range(1, len(order)):
        candidate = order[(current + step) % len(order)]
        if candidate not in exchange.completed:
            return candidate
    return None


def swap_with_talon(hand: List[Card], talon: List[Card], discard_ids: List[str]) -> Tuple[List[Card], List[Card]]:
    """
    Remove the discarded cards from ``hand`` and draw as many from the top of ``talon``.

    Both lists are mutated in place.

    Returns:
        Tuple of (discarded cards, drawn cards)
    """
    wanted = set(discard_ids)
    discarded = [card for card in hand if card.id in wanted]
    for card in discarded:
        hand.remove(card)
    drawn = talon[:len(discarded)]
    del talon[:len(drawn)]
    hand.extend(drawn)
    return discarded, drawn
