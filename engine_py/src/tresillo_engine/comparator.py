"""
Card ranking: trump and matador classification, legal plays and trick resolution.
"""

from typing import List, Optional

from .constants import BLACK_SUITS
from .errors import ErrorCode, raise_error
from .models import Card

SPADILLE = ('espadas', 1)
BASTO = ('bastos', 1)

SPADILLE_VALUE = 100
MANILLE_VALUE = 99
BASTO_VALUE = 98

# Plain trumps once the three matadors are taken out
BLACK_TRUMP_ORDER = {12: 90, 11: 89, 10: 88, 7: 87, 6: 86, 5: 85, 4: 84, 3: 83}
RED_TRUMP_ORDER = {1: 97, 12: 90, 11: 89, 10: 88, 2: 87, 3: 86, 4: 85, 5: 84, 6: 83}

# Non-trump cards of the led suit
BLACK_PLAIN_ORDER = {12: 10, 11: 9, 10: 8, 7: 7, 6: 6, 5: 5, 4: 4, 3: 3, 2: 2, 1: 1}
RED_PLAIN_ORDER = {12: 10, 11: 9, 10: 8, 1: 7, 2: 6, 3: 5, 4: 4, 5: 3, 6: 2, 7: 1}

TRUMP_BASE = 1000
LED_SUIT_BASE = 100


def is_black(suit: str) -> bool:
    return suit in BLACK_SUITS


def is_spadille(card: Card) -> bool:
    return (card.suit, card.rank) == SPADILLE


def is_basto(card: Card) -> bool:
    return (card.suit, card.rank) == BASTO


def is_manille(trump: Optional[str], card: Card) -> bool:
    """The 2 of a black trump suit or the 7 of a red one."""
    if trump is None or card.suit != trump:
        return False
    return card.rank == (2 if is_black(trump) else 7)


def is_matador(trump: Optional[str], card: Card) -> bool:
    return is_spadille(card) or is_manille(trump, card) or is_basto(card)


def is_trump(trump: Optional[str], card: Card) -> bool:
    """A card is trump if it belongs to the trump suit or is a matador."""
    if trump is None:
        return False
    return card.suit == trump or is_matador(trump, card)


def legal_plays(trump: Optional[str], hand: List[Card], led: Optional[Card]) -> List[Card]:
    """
    Cards the holder of ``hand`` may play on the current trick.

    A trump lead must be answered with trump when the hand holds any; a plain
    lead must be followed in suit. Beating the table is never required.
    """
    if led is None:
        return list(hand)
    if is_trump(trump, led):
        must = [card for card in hand if is_trump(trump, card)]
    else:
        must = [card for card in hand if card.suit == led.suit]
    return must if must else list(hand)


def trump_value(trump: Optional[str], card: Card) -> int:
    """Strength of a card as trump, or 0 if it is not trump."""
    if trump is None:
        return 0
    if is_spadille(card):
        return SPADILLE_VALUE
    if is_manille(trump, card):
        return MANILLE_VALUE
    if is_basto(card):
        return BASTO_VALUE
    if card.suit != trump:
        return 0
    order = BLACK_TRUMP_ORDER if is_black(trump) else RED_TRUMP_ORDER
    return order.get(card.rank, 0)


def plain_value(card: Card) -> int:
    order = BLACK_PLAIN_ORDER if is_black(card.suit) else RED_PLAIN_ORDER
    return order.get(card.rank, 0)


def card_strength(trump: Optional[str], led_suit: str, card: Card) -> int:
    """Trump beats the led suit, which beats everything else (strength 0)."""
    value = trump_value(trump, card)
    if value > 0:
        return TRUMP_BASE + value
    if card.suit == led_suit:
        return LED_SUIT_BASE + plain_value(card)
    return 0


def trick_winner(trump: Optional[str], led_suit: str, cards: List[Card]) -> int:
    """
    Index (in play order) of the card that wins the trick.

    Raises:
        GameError: if the best strength is shared, which only happens when the
                   trick holds duplicated cards
    """
    if not cards:
        raise ValueError("Cannot resolve an empty trick")

    strengths = [card_strength(trump, led_suit, card) for card in cards]
    best = max(strengths)
    if strengths.count(best) > 1:
        raise_error(ErrorCode.INTERNAL_ERROR.value, f"Trick has tied strength {best}: {[c.id for c in cards]}")
    return strengths.index(best)
