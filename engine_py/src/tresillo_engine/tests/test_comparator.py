"""
Tests for card ranking, legal plays and trick resolution.
"""

import random

import pytest

from tresillo_engine.comparator import (
    card_strength, is_manille, is_matador, is_trump, legal_plays, trick_winner,
)
from tresillo_engine.errors import GameError
from tresillo_engine.models import Card
from tresillo_engine.shuffle import create_deck, deal_hands, make_deck, validate_deck_integrity


def card(suit, rank, tag=""):
    return Card(suit, rank, f"{suit}-{rank}{tag}")


def test_manille_depends_on_trump_colour():
    """The manille is the 2 of a black trump and the 7 of a red one."""
    assert is_manille('espadas', card('espadas', 2))
    assert not is_manille('espadas', card('espadas', 7))
    assert is_manille('copas', card('copas', 7))
    assert not is_manille('copas', card('copas', 2))
    assert not is_manille(None, card('copas', 7))


def test_spadille_and_basto_are_always_trump():
    assert is_trump('oros', card('espadas', 1))
    assert is_trump('copas', card('bastos', 1))
    assert is_matador('oros', card('bastos', 1))
    assert not is_trump('oros', card('espadas', 12))


def test_nothing_is_trump_without_a_trump_suit():
    assert not is_trump(None, card('espadas', 1))
    assert not is_trump(None, card('oros', 12))


def test_spadille_beats_every_other_trump():
    cards = [card('copas', 12), card('espadas', 1), card('copas', 7)]
    assert trick_winner('copas', 'copas', cards) == 1


def test_red_manille_beats_punto():
    cards = [card('oros', 1), card('oros', 7)]
    assert trick_winner('oros', 'oros', cards) == 1


def test_black_trump_order():
    assert trick_winner('espadas', 'espadas', [card('espadas', 12), card('espadas', 3)]) == 0
    assert trick_winner('bastos', 'bastos', [card('bastos', 3), card('bastos', 2)]) == 1


def test_matador_order():
    """Spadille, then manille, then basto, then the rest of the trumps."""
    black = [card('espadas', 12), card('bastos', 1), card('espadas', 2)]
    assert trick_winner('espadas', 'espadas', black) == 2
    assert trick_winner('copas', 'copas', [card('copas', 12), card('bastos', 1)]) == 1
    assert trick_winner('copas', 'copas', [card('bastos', 1), card('copas', 7)]) == 1
    assert trick_winner('oros', 'copas', [card('copas', 1), card('bastos', 1), card('espadas', 1)]) == 2


def test_red_plain_order_puts_ace_above_seven():
    cards = [card('copas', 7), card('copas', 1)]
    assert trick_winner(None, 'copas', cards) == 1


def test_black_plain_order_puts_seven_above_ace():
    cards = [card('espadas', 1), card('espadas', 7)]
    assert trick_winner(None, 'espadas', cards) == 1


def test_lowest_trump_beats_led_suit():
    cards = [card('oros', 12), card('bastos', 3)]
    assert trick_winner('bastos', 'oros', cards) == 1


def test_off_suit_discard_never_wins():
    cards = [card('oros', 2), card('espadas', 12)]
    assert trick_winner(None, 'oros', cards) == 0
    assert card_strength(None, 'oros', card('espadas', 12)) == 0


def test_trick_winner_rejects_empty_trick():
    with pytest.raises(ValueError):
        trick_winner('oros', 'oros', [])


def test_trick_winner_rejects_tied_strength():
    cards = [card('copas', 12, 'a'), card('copas', 12, 'b')]
    with pytest.raises(GameError):
        trick_winner(None, 'copas', cards)


def test_trump_lead_must_be_answered_with_trump():
    hand = [card('copas', 4), card('oros', 5)]
    assert legal_plays('copas', hand, card('espadas', 1)) == [card('copas', 4)]


def test_plain_lead_must_be_followed():
    hand = [card('oros', 5), card('copas', 2), card('espadas', 6)]
    assert legal_plays('copas', hand, card('oros', 3)) == [card('oros', 5)]


def test_any_card_when_unable_to_follow():
    hand = [card('copas', 2), card('espadas', 6)]
    assert legal_plays('copas', hand, card('oros', 3)) == hand


def test_any_card_on_the_lead():
    hand = [card('copas', 2), card('espadas', 6)]
    assert legal_plays('oros', hand, None) == hand


def test_deck_has_forty_unique_cards():
    deck = create_deck(random.Random(1))
    assert len(deck) == 40
    assert len({c.id for c in deck}) == 40
    assert validate_deck_integrity([deck])


def test_deal_gives_nine_cards_per_active_seat():
    deck = make_deck(random.Random(2))
    hands, talon = deal_hands(deck, ['you', 'left', 'right'])
    assert all(len(hand) == 9 for hand in hands.values())
    assert len(talon) == 13
    assert validate_deck_integrity(list(hands.values()) + [talon])


def test_integrity_detects_missing_card():
    deck = make_deck(random.Random(3))
    assert not validate_deck_integrity([deck[1:]])
