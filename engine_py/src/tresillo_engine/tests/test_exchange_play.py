"""
Tests for trump choice, the exchange, trick play and hand scoring.
"""

from tresillo_engine.models import Card
from tresillo_engine.shuffle import validate_deck_integrity


def card(suit, rank):
    return Card(suit, rank, f"{suit}-{rank}")


def win_auction_as_you(room, human, bid='oros'):
    room.apply_bid('left', 'pass')
    room.apply_bid('right', 'pass')
    room.handle(human, {"type": "BID", "value": bid})


def setup_play(room, hands, trump, contract='entrada', ombre='you', turn='left', tricks=None):
    """Put the room straight into the play phase with hand-picked cards."""
    state = room.state
    for seat, cards in hands.items():
        room.hands[seat] = list(cards)
        state.hands_count[seat] = len(cards)
    state.phase = 'play'
    state.trump = trump
    state.contract = contract
    state.ombre = ombre
    state.turn = turn
    state.table = []
    state.play_order = []
    if tricks:
        state.tricks.update(tricks)


def test_trump_choice_errors(tresillo):
    room, human, _ = tresillo
    win_auction_as_you(room, human, 'oros')
    assert room.handle(human, {"type": "CHOOSE_TRUMP", "suit": "copas"}).error_code == 'TRUMP_MUST_BE_OROS'
    assert room.choose_trump('left', 'oros').error_code == 'NOT_OMBRE'
    assert room.state.phase == 'trump_choice'


def test_trump_choice_outside_phase(tresillo):
    room, human, _ = tresillo
    result = room.handle(human, {"type": "CHOOSE_TRUMP", "suit": "oros"})
    assert result.error_code == 'WRONG_PHASE'


def test_exchange_order_and_limits(tresillo):
    room, human, _ = tresillo
    win_auction_as_you(room, human, 'oros')
    room.handle(human, {"type": "CHOOSE_TRUMP", "suit": "oros"})

    state = room.state
    assert state.phase == 'exchange'
    assert state.exchange.order == ['you', 'left', 'right']
    assert state.turn == 'you'

    seven = [c.id for c in room.hands['you'][:7]]
    result = room.handle(human, {"type": "EXCHANGE", "discard_ids": seven})
    assert result.error_code == 'TOO_MANY_DISCARDS'

    result = room.handle(human, {"type": "EXCHANGE", "discard_ids": ['not-a-card']})
    assert result.error_code == 'OWNERSHIP'

    first = room.hands['you'][0].id
    result = room.handle(human, {"type": "EXCHANGE", "discard_ids": [first, first]})
    assert result.error_code == 'OWNERSHIP'
    assert len(room.talon) == 13

    six = [c.id for c in room.hands['you'][:6]]
    assert room.handle(human, {"type": "EXCHANGE", "discard_ids": six}).success
    assert len(room.hands['you']) == 9
    assert len(room.talon) == 7
    assert len(room.discards) == 6
    assert not set(six) & {c.id for c in room.hands['you']}
    assert state.exchange.completed == ['you']
    assert state.exchange.talon_size == 7
    assert state.turn == 'left'
    assert validate_deck_integrity(room.piles())


def test_exchange_bounded_by_talon(tresillo):
    room, human, _ = tresillo
    win_auction_as_you(room, human, 'oros')
    room.handle(human, {"type": "CHOOSE_TRUMP", "suit": "oros"})
    room.handle(human, {"type": "EXCHANGE", "discard_ids": [c.id for c in room.hands['you'][:6]]})
    assert room.finish_exchange('left', [c.id for c in room.hands['left'][:5]]).success
    assert len(room.talon) == 2

    result = room.finish_exchange('right', [c.id for c in room.hands['right'][:3]])
    assert result.error_code == 'TOO_MANY_DISCARDS'
    assert room.finish_exchange('right', [c.id for c in room.hands['right'][:2]]).success

    state = room.state
    assert state.phase == 'play'
    assert state.exchange.current is None
    assert state.turn == 'left'
    assert validate_deck_integrity(room.piles())


def test_solo_ombre_does_not_exchange(tresillo):
    room, human, _ = tresillo
    room.apply_bid('left', 'solo')
    room.apply_bid('right', 'pass')
    room.apply_bid('you', 'pass')
    room.choose_trump('left', 'bastos')
    assert room.state.exchange.order == ['right', 'you']
    assert room.state.turn == 'right'


def test_empty_exchange_is_allowed(tresillo):
    room, human, _ = tresillo
    win_auction_as_you(room, human, 'entrada')
    room.handle(human, {"type": "CHOOSE_TRUMP", "suit": "copas"})
    hand = list(room.hands['you'])
    assert room.handle(human, {"type": "EXCHANGE"}).success
    assert room.hands['you'] == hand


def test_trick_play(tresillo):
    room, human, _ = tresillo
    setup_play(room, {
        'left': [card('oros', 3), card('copas', 4)],
        'right': [card('oros', 5), card('espadas', 6)],
        'you': [card('bastos', 7), card('oros', 12)],
    }, trump='copas')

    assert room.play_card('left', 'oros-3').success
    assert room.state.turn == 'right'
    assert [c.id for c in room.state.table] == ['oros-3']
    assert human.last_state()['patch']['table'] == [{'s': 'oros', 'r': 3, 'id': 'oros-3'}]

    assert room.play_card('right', 'espadas-6').error_code == 'ILLEGAL_PLAY'
    assert room.play_card('right', 'bastos-7').error_code == 'OWNERSHIP'
    assert room.play_card('right', 'oros-5').success

    assert room.handle(human, {"type": "PLAY", "card_id": "oros-12"}).success
    state = room.state
    assert state.tricks['you'] == 1
    assert state.turn == 'you'
    assert state.table == []
    assert state.play_order == []
    assert len(room.won['you']) == 3
    taken = human.events('TRICK_TAKEN')[-1]
    assert taken['winner'] == 'you'
    assert [c['id'] for c in taken['cards']] == ['oros-3', 'oros-5', 'oros-12']


def test_play_out_of_turn(tresillo):
    room, human, _ = tresillo
    setup_play(room, {'you': [card('oros', 3)]}, trump='copas', turn='left')
    assert room.handle(human, {"type": "PLAY", "card_id": "oros-3"}).error_code == 'NOT_YOUR_TURN'


def test_last_trick_scores_and_deals_next_hand(tresillo):
    room, human, _ = tresillo
    setup_play(room, {
        'left': [card('oros', 3)],
        'right': [card('oros', 5)],
        'you': [card('oros', 12)],
    }, trump='copas', tricks={'you': 4, 'left': 2, 'right': 2})

    room.play_card('left', 'oros-3')
    room.play_card('right', 'oros-5')
    room.play_card('you', 'oros-12')

    result = human.events('HAND_RESULT')[-1]
    assert result['result'] == 'sacada'
    assert result['points'] == 1
    assert result['award'] == ['you']
    assert result['tricks']['you'] == 5

    state = room.state
    assert state.scores['you'] == 1
    assert state.hand_no == 2
    assert state.phase == 'auction'
    assert state.tricks == {'you': 0, 'left': 0, 'across': 0, 'right': 0}
    assert validate_deck_integrity(room.piles())


def test_game_end_and_restart(tresillo):
    room, human, scheduler = tresillo
    room.state.scores['you'] = 11
    setup_play(room, {
        'left': [card('oros', 3)],
        'right': [card('oros', 5)],
        'you': [card('oros', 12)],
    }, trump='copas', tricks={'you': 4, 'left': 2, 'right': 2})

    room.play_card('left', 'oros-3')
    room.play_card('right', 'oros-5')
    room.play_card('you', 'oros-12')

    state = room.state
    assert state.phase == 'scoring'
    assert state.turn is None
    end = human.events('GAME_END')[-1]
    assert end['winner'] == 'you'
    assert end['finalScores']['you'] == 12
    assert room.clock.delay == room.rules.game_end_pause

    assert room.play_card('you', 'oros-12').error_code == 'WRONG_PHASE'

    assert scheduler.run_next()
    assert state.scores == {'you': 0, 'left': 0, 'across': 0, 'right': 0}
    assert state.hand_no == 1
    assert state.phase == 'auction'
