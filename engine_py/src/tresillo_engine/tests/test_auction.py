"""
Tests for dealing, the auction and its resolution.
"""

from tresillo_engine.shuffle import validate_deck_integrity


def give_card(room, seat, suit, rank):
    """Swap the given card into ``seat``'s hand, keeping every pile the same size."""
    hand = room.hands[seat]
    if any(c.suit == suit and c.rank == rank for c in hand):
        return
    for pile in room.piles():
        for index, candidate in enumerate(pile):
            if candidate.suit == suit and candidate.rank == rank:
                pile[index], hand[0] = hand[0], candidate
                return
    raise AssertionError(f"{suit} {rank} not found")


def test_first_join_deals_a_hand(tresillo):
    room, human, _ = tresillo
    state = room.state
    assert state.phase == 'auction'
    assert state.resting == 'across'
    assert human.seat == 'you'
    assert state.auction.order == ['left', 'right', 'you']
    assert state.turn == 'left'
    assert [len(room.hands[s]) for s in ('you', 'left', 'right')] == [9, 9, 9]
    assert room.hands['across'] == []
    assert len(room.talon) == 13
    assert validate_deck_integrity(room.piles())


def test_human_receives_own_hand_only(tresillo):
    room, human, _ = tresillo
    message = human.last_state()
    assert [c['id'] for c in message['selfHand']] == [c.id for c in room.hands['you']]
    assert 'hands' not in message['patch']
    assert message['patch']['handsCount']['left'] == 9


def test_bid_out_of_turn_is_rejected(tresillo):
    room, human, _ = tresillo
    seq = room.state.seq
    result = room.handle(human, {"type": "BID", "value": "entrada"})
    assert not result.success
    assert result.error_code == 'NOT_YOUR_TURN'
    assert human.errors()[-1] == 'NOT_YOUR_TURN'
    assert room.state.seq == seq


def test_bid_must_beat_current(tresillo):
    room, human, _ = tresillo
    assert room.apply_bid('left', 'entrada').success
    assert room.apply_bid('right', 'pass').success
    assert room.state.turn == 'you'
    result = room.handle(human, {"type": "BID", "value": "entrada"})
    assert result.error_code == 'BAD_BID'
    assert room.state.auction.current_bidder == 'left'


def test_auction_winner_chooses_trump(tresillo):
    room, human, _ = tresillo
    room.apply_bid('left', 'entrada')
    room.apply_bid('right', 'pass')
    assert room.handle(human, {"type": "BID", "value": "oros"}).success
    assert room.state.turn == 'left'
    room.apply_bid('left', 'pass')

    state = room.state
    assert state.ombre == 'you'
    assert state.contract == 'oros'
    assert state.phase == 'trump_choice'
    assert state.turn == 'you'
    assert human.events('AUCTION_WIN')[-1] == {'ombre': 'you', 'bid': 'oros', 'contract': 'oros'}


def test_passed_seats_are_skipped(tresillo):
    room, _, _ = tresillo
    room.apply_bid('left', 'pass')
    room.apply_bid('right', 'entrada')
    room.apply_bid('you', 'oros')
    assert room.state.turn == 'right'


def test_volteo_turns_top_talon_card(tresillo):
    room, human, _ = tresillo
    top = room.talon[0]
    room.apply_bid('left', 'volteo')
    room.apply_bid('right', 'pass')
    room.apply_bid('you', 'pass')

    state = room.state
    assert state.trump == top.suit
    assert room.talon[0] == top
    assert state.phase == 'exchange'
    assert state.exchange.order == ['left', 'right', 'you']
    assert human.events('TRUMP_SET')[-1] == {'method': 'volteo', 'suit': top.suit}


def test_bola_goes_straight_to_play(tresillo):
    room, _, _ = tresillo
    room.apply_bid('left', 'bola')
    room.apply_bid('right', 'pass')
    room.apply_bid('you', 'pass')
    assert room.state.phase == 'play'
    assert room.state.trump is None
    assert room.state.turn == 'right'


def test_contrabola_for_last_seat(tresillo):
    room, human, _ = tresillo
    room.apply_bid('left', 'pass')
    room.apply_bid('right', 'pass')
    assert room.handle(human, {"type": "BID", "value": "contrabola"}).success
    assert room.state.ombre == 'you'
    assert room.state.contract == 'contrabola'
    assert room.state.phase == 'play'
    assert room.state.turn == 'left'


def test_contrabola_rejected_for_first_seat(tresillo):
    room, _, _ = tresillo
    result = room.apply_bid('left', 'contrabola')
    assert result.error_code == 'BAD_BID'
    assert room.state.turn == 'left'


def test_pass_out_forces_spadille_holder(tresillo):
    room, human, _ = tresillo
    give_card(room, 'right', 'espadas', 1)
    room.apply_bid('left', 'pass')
    room.apply_bid('right', 'pass')
    room.apply_bid('you', 'pass')

    state = room.state
    assert state.ombre == 'right'
    assert state.contract == 'entrada'
    assert state.phase == 'trump_choice'
    assert state.turn == 'right'
    assert human.events('ESPADA_OBLIGATORIA')[-1] == {'ombre': 'right'}


def test_pass_out_redeals_without_forced_holder(room_factory):
    room, human, _ = room_factory('tresillo', forced_trump_holder=False)
    first_hand = list(room.hands['you'])
    room.apply_bid('left', 'pass')
    room.apply_bid('right', 'pass')
    room.apply_bid('you', 'pass')

    assert human.events('AUCTION_PASS_OUT')
    assert room.state.phase == 'auction'
    assert room.state.turn == 'left'
    assert room.state.hand_no == 1
    assert room.hands['you'] != first_hand
    assert validate_deck_integrity(room.piles())


def test_pass_out_in_quadrille_plays_penetro(quadrille):
    room, human, _ = quadrille
    state = room.state
    assert state.resting == 'you'
    assert human.seat == 'left'
    assert state.auction.order == ['left', 'across', 'right']

    room.handle(human, {"type": "BID", "value": "pass"})
    room.apply_bid('across', 'pass')
    room.apply_bid('right', 'pass')

    assert state.contract == 'penetro'
    assert state.resting is None
    assert state.trump is None
    assert state.phase == 'play'
    assert state.turn == 'left'
    assert len(room.hands['you']) == 9
    assert len(room.talon) == 4
    assert room.seating.conn_at('you').is_bot
    assert human.events('PENETRO_START')[-1] == {'restingPlayer': 'you'}
    assert validate_deck_integrity(room.piles())


def test_sequence_rises_by_one_per_broadcast(tresillo):
    room, human, _ = tresillo
    before = room.state.seq
    room.apply_bid('left', 'entrada')
    room.apply_bid('right', 'pass')
    seqs = [m['patch']['seq'] for m in human.of_type('STATE')[-2:]]
    assert seqs == [before + 1, before + 2]
