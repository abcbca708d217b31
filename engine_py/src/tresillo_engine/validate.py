"""
Action validation against phase, turn, ownership and contract rules.
"""

from typing import List, Optional

from .bidding import beats, contrabola_allowed
from .comparator import legal_plays
from .constants import (
    BID_CONTRABOLA, BID_PASS, BIDS, NO_TRUMP_CONTRACTS, OROS_CONTRACTS,
    PHASE_AUCTION, PHASE_EXCHANGE, PHASE_PLAY, PHASE_TRUMP_CHOICE, SUITS,
)
from .errors import ErrorCode
from .exchange import discard_limit
from .models import Card, RoomState


class ValidationResult:
    """Result of action validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        card: Optional[Card] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.card = card

    @classmethod
    def success(cls, card: Optional[Card] = None) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, card=card)

    @classmethod
    def error(cls, error_code: ErrorCode, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code.value, error_message=error_message)


def validate_turn(state: RoomState, seat: str, phase: str) -> ValidationResult:
    if state.phase != phase:
        return ValidationResult.error(
            ErrorCode.WRONG_PHASE,
            f"Game is not in {phase} phase (current: {state.phase})"
        )
    if state.turn != seat:
        return ValidationResult.error(
            ErrorCode.NOT_YOUR_TURN,
            f"It's not your turn (current turn: {state.turn})"
        )
    return ValidationResult.success()


def validate_bid(state: RoomState, seat: str, value: str) -> ValidationResult:
    """
    Validate a bid or pass.

    Args:
        state: Current room state
        seat: Seat placing the bid
        value: Bid token

    Returns:
        ValidationResult with validation outcome
    """
    turn_check = validate_turn(state, seat, PHASE_AUCTION)
    if not turn_check.valid:
        return turn_check

    if value not in BIDS:
        return ValidationResult.error(ErrorCode.BAD_BID, f"Unknown bid: {value}")

    auction = state.auction
    if seat in auction.passed:
        return ValidationResult.error(ErrorCode.BAD_BID, "Already passed this auction")

    if value == BID_PASS:
        return ValidationResult.success()

    if value == BID_CONTRABOLA:
        if not contrabola_allowed(auction, seat):
            return ValidationResult.error(
                ErrorCode.BAD_BID,
                "Contrabola is only open to the last seat after everyone else passed"
            )
        return ValidationResult.success()

    if not beats(value, auction.current_bid):
        return ValidationResult.error(ErrorCode.BAD_BID, "Must beat previous bid")
    return ValidationResult.success()


def validate_trump_choice(state: RoomState, seat: str, suit: str) -> ValidationResult:
    """Validate the ombre naming trump."""
    if state.phase != PHASE_TRUMP_CHOICE:
        return ValidationResult.error(ErrorCode.WRONG_PHASE, "No trump to choose now")
    if state.ombre != seat:
        return ValidationResult.error(ErrorCode.NOT_OMBRE, "Only the ombre chooses trump")
    if state.contract in NO_TRUMP_CONTRACTS:
        return ValidationResult.error(
            ErrorCode.NO_TRUMP_FOR_CONTRACT,
            f"{state.contract} is played without trump"
        )
    if suit not in SUITS:
        return ValidationResult.error(ErrorCode.INVALID_MESSAGE, f"Unknown suit: {suit}")
    if state.contract in OROS_CONTRACTS and suit != 'oros':
        return ValidationResult.error(ErrorCode.TRUMP_MUST_BE_OROS, f"{state.contract} is played in oros")
    return ValidationResult.success()


def validate_exchange(
    state: RoomState,
    seat: str,
    hand: List[Card],
    discard_ids: List[str],
    talon_size: int,
) -> ValidationResult:
    """Validate a seat's discards against ownership and its exchange limit."""
    turn_check = validate_turn(state, seat, PHASE_EXCHANGE)
    if not turn_check.valid:
        return turn_check

    if len(set(discard_ids)) != len(discard_ids):
        return ValidationResult.error(ErrorCode.OWNERSHIP, "Duplicate cards in discard")

    owned = {card.id for card in hand}
    missing = [card_id for card_id in discard_ids if card_id not in owned]
    if missing:
        return ValidationResult.error(ErrorCode.OWNERSHIP, f"You don't own {missing[0]}")

    limit = discard_limit(state.contract, seat == state.ombre, talon_size)
    if len(discard_ids) > limit:
        return ValidationResult.error(
            ErrorCode.TOO_MANY_DISCARDS,
            f"Can only exchange {limit} cards"
        )
    return ValidationResult.success()


def validate_play(state: RoomState, seat: str, hand: List[Card], card_id: str) -> ValidationResult:
    """
    Validate a card play attempt.

    Returns:
        ValidationResult carrying the played card on success
    """
    turn_check = validate_turn(state, seat, PHASE_PLAY)
    if not turn_check.valid:
        return turn_check

    card = next((c for c in hand if c.id == card_id), None)
    if card is None:
        return ValidationResult.error(ErrorCode.OWNERSHIP, f"You don't own {card_id}")

    led = state.table[0] if state.table else None
    if card not in legal_plays(state.trump, hand, led):
        return ValidationResult.error(ErrorCode.ILLEGAL_PLAY, "Must follow the led suit or trump")
    return ValidationResult.success(card)
