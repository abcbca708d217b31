"""
State serialization for transmission to clients.
"""

from typing import Any, Dict, List, Optional

from .constants import MSG_STATE
from .models import Card, RoomState


def serialize_card(card: Card) -> Dict[str, Any]:
    """Wire form of a card."""
    return {"s": card.suit, "r": card.rank, "id": card.id}


def serialize_hand(hand: Optional[List[Card]]) -> Optional[List[Dict[str, Any]]]:
    if hand is None:
        return None
    return [serialize_card(card) for card in hand]


def serialize_state(state: RoomState) -> Dict[str, Any]:
    """
    Serialize the public room state.

    Hands are never part of it; each seat gets its own cards separately as
    ``selfHand``.

    Args:
        state: Room state to serialize

    Returns:
        Dictionary with camelCase keys safe for JSON transmission
    """
    return {
        "roomId": state.room_id,
        "mode": state.mode,
        "phase": state.phase,
        "turn": state.turn,
        "ombre": state.ombre,
        "trump": state.trump,
        "contract": state.contract,
        "resting": state.resting,
        "handNo": state.hand_no,
        "table": [serialize_card(card) for card in state.table],
        "playOrder": list(state.play_order),
        "handsCount": dict(state.hands_count),
        "scores": dict(state.scores),
        "tricks": dict(state.tricks),
        "auction": {
            "currentBid": state.auction.current_bid,
            "currentBidder": state.auction.current_bidder,
            "passed": list(state.auction.passed),
            "order": list(state.auction.order),
        },
        "exchange": {
            "current": state.exchange.current,
            "order": list(state.exchange.order),
            "talonSize": state.exchange.talon_size,
            "completed": list(state.exchange.completed),
        },
        "gameTarget": state.game_target,
        "seq": state.seq,
        "rules": {
            "forcedTrumpHolder": state.rules.forced_trump_holder,
            "penetroEnabled": state.rules.penetro_enabled,
        },
    }


def state_message(state: RoomState, hand: Optional[List[Card]] = None) -> Dict[str, Any]:
    """A STATE message for one recipient; ``selfHand`` is left out when unseated."""
    message: Dict[str, Any] = {"type": MSG_STATE, "patch": serialize_state(state)}
    if hand is not None:
        message["selfHand"] = serialize_hand(hand)
    return message
