"""
WebSocket event models and validation.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..constants import MSG_ERROR

Mode = Literal['tresillo', 'quadrille']
BidValue = Literal['pass', 'entrada', 'oros', 'volteo', 'solo', 'solo_oros', 'bola', 'contrabola']
Suit = Literal['oros', 'copas', 'espadas', 'bastos']


class EventType(str, Enum):
    """Inbound event types."""
    JOIN = "JOIN"
    BID = "BID"
    CHOOSE_TRUMP = "CHOOSE_TRUMP"
    EXCHANGE = "EXCHANGE"
    PLAY = "PLAY"
    PING = "PING"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    model_config = ConfigDict(populate_by_name=True)

    type: EventType

    def to_message(self) -> Dict[str, Any]:
        """Plain dict with snake_case keys, as the room expects it."""
        data = self.model_dump()
        data["type"] = self.type.value
        return data


class JoinEvent(BaseEvent):
    """Take a seat; the mode only applies to a room still in the lobby."""
    type: EventType = EventType.JOIN
    mode: Mode


class BidEvent(BaseEvent):
    """Bid or pass during the auction."""
    type: EventType = EventType.BID
    value: BidValue


class ChooseTrumpEvent(BaseEvent):
    """Ombre names trump."""
    type: EventType = EventType.CHOOSE_TRUMP
    suit: Suit


class ExchangeEvent(BaseEvent):
    """Swap cards with the talon."""
    type: EventType = EventType.EXCHANGE
    discard_ids: Optional[List[str]] = Field(default=None, alias="discardIds", max_length=9)


class PlayEvent(BaseEvent):
    """Play one card."""
    type: EventType = EventType.PLAY
    card_id: str = Field(..., alias="cardId", min_length=1)


class PingEvent(BaseEvent):
    """Keep-alive."""
    type: EventType = EventType.PING


# Union type for all inbound events
InboundEvent = Union[
    JoinEvent,
    BidEvent,
    ChooseTrumpEvent,
    ExchangeEvent,
    PlayEvent,
    PingEvent,
]


def parse_inbound_event(data: Any) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Decoded JSON from the WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Message must be a JSON object")

    event_type = data.get("type")
    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_map = {
        EventType.JOIN: JoinEvent,
        EventType.BID: BidEvent,
        EventType.CHOOSE_TRUMP: ChooseTrumpEvent,
        EventType.EXCHANGE: ExchangeEvent,
        EventType.PLAY: PlayEvent,
        EventType.PING: PingEvent,
    }

    event_class = event_map.get(event_type)
    if not event_class:
        raise ValueError(f"No handler for event type: {event_type}")

    try:
        return event_class(**data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def create_error_event(code: str, why: Optional[str] = None) -> Dict[str, Any]:
    """Create an error event."""
    event: Dict[str, Any] = {"type": MSG_ERROR, "code": code}
    if why is not None:
        event["why"] = why
    return event
