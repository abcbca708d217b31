"""Game models and data structures"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import BID_PASS, MODE_QUADRILLE, PHASE_LOBBY, empty_seat_counts


@dataclass(frozen=True)
class Card:
    suit: str
    rank: int
    id: str


@dataclass
class AuctionState:
    current_bid: str = BID_PASS
    current_bidder: Optional[str] = None
    passed: List[str] = field(default_factory=list)
    order: List[str] = field(default_factory=list)

    def alive(self) -> List[str]:
        """Seats of the auction order that have not passed."""
        return [seat for seat in self.order if seat not in self.passed]


@dataclass
class ExchangeState:
    current: Optional[str] = None
    order: List[str] = field(default_factory=list)
    talon_size: int = 0
    completed: List[str] = field(default_factory=list)


@dataclass
class TableRules:
    forced_trump_holder: bool = True  # espada obligatoria
    penetro_enabled: bool = True


@dataclass
class RoomState:
    room_id: str
    mode: str = MODE_QUADRILLE
    phase: str = PHASE_LOBBY  # lobby|dealing|auction|trump_choice|exchange|play|scoring
    turn: Optional[str] = None
    ombre: Optional[str] = None
    trump: Optional[str] = None
    contract: Optional[str] = None
    resting: Optional[str] = None
    hand_no: int = 1
    table: List[Card] = field(default_factory=list)  # Current trick in play order
    play_order: List[str] = field(default_factory=list)
    hands_count: Dict[str, int] = field(default_factory=empty_seat_counts)
    scores: Dict[str, int] = field(default_factory=empty_seat_counts)
    tricks: Dict[str, int] = field(default_factory=empty_seat_counts)
    auction: AuctionState = field(default_factory=AuctionState)
    exchange: ExchangeState = field(default_factory=ExchangeState)
    game_target: int = 12
    seq: int = 0
    rules: TableRules = field(default_factory=TableRules)


@dataclass
class HandResult:
    result: str
    points: int
    award: List[str]
    tricks: Dict[str, int]


@dataclass
class ActionResult:
    """Outcome of a room action entry point."""
    success: bool
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls) -> 'ActionResult':
        return cls(success=True)

    @classmethod
    def error(cls, error_code: str, error_message: Optional[str] = None) -> 'ActionResult':
        return cls(success=False, error_code=error_code, error_message=error_message)
