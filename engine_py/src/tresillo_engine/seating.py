"""
Seat assignment: which connection holds which seat, bots filling the gaps.
"""

import logging
from typing import Callable, Dict, List, Optional

from .connections import BotConnection, Connection
from .constants import CONTRACT_PENETRO, MODE_QUADRILLE, SEATS

logger = logging.getLogger(__name__)


def left_of(seat: str, active: List[str]) -> str:
    """The next active seat after ``seat`` walking the seat ring."""
    start = SEATS.index(seat)
    for step in range(1, len(SEATS) + 1):
        candidate = SEATS[(start + step) % len(SEATS)]
        if candidate in active:
            return candidate
    raise ValueError("No active seats")


def rotation_from(seat: str, active: List[str]) -> List[str]:
    """Active seats in turn order starting left of ``seat``."""
    order = []
    current = seat
    for _ in range(len(active)):
        current = left_of(current, active)
        order.append(current)
    return order


class SeatManager:
    """
    Owns the seat to connection mapping for one room.

    Attached connections that found no active seat stay unseated and keep
    receiving broadcasts. ``on_seated`` is called for every new seating.
    """

    def __init__(self, on_seated: Optional[Callable[[Connection, str], None]] = None):
        self.connections: List[Connection] = []
        self.rest_index = 0
        self.on_seated = on_seated
        # client id -> seat it held when it left
        self.departed: Dict[str, str] = {}

    def rest_seat(self, mode: str) -> str:
        if mode == MODE_QUADRILLE:
            return SEATS[self.rest_index % len(SEATS)]
        return 'across'

    def active_seats(self, mode: str, contract: Optional[str] = None) -> List[str]:
        if contract == CONTRACT_PENETRO:
            return list(SEATS)
        rest = self.rest_seat(mode)
        return [seat for seat in SEATS if seat != rest][:3]

    def rotate_rest(self) -> None:
        self.rest_index = (self.rest_index + 1) % len(SEATS)

    def attach(self, conn: Connection) -> None:
        if conn not in self.connections:
            self.connections.append(conn)

    def conn_at(self, seat: Optional[str]) -> Optional[Connection]:
        if seat is None:
            return None
        return next((c for c in self.connections if c.seat == seat), None)

    def is_synthetic(self, seat: Optional[str]) -> bool:
        """True when nobody or a bot holds ``seat``."""
        conn = self.conn_at(seat)
        return conn is None or conn.is_bot

    def live_connections(self) -> List[Connection]:
        return [c for c in self.connections if not c.is_bot]

    def _seat(self, conn: Connection, seat: str) -> None:
        conn.seat = seat
        logger.info(f"{conn.handle} ({conn.id}) seated at {seat}")
        if self.on_seated:
            self.on_seated(conn, seat)

    def _evict_bot(self, seat: str) -> None:
        bot = self.conn_at(seat)
        if bot is not None and bot.is_bot:
            self.connections.remove(bot)
            bot.seat = None

    def reclaim(self, conn: Connection, client_id: str, active: List[str]) -> Optional[str]:
        """Give a resuming client its old seat back if a bot holds it or it is vacant."""
        self.attach(conn)
        seat = self.departed.get(client_id)
        if seat is None or seat not in active or not self.is_synthetic(seat):
            return None
        del self.departed[client_id]
        self._evict_bot(seat)
        self._seat(conn, seat)
        return seat

    def join(self, conn: Connection, active: List[str]) -> Optional[str]:
        """
        Seat ``conn`` if an active seat is available.

        A bot at an active seat is displaced first, otherwise the first vacant
        active seat is taken. A connection left unseated keeps watching and is
        not moved into a seat later, even when the resting seat rotates; it
        has to JOIN again once a seat frees up.

        Returns:
            The seat taken, or None if the connection stays unseated
        """
        self.attach(conn)
        if conn.seat is not None:
            return conn.seat

        bot_seat = next((s for s in active if self.conn_at(s) is not None and self.conn_at(s).is_bot), None)
        if bot_seat is not None:
            self._evict_bot(bot_seat)
            self._seat(conn, bot_seat)
            return bot_seat

        free = next((s for s in active if self.conn_at(s) is None), None)
        if free is not None:
            self._seat(conn, free)
            return free
        return None

    def fill_vacant(self, active: List[str]) -> List[BotConnection]:
        """Put a bot at every vacant active seat and drop bots sitting elsewhere."""
        created = []
        for seat in active:
            if self.conn_at(seat) is None:
                bot = BotConnection()
                self.connections.append(bot)
                self._seat(bot, seat)
                created.append(bot)
        for conn in list(self.connections):
            if conn.is_bot and conn.seat not in active:
                self.connections.remove(conn)
                conn.seat = None
        return created

    def remove(self, conn: Connection) -> Optional[str]:
        """Detach ``conn``. Returns the seat it vacated, if any."""
        if conn in self.connections:
            self.connections.remove(conn)
        seat = conn.seat
        if seat is not None and not conn.is_bot:
            self.departed[conn.id] = seat
        conn.seat = None
        return seat
