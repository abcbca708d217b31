"""Room state machine: dealing, auction, trump choice, exchange, play and scoring"""

import logging
import random
from typing import Any, Callable, Dict, List, Optional

from .bidding import contract_for_bid
from .bots.base import BaseBot, BotAction
from .bots.heuristic import HeuristicBot
from .clock import ManualScheduler, TurnClock
from .comparator import is_spadille, trick_winner
from .connections import Connection
from .constants import (
    BID_PASS, BID_VOLTEO, CONTRACT_ENTRADA, CONTRACT_PENETRO, EVENT_AUCTION_PASS_OUT,
    EVENT_AUCTION_WIN, EVENT_ESPADA_OBLIGATORIA, EVENT_GAME_END, EVENT_HAND_RESULT,
    EVENT_PENETRO_RESULT, EVENT_PENETRO_START, EVENT_PLAYER_LEFT, EVENT_ROOM_CLOSING,
    EVENT_SEATED, EVENT_TRICK_TAKEN, EVENT_TRUMP_SET, MODE_QUADRILLE, MODES,
    MSG_ERROR, MSG_EVENT, MSG_PONG, MSG_WELCOME, NO_TRUMP_CONTRACTS, PENETRO_PICKUP,
    PHASE_AUCTION, PHASE_DEALING, PHASE_EXCHANGE, PHASE_LOBBY, PHASE_PLAY,
    PHASE_SCORING, PHASE_TRUMP_CHOICE, REFERENCE_SEAT, SEATS, empty_seat_counts,
)
from .errors import ErrorCode
from .exchange import exchange_order, next_exchanger, swap_with_talon
from .models import ActionResult, AuctionState, Card, ExchangeState, RoomState
from .rules import RuleConfig, default_rules
from .scoring import apply_result, game_winner, resolve_hand
from .seating import SeatManager, left_of, rotation_from
from .serialization import serialize_card, state_message
from .shuffle import deal_hands, make_deck
from .validate import (
    ValidationResult, validate_bid, validate_exchange, validate_play, validate_trump_choice,
)

logger = logging.getLogger(__name__)

EventListener = Callable[[str, str, Dict[str, Any]], None]


class TresilloRoom:
    """
    One game table: four seats, one shared state, one turn clock.

    Every entry point runs to completion before the next one starts; the
    caller (a room actor or a test) is responsible for that serialization.
    Successful transitions broadcast a new STATE snapshot and rearm the clock.
    Rejected actions send ERROR to the acting seat only and change nothing.
    """

    def __init__(
        self,
        room_id: str,
        rules: Optional[RuleConfig] = None,
        scheduler=None,
        rng: Optional[random.Random] = None,
        bot: Optional[BaseBot] = None,
    ):
        self.room_id = room_id
        self.rules = rules or default_rules
        self.rng = rng or random.Random()
        self.bot = bot or HeuristicBot(self.rng)
        self.clock = TurnClock(scheduler or ManualScheduler())
        self.seating = SeatManager(on_seated=self._on_seated)
        self.state = RoomState(
            room_id=room_id,
            game_target=self.rules.game_target,
            rules=self.rules.table_rules(),
        )
        self.state.resting = self.seating.rest_seat(self.state.mode)
        self.listeners: List[EventListener] = []
        self.closed = False
        self._dealt = False

        # Hand-scoped piles; together with the table they always hold all 40 cards
        self.hands: Dict[str, List[Card]] = {seat: [] for seat in SEATS}
        self.original: Dict[str, List[Card]] = {seat: [] for seat in SEATS}
        self.talon: List[Card] = []
        self.discards: List[Card] = []
        self.won: Dict[str, List[Card]] = {seat: [] for seat in SEATS}

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def attach(self, conn: Connection, resume_id: Optional[str] = None) -> Connection:
        """Register a connection, greet it and send it the current state."""
        resumed = False
        if resume_id:
            conn.id = resume_id
            self.seating.attach(conn)
            if self.state.phase != PHASE_LOBBY:
                resumed = self.seating.reclaim(conn, resume_id, self.active_seats()) is not None
        else:
            self.seating.attach(conn)

        welcome = {"type": MSG_WELCOME, "clientId": conn.id, "roomId": self.room_id}
        if resumed:
            welcome["resumed"] = True
        self._send(conn, welcome)
        self._sync(conn)
        if resumed and conn.seat == self.state.turn:
            self._arm_clock()
        logger.info(f"Client {conn.id} attached to room {self.room_id} (resumed={resumed})")
        return conn

    def detach(self, conn: Connection) -> None:
        handle = conn.handle
        seat = self.seating.remove(conn)
        if seat is not None:
            logger.info(f"Player {handle} ({seat}) left room {self.room_id}")
            self._event(EVENT_PLAYER_LEFT, {"seat": seat, "handle": handle})
        if self.state.phase != PHASE_LOBBY and not self.closed:
            self.seating.fill_vacant(self.active_seats())
            if seat is not None and seat == self.state.turn:
                self._arm_clock()
        logger.info(
            f"Client {conn.id} detached from room {self.room_id}. "
            f"Live connections: {self.live_connection_count()}"
        )

    def live_connection_count(self) -> int:
        return len(self.seating.live_connections())

    def add_listener(self, listener: EventListener) -> None:
        """Register ``listener(room_id, name, payload)`` for every room event."""
        self.listeners.append(listener)

    # ------------------------------------------------------------------
    # Inbound messages
    # ------------------------------------------------------------------

    def handle(self, conn: Connection, message: Dict[str, Any]) -> ActionResult:
        """
        Dispatch one validated inbound message from ``conn``.

        Args:
            conn: The sending connection
            message: Dict with ``type`` and snake_case fields

        Returns:
            ActionResult of the dispatched action
        """
        try:
            message_type = message.get("type")
            if message_type == "JOIN":
                return self.join(conn, message.get("mode"))
            if message_type == "PING":
                self._send(conn, {"type": MSG_PONG})
                return ActionResult.ok()

            if conn.seat is None:
                self._send_error(conn, ErrorCode.NO_SEAT.value, "Join the table first")
                return ActionResult.error(ErrorCode.NO_SEAT.value, "Join the table first")

            if message_type == "BID":
                return self.apply_bid(conn.seat, message.get("value"))
            if message_type == "CHOOSE_TRUMP":
                return self.choose_trump(conn.seat, message.get("suit"))
            if message_type == "EXCHANGE":
                return self.finish_exchange(conn.seat, message.get("discard_ids") or [])
            if message_type == "PLAY":
                return self.play_card(conn.seat, message.get("card_id"))

            logger.warning(f"Unknown message type from {conn.id}: {message_type}")
            self._send_error(conn, ErrorCode.UNKNOWN_TYPE.value, f"Unknown message type: {message_type}")
            return ActionResult.error(ErrorCode.UNKNOWN_TYPE.value)
        except Exception:
            logger.exception(f"Error handling message from {conn.id} in room {self.room_id}")
            self._send_error(conn, ErrorCode.INTERNAL_ERROR.value, "An internal error occurred")
            return ActionResult.error(ErrorCode.INTERNAL_ERROR.value, "An internal error occurred")

    def join(self, conn: Connection, mode: Optional[str] = None) -> ActionResult:
        """Seat a connection; the first JOIN of a lobby room deals the first hand."""
        if self.state.phase == PHASE_LOBBY and mode in MODES:
            self.state.mode = mode
            self.state.resting = self.seating.rest_seat(mode)

        seat = conn.seat
        if seat is None:
            seat = self.seating.join(conn, self.active_seats())
            if seat is None:
                logger.info(f"No free seat for {conn.id} in room {self.room_id}, watching")

        if self.state.phase == PHASE_LOBBY:
            self.new_hand()
        else:
            self._sync(conn)
            if seat is not None and seat == self.state.turn:
                self._arm_clock()
        return ActionResult.ok()

    # ------------------------------------------------------------------
    # Dealing and auction
    # ------------------------------------------------------------------

    def active_seats(self) -> List[str]:
        return self.seating.active_seats(self.state.mode, self.state.contract)

    def new_hand(self) -> None:
        state = self.state
        self.clock.cancel()
        if state.mode == MODE_QUADRILLE and self._dealt:
            self.seating.rotate_rest()
        self._dealt = True

        state.contract = None
        state.ombre = None
        state.trump = None
        state.phase = PHASE_DEALING
        state.resting = self.seating.rest_seat(state.mode)
        active = self.active_seats()
        self.seating.fill_vacant(active)

        self.hands = {seat: [] for seat in SEATS}
        self.original = {seat: [] for seat in SEATS}
        self.discards = []
        self.won = {seat: [] for seat in SEATS}
        state.table = []
        state.play_order = []
        state.tricks = empty_seat_counts()

        dealt, self.talon = deal_hands(make_deck(self.rng), active)
        self.hands.update(dealt)
        for seat in active:
            self.original[seat] = list(self.hands[seat])
        state.hands_count = {seat: len(self.hands[seat]) for seat in SEATS}

        order = rotation_from(REFERENCE_SEAT, active)
        state.auction = AuctionState(order=order)
        state.exchange = ExchangeState()
        state.phase = PHASE_AUCTION
        state.turn = order[0]
        self._transition()

    def apply_bid(self, seat: str, value: str) -> ActionResult:
        check = validate_bid(self.state, seat, value)
        if not check.valid:
            return self._reject(seat, check)

        auction = self.state.auction
        if value == BID_PASS:
            if seat not in auction.passed:
                auction.passed.append(seat)
        else:
            auction.current_bid = value
            auction.current_bidder = seat

        alive = auction.alive()
        if auction.current_bidder is not None and alive in ([], [auction.current_bidder]):
            self._auction_won()
        elif not alive:
            self._pass_out()
        else:
            start = auction.order.index(seat)
            rotation = auction.order[start + 1:] + auction.order[:start + 1]
            self.state.turn = next(s for s in rotation if s in alive)
            self._transition()
        return ActionResult.ok()

    def _auction_won(self) -> None:
        state = self.state
        bid = state.auction.current_bid
        state.ombre = state.auction.current_bidder
        state.contract = contract_for_bid(bid)
        self._event(EVENT_AUCTION_WIN, {"ombre": state.ombre, "bid": bid, "contract": state.contract})

        if bid == BID_VOLTEO:
            # The top talon card is turned; it stays in the talon
            state.trump = self.talon[0].suit
            self._event(EVENT_TRUMP_SET, {"method": "volteo", "suit": state.trump})
            self._start_exchange()
        elif state.contract in NO_TRUMP_CONTRACTS:
            self._start_play()
        else:
            state.phase = PHASE_TRUMP_CHOICE
            state.turn = state.ombre
            self._transition()

    def _pass_out(self) -> None:
        state = self.state
        if state.mode == MODE_QUADRILLE and state.rules.penetro_enabled:
            self._start_penetro()
            return

        if state.rules.forced_trump_holder:
            holder = self._spadille_holder()
            if holder is not None:
                state.ombre = holder
                state.contract = CONTRACT_ENTRADA
                state.phase = PHASE_TRUMP_CHOICE
                state.turn = holder
                self._event(EVENT_ESPADA_OBLIGATORIA, {"ombre": holder})
                self._transition()
                return

        self._event(EVENT_AUCTION_PASS_OUT, {})
        self.new_hand()

    def _spadille_holder(self) -> Optional[str]:
        for seat in self.active_seats():
            if any(is_spadille(card) for card in self.hands[seat]):
                return seat
        return None

    def _start_penetro(self) -> None:
        state = self.state
        rest = state.resting
        count = min(PENETRO_PICKUP, len(self.talon))
        self.hands[rest].extend(self.talon[:count])
        del self.talon[:count]
        state.hands_count[rest] = len(self.hands[rest])

        state.contract = CONTRACT_PENETRO
        state.ombre = None
        state.trump = None
        state.resting = None
        self.seating.fill_vacant(self.active_seats())
        state.phase = PHASE_PLAY
        state.turn = left_of(REFERENCE_SEAT, self.active_seats())
        self._event(EVENT_PENETRO_START, {"restingPlayer": rest})
        self._transition()

    # ------------------------------------------------------------------
    # Trump and exchange
    # ------------------------------------------------------------------

    def choose_trump(self, seat: str, suit: str) -> ActionResult:
        check = validate_trump_choice(self.state, seat, suit)
        if not check.valid:
            return self._reject(seat, check)

        self.state.trump = suit
        self._event(EVENT_TRUMP_SET, {"method": "choice", "suit": suit})
        self._start_exchange()
        return ActionResult.ok()

    def _start_exchange(self) -> None:
        state = self.state
        order = exchange_order(self.active_seats(), state.ombre, state.contract)
        state.exchange = ExchangeState(
            current=order[0] if order else None,
            order=order,
            talon_size=len(self.talon),
            completed=[],
        )
        if not order:
            self._start_play()
            return
        state.phase = PHASE_EXCHANGE
        state.turn = order[0]
        self._transition()

    def finish_exchange(self, seat: str, discard_ids: List[str]) -> ActionResult:
        """Swap ``discard_ids`` for the same number of talon cards and pass the turn on."""
        hand = self.hands[seat]
        check = validate_exchange(self.state, seat, hand, list(discard_ids), len(self.talon))
        if not check.valid:
            return self._reject(seat, check)

        discarded, _ = swap_with_talon(hand, self.talon, list(discard_ids))
        self.discards.extend(discarded)

        state = self.state
        state.hands_count[seat] = len(hand)
        exchange = state.exchange
        exchange.completed.append(seat)
        exchange.talon_size = len(self.talon)

        following = next_exchanger(exchange, seat)
        if following is None:
            exchange.current = None
            self._start_play()
        else:
            exchange.current = following
            state.turn = following
            self._transition()
        return ActionResult.ok()

    # ------------------------------------------------------------------
    # Play
    # ------------------------------------------------------------------

    def _start_play(self) -> None:
        self.state.phase = PHASE_PLAY
        self.state.turn = left_of(self.state.ombre, self.active_seats())
        self._transition()

    def play_card(self, seat: str, card_id: str) -> ActionResult:
        state = self.state
        hand = self.hands[seat]
        check = validate_play(state, seat, hand, card_id)
        if not check.valid:
            return self._reject(seat, check)

        card = check.card
        hand.remove(card)
        state.table.append(card)
        state.play_order.append(seat)
        state.hands_count[seat] = len(hand)

        participants = self.active_seats()
        if len(state.table) < len(participants):
            state.turn = left_of(seat, participants)
            self._transition()
            return ActionResult.ok()

        cards = list(state.table)
        winner = state.play_order[trick_winner(state.trump, cards[0].suit, cards)]
        state.tricks[winner] += 1
        self.won[winner].extend(cards)
        self._event(EVENT_TRICK_TAKEN, {"winner": winner, "cards": [serialize_card(c) for c in cards]})

        state.table = []
        state.play_order = []
        state.turn = winner
        if all(not self.hands[s] for s in participants):
            self._broadcast()
            self._finish_hand()
        else:
            self._transition()
        return ActionResult.ok()

    def _finish_hand(self) -> None:
        state = self.state
        self.clock.cancel()
        result = resolve_hand(state.contract, state.ombre, self.active_seats(), state.tricks)
        apply_result(state.scores, result)

        if state.contract == CONTRACT_PENETRO:
            self._event(EVENT_PENETRO_RESULT, {
                "winner": result.award[0],
                "points": result.points,
                "tricks": dict(result.tricks),
            })
        else:
            self._event(EVENT_HAND_RESULT, {
                "result": result.result,
                "points": result.points,
                "award": list(result.award),
                "tricks": dict(result.tricks),
            })
        self._next_hand()

    def _next_hand(self) -> None:
        state = self.state
        winner = game_winner(state.scores, state.game_target)
        if winner is None:
            state.hand_no += 1
            self.new_hand()
            return

        state.phase = PHASE_SCORING
        state.turn = None
        self._broadcast()
        self._event(EVENT_GAME_END, {"winner": winner, "finalScores": dict(state.scores)})
        self.clock.arm(self.rules.game_end_pause, self.on_timer)

    # ------------------------------------------------------------------
    # Timer and bots
    # ------------------------------------------------------------------

    def on_timer(self) -> None:
        """Clock expiry: start the next game after the end pause, else act for the seat to move."""
        if self.closed:
            return
        state = self.state
        if state.phase == PHASE_SCORING:
            state.scores = empty_seat_counts()
            state.hand_no = 1
            self.new_hand()
            return
        if state.turn is None:
            return
        if not self.seating.is_synthetic(state.turn):
            logger.info(f"Turn timeout in room {self.room_id}, forcing action for {state.turn}")
        self.bot_act(state.turn)

    def bot_act(self, seat: str) -> ActionResult:
        """Let the bot policy act for ``seat`` through the regular entry points."""
        action = self.bot.choose_action(self, seat)
        if action is None:
            logger.warning(f"Bot has no action for {seat} in phase {self.state.phase}")
            self._arm_clock()
            return ActionResult.error(ErrorCode.INTERNAL_ERROR.value, "No bot action")

        result = self.perform(seat, action)
        if not result.success:
            logger.warning(
                f"Bot action {action.type} for {seat} rejected: "
                f"{result.error_code} {result.error_message}"
            )
            self._arm_clock()
        return result

    def perform(self, seat: str, action: BotAction) -> ActionResult:
        if action.type == 'bid':
            return self.apply_bid(seat, action.data['value'])
        if action.type == 'choose_trump':
            return self.choose_trump(seat, action.data['suit'])
        if action.type == 'exchange':
            return self.finish_exchange(seat, action.data['discard_ids'])
        if action.type == 'play':
            return self.play_card(seat, action.data['card_id'])
        raise ValueError(f"Unknown bot action: {action.type}")

    def _arm_clock(self) -> None:
        if self.closed or self.state.turn is None:
            return
        if self.seating.is_synthetic(self.state.turn):
            delay = self.rng.uniform(self.rules.bot_delay_min, self.rules.bot_delay_max)
        else:
            delay = self.rules.turn_timeout
        self.clock.arm(delay, self.on_timer)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def piles(self) -> List[List[Card]]:
        """Every place a card of the current hand can be."""
        return (
            [self.hands[seat] for seat in SEATS] +
            [self.talon, self.state.table, self.discards] +
            [self.won[seat] for seat in SEATS]
        )

    def _transition(self) -> None:
        self._broadcast()
        self._arm_clock()

    def _broadcast(self) -> None:
        self.state.seq += 1
        for conn in list(self.seating.connections):
            self._sync(conn)

    def _sync(self, conn: Connection) -> None:
        hand = self.hands[conn.seat] if conn.seat is not None else None
        self._send(conn, state_message(self.state, hand))

    def _event(self, name: str, payload: Dict[str, Any]) -> None:
        message = {"type": MSG_EVENT, "name": name, "payload": payload}
        for conn in list(self.seating.connections):
            self._send(conn, message)
        for listener in self.listeners:
            try:
                listener(self.room_id, name, payload)
            except Exception as e:
                logger.error(f"Event listener failed for {name} in room {self.room_id}: {e}")

    def _on_seated(self, conn: Connection, seat: str) -> None:
        self._event(EVENT_SEATED, {"seat": seat, "id": conn.id, "handle": conn.handle, "bot": conn.is_bot})

    def _send(self, conn: Connection, message: Dict[str, Any]) -> None:
        try:
            conn.deliver(message)
        except Exception as e:
            logger.error(f"Failed to send message to {conn.id}: {e}")

    def _send_error(self, conn: Optional[Connection], code: str, why: Optional[str] = None) -> None:
        if conn is None:
            return
        message = {"type": MSG_ERROR, "code": code}
        if why is not None:
            message["why"] = why
        self._send(conn, message)

    def _reject(self, seat: str, check: ValidationResult) -> ActionResult:
        self._send_error(self.seating.conn_at(seat), check.error_code, check.error_message)
        return ActionResult.error(check.error_code, check.error_message)

    def close(self) -> None:
        """Stop the clock, tell everyone the room is closing and drop all connections."""
        if self.closed:
            return
        self.clock.cancel()
        self._event(EVENT_ROOM_CLOSING, {})
        self.closed = True
        for conn in list(self.seating.connections):
            try:
                conn.close()
            except Exception as e:
                logger.error(f"Failed to close connection {conn.id}: {e}")
            conn.seat = None
        self.seating.connections.clear()
        logger.info(f"Room {self.room_id} closed")
