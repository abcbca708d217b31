"""Game constants and utilities"""

from typing import Dict, List

SUITS: List[str] = ['oros', 'copas', 'espadas', 'bastos']
RANKS: List[int] = [1, 2, 3, 4, 5, 6, 7, 10, 11, 12]
BLACK_SUITS = ('espadas', 'bastos')

# Relative seats in rotation order; "left" sits to the left of "you"
SEATS: List[str] = ['you', 'left', 'across', 'right']
REFERENCE_SEAT = 'you'

MODE_TRESILLO = 'tresillo'
MODE_QUADRILLE = 'quadrille'
MODES = (MODE_TRESILLO, MODE_QUADRILLE)

# Phases
PHASE_LOBBY = 'lobby'
PHASE_DEALING = 'dealing'
PHASE_AUCTION = 'auction'
PHASE_TRUMP_CHOICE = 'trump_choice'
PHASE_EXCHANGE = 'exchange'
PHASE_PLAY = 'play'
PHASE_SCORING = 'scoring'

# Bids
BID_PASS = 'pass'
BID_ENTRADA = 'entrada'
BID_OROS = 'oros'
BID_VOLTEO = 'volteo'
BID_SOLO = 'solo'
BID_SOLO_OROS = 'solo_oros'
BID_BOLA = 'bola'
BID_CONTRABOLA = 'contrabola'

BID_VALUES: Dict[str, int] = {
    BID_PASS: 0,
    BID_ENTRADA: 1,
    BID_OROS: 2,
    BID_VOLTEO: 3,
    BID_SOLO: 4,
    BID_SOLO_OROS: 5,
    BID_BOLA: 6,
    BID_CONTRABOLA: 99,
}
BIDS = tuple(BID_VALUES)

# Contracts
CONTRACT_ENTRADA = 'entrada'
CONTRACT_OROS = 'oros'
CONTRACT_VOLTEO = 'volteo'
CONTRACT_SOLO = 'solo'
CONTRACT_SOLO_OROS = 'solo_oros'
CONTRACT_BOLA = 'bola'
CONTRACT_CONTRABOLA = 'contrabola'
CONTRACT_PENETRO = 'penetro'

OROS_CONTRACTS = (CONTRACT_OROS, CONTRACT_SOLO_OROS)
SOLO_CONTRACTS = (CONTRACT_SOLO, CONTRACT_SOLO_OROS)
NO_TRUMP_CONTRACTS = (CONTRACT_BOLA, CONTRACT_CONTRABOLA)

# Dealing
HAND_SIZE = 9
DEAL_ROUNDS = 3
CARDS_PER_ROUND = 3
PENETRO_PICKUP = 9
TRICKS_TO_WIN = 5

# Exchange limits
DEFENDER_MAX_DISCARDS = 5
OMBRE_MAX_DISCARDS = 8
OMBRE_OROS_MAX_DISCARDS = 6

# Hand results
RESULT_SACADA = 'sacada'
RESULT_CODILLE = 'codille'
RESULT_PUESTA = 'puesta'
RESULT_BOLA_MADE = 'bola_made'
RESULT_BOLA_FAILED = 'bola_failed'
RESULT_CONTRABOLA_MADE = 'contrabola_made'
RESULT_CONTRABOLA_FAILED = 'contrabola_failed'
RESULT_PENETRO = 'penetro'

# Awards
PENETRO_AWARD = 2
BOLA_AWARD = 6
BOLA_DEFENDER_AWARD = 2
CONTRABOLA_AWARD = 4
CONTRABOLA_DEFENDER_AWARD = 1
SACADA_ALL_TRICKS_AWARD = 4
SACADA_MAJORITY_AWARD = 2
SACADA_AWARD = 1
OROS_BONUS = 1
CODILLE_AWARD = 2
PUESTA_AWARD = 1

# Events
EVENT_SEATED = 'SEATED'
EVENT_PLAYER_LEFT = 'PLAYER_LEFT'
EVENT_AUCTION_WIN = 'AUCTION_WIN'
EVENT_AUCTION_PASS_OUT = 'AUCTION_PASS_OUT'
EVENT_ESPADA_OBLIGATORIA = 'ESPADA_OBLIGATORIA'
EVENT_PENETRO_START = 'PENETRO_START'
EVENT_PENETRO_RESULT = 'PENETRO_RESULT'
EVENT_TRUMP_SET = 'TRUMP_SET'
EVENT_TRICK_TAKEN = 'TRICK_TAKEN'
EVENT_HAND_RESULT = 'HAND_RESULT'
EVENT_GAME_END = 'GAME_END'
EVENT_ROOM_CLOSING = 'ROOM_CLOSING'

# Outbound message types
MSG_WELCOME = 'WELCOME'
MSG_STATE = 'STATE'
MSG_EVENT = 'EVENT'
MSG_ERROR = 'ERROR'
MSG_PONG = 'PONG'

BOT_HANDLE = 'Bot'


def empty_seat_counts() -> Dict[str, int]:
    return {seat: 0 for seat in SEATS}
