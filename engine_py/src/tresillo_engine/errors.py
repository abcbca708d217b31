# engine_py/src/tresillo_engine/errors.py

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes sent to clients."""
    BAD_BID = "BAD_BID"
    WRONG_PHASE = "WRONG_PHASE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    NOT_OMBRE = "NOT_OMBRE"
    NO_TRUMP_FOR_CONTRACT = "NO_TRUMP_FOR_CONTRACT"
    TRUMP_MUST_BE_OROS = "TRUMP_MUST_BE_OROS"
    OWNERSHIP = "OWNERSHIP"
    ILLEGAL_PLAY = "ILLEGAL_PLAY"
    TOO_MANY_DISCARDS = "TOO_MANY_DISCARDS"
    NO_SEAT = "NO_SEAT"
    UNKNOWN_TYPE = "UNKNOWN_TYPE"
    INVALID_JSON = "INVALID_JSON"
    INVALID_MESSAGE = "INVALID_MESSAGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
