"""
Hand resolution: who scores what once the last trick is taken.
"""

from typing import Dict, List, Optional

from .constants import (
    BOLA_AWARD, BOLA_DEFENDER_AWARD, CODILLE_AWARD, CONTRABOLA_AWARD,
    CONTRABOLA_DEFENDER_AWARD, CONTRACT_BOLA, CONTRACT_CONTRABOLA,
    CONTRACT_PENETRO, HAND_SIZE, OROS_BONUS, OROS_CONTRACTS, PENETRO_AWARD,
    PUESTA_AWARD, RESULT_BOLA_FAILED, RESULT_BOLA_MADE, RESULT_CODILLE,
    RESULT_CONTRABOLA_FAILED, RESULT_CONTRABOLA_MADE, RESULT_PENETRO,
    RESULT_PUESTA, RESULT_SACADA, SACADA_ALL_TRICKS_AWARD, SACADA_AWARD,
    SACADA_MAJORITY_AWARD, SEATS, TRICKS_TO_WIN,
)
from .models import HandResult


def sacada_points(contract: str, ombre_tricks: int) -> int:
    if ombre_tricks == HAND_SIZE:
        points = SACADA_ALL_TRICKS_AWARD
    elif ombre_tricks >= 7:
        points = SACADA_MAJORITY_AWARD
    else:
        points = SACADA_AWARD
    if contract in OROS_CONTRACTS:
        points += OROS_BONUS
    return points


def resolve_penetro(tricks: Dict[str, int]) -> HandResult:
    """Most tricks wins; ties go to the earlier seat."""
    winner = max(SEATS, key=lambda seat: (tricks.get(seat, 0), -SEATS.index(seat)))
    return HandResult(RESULT_PENETRO, PENETRO_AWARD, [winner], dict(tricks))


def resolve_hand(
    contract: str,
    ombre: Optional[str],
    active: List[str],
    tricks: Dict[str, int],
) -> HandResult:
    """
    Decide the outcome of a finished hand.

    Args:
        contract: The contract that was played
        ombre: The declarer (unused for penetro)
        active: Seats that played the hand
        tricks: Tricks taken per seat

    Returns:
        HandResult naming the result, the points per awarded seat and who gets them
    """
    if contract == CONTRACT_PENETRO:
        return resolve_penetro(tricks)

    ombre_tricks = tricks.get(ombre, 0)
    defenders = [seat for seat in active if seat != ombre]
    snapshot = dict(tricks)

    if contract == CONTRACT_BOLA:
        if ombre_tricks == HAND_SIZE:
            return HandResult(RESULT_BOLA_MADE, BOLA_AWARD, [ombre], snapshot)
        return HandResult(RESULT_BOLA_FAILED, BOLA_DEFENDER_AWARD, defenders, snapshot)

    if contract == CONTRACT_CONTRABOLA:
        if ombre_tricks == 0:
            return HandResult(RESULT_CONTRABOLA_MADE, CONTRABOLA_AWARD, [ombre], snapshot)
        return HandResult(RESULT_CONTRABOLA_FAILED, CONTRABOLA_DEFENDER_AWARD, defenders, snapshot)

    if ombre_tricks >= TRICKS_TO_WIN:
        return HandResult(RESULT_SACADA, sacada_points(contract, ombre_tricks), [ombre], snapshot)

    best_defence = max((tricks.get(seat, 0) for seat in defenders), default=0)
    if best_defence >= TRICKS_TO_WIN:
        winner = next(seat for seat in defenders if tricks.get(seat, 0) == best_defence)
        return HandResult(RESULT_CODILLE, CODILLE_AWARD, [winner], snapshot)
    return HandResult(RESULT_PUESTA, PUESTA_AWARD, defenders, snapshot)


def apply_result(scores: Dict[str, int], result: HandResult) -> None:
    for seat in result.award:
        scores[seat] += result.points


def game_winner(scores: Dict[str, int], target: int) -> Optional[str]:
    """Highest score at or over the target, earlier seat on ties."""
    reached = [seat for seat in SEATS if scores.get(seat, 0) >= target]
    if not reached:
        return None
    return max(reached, key=lambda seat: (scores[seat], -SEATS.index(seat)))
