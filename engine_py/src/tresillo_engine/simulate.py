#!/usr/bin/env python3
"""Offline bot-only games on the manual scheduler"""

import argparse
import logging
import random
from typing import Dict, List, Optional

from .clock import ManualScheduler
from .constants import EVENT_GAME_END, EVENT_HAND_RESULT, EVENT_PENETRO_RESULT, MODES, MODE_QUADRILLE
from .engine import TresilloRoom
from .rules import create_rules
from .shuffle import validate_deck_integrity

logger = logging.getLogger(__name__)

MAX_STEPS = 50000


def simulate_games(
    games: int = 1,
    mode: str = MODE_QUADRILLE,
    seed: Optional[int] = None,
    **rule_overrides,
) -> List[Dict]:
    """
    Play ``games`` complete games with bots in every seat.

    Returns:
        One summary per game: winner, final scores and hands played
    """
    rng = random.Random(seed)
    scheduler = ManualScheduler()
    room = TresilloRoom("sim", rules=create_rules(**rule_overrides), scheduler=scheduler, rng=rng)
    room.state.mode = mode
    room.state.resting = room.seating.rest_seat(mode)

    summaries: List[Dict] = []
    hands = {"count": 0}

    def on_event(room_id, name, payload):
        if name in (EVENT_HAND_RESULT, EVENT_PENETRO_RESULT):
            hands["count"] += 1
        elif name == EVENT_GAME_END:
            summaries.append({
                "winner": payload["winner"],
                "scores": dict(payload["finalScores"]),
                "hands": hands["count"],
            })
            hands["count"] = 0

    room.add_listener(on_event)
    room.new_hand()

    steps = 0
    while len(summaries) < games and steps < MAX_STEPS:
        if not scheduler.run_next():
            break
        steps += 1
        if not validate_deck_integrity(room.piles()):
            raise RuntimeError(f"Deck integrity broken after step {steps}")

    room.close()
    if len(summaries) < games:
        logger.warning(f"Stopped after {steps} steps with {len(summaries)} of {games} games finished")
    return summaries


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play bot-only Tresillo games offline")
    parser.add_argument("--games", type=int, default=1, help="Number of games to play")
    parser.add_argument("--mode", choices=MODES, default=MODE_QUADRILLE)
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible run")
    parser.add_argument("--target", type=int, default=12, help="Score that ends a game")
    parser.add_argument("--no-penetro", action="store_true", help="Disable penetro on pass-out")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    summaries = simulate_games(
        games=args.games,
        mode=args.mode,
        seed=args.seed,
        game_target=args.target,
        penetro_enabled=not args.no_penetro,
    )
    for number, summary in enumerate(summaries, 1):
        scores = ", ".join(f"{seat}={points}" for seat, points in summary["scores"].items())
        print(f"Game {number}: winner {summary['winner']} after {summary['hands']} hands ({scores})")


if __name__ == "__main__":
    main()
