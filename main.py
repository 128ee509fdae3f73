from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from scorekeeper.config import DEFAULT_FORMAT, LOG_LEVEL, MATCH_FORMATS
from scorekeeper.exceptions import ScoringError
from scorekeeper.match_session import MatchSession
from scorekeeper.models import AWARD, RETRACT, MatchRecord, PointEvent
from scorekeeper.storage import load_match, save_match

POINT_LABELS = ["0", "15", "30", "40"]


def parse_event(token: str) -> PointEvent:
    """
    "+1" awards player 1 a point, "-2" takes one back from player 2.
    """
    if len(token) != 2 or token[0] not in "+-" or token[1] not in "12":
        raise argparse.ArgumentTypeError(f"invalid event {token!r} (use +1, +2, -1, -2)")

    direction = AWARD if token[0] == "+" else RETRACT
    return PointEvent(player=int(token[1]), direction=direction)


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Live racquet-sport score keeper",
        epilog="Options go before the match file, e.g. main.py --new m1.json +1 +1 -2",
    )
    p.add_argument("match_file", type=Path, help="Match JSON file")
    p.add_argument("events", nargs="*", type=parse_event, help="Point events: +1 +2 -1 -2")
    p.add_argument("--new", action="store_true", help="Create a new match file")
    p.add_argument("--format", dest="match_format", choices=sorted(MATCH_FORMATS), default=DEFAULT_FORMAT)
    p.add_argument("--no-ad", dest="use_advantage", action="store_false", help="No-advantage scoring")
    p.add_argument("--player1", default="Player 1")
    p.add_argument("--player2", default="Player 2")
    return p.parse_args(argv)


def describe(record: MatchRecord) -> List[str]:
    state = record.score_state
    lines = [f"{record.player1} vs {record.player2} ({record.match_format})"]

    for i, (a, b) in enumerate(state.sets, 1):
        tiebreak = state.tiebreak_scores[i - 1] if i - 1 < len(state.tiebreak_scores) else None
        suffix = f" (tie-break {tiebreak[0]}-{tiebreak[1]})" if tiebreak else ""
        lines.append(f"Set {i}: {a} - {b}{suffix}")

    if state.advantage == "player1":
        game = "A - 40"
    elif state.advantage == "player2":
        game = "40 - A"
    else:
        a, b = state.current_game
        game = f"{POINT_LABELS[a]} - {POINT_LABELS[b]}"
    lines.append(f"Game: {game}")
    lines.append(f"Status: {record.status.value}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.new:
            record = MatchRecord.schedule(
                args.match_file.stem,
                args.player1,
                args.player2,
                match_format=args.match_format,
                use_advantage=args.use_advantage,
            )
        else:
            record = load_match(args.match_file)

        session = MatchSession(record)
        for event in args.events:
            session.apply(event)

        record = session.record
        save_match(args.match_file, record)

    except FileNotFoundError as e:
        print("❌ Match file not found:", e.filename)
        return 1

    except ScoringError as e:
        print("❌ ERROR:", e)
        return 1

    for line in describe(record):
        print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
