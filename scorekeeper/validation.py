from __future__ import annotations

import logging
from typing import Any

from scorekeeper.config import GAME_POINT
from scorekeeper.exceptions import InvalidPointEventError, MalformedStateError
from scorekeeper.models import (
    AWARD,
    PLAYERS,
    RETRACT,
    MatchConfig,
    ScoreState,
    advantage_label,
)

logger = logging.getLogger(__name__)

ADVANTAGE_VALUES = (None,) + tuple(advantage_label(p) for p in PLAYERS)


def validate_event(player: Any, direction: Any):
    if not isinstance(player, int) or isinstance(player, bool) or player not in PLAYERS:
        raise InvalidPointEventError(f"Invalid player: {player!r}")

    if direction not in (AWARD, RETRACT):
        raise InvalidPointEventError(f"Invalid direction: {direction!r}")


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _check_pair(pair: Any, what: str, upper: int | None = None):
    if not isinstance(pair, (list, tuple)) or len(pair) != 2:
        raise MalformedStateError(f"{what} must be a pair, got {pair!r}")

    for value in pair:
        if not _is_count(value):
            raise MalformedStateError(f"{what} holds an invalid count: {pair!r}")
        if upper is not None and value > upper:
            raise MalformedStateError(f"{what} is out of range: {pair!r}")


def normalize_state(state: ScoreState, config: MatchConfig) -> ScoreState:
    """
    Return a repaired copy of `state`, ready for a transition.

    Persisted states may come from older schema versions, so bounded
    problems are fixed in place on the copy (and logged):

    - empty set list -> one fresh set
    - current set index past the last set -> last set
    - missing tie-break slots -> None
    - advantage held outside a deuce -> cleared

    Anything that would mean guessing a score (negative or non-integer
    counts, more sets than the format allows, unknown advantage values)
    raises MalformedStateError. Recorded games are never dropped.
    """
    fixed = state.copy()

    # ---- sets ----
    if not fixed.sets:
        logger.warning("Score state has no sets; starting a fresh one")
        fixed.sets = [[0, 0]]

    if len(fixed.sets) > config.max_sets:
        raise MalformedStateError(
            f"{len(fixed.sets)} sets recorded but the format allows {config.max_sets}"
        )

    for i, games in enumerate(fixed.sets):
        _check_pair(games, f"sets[{i}]")
    fixed.sets = [list(games) for games in fixed.sets]

    # ---- current set index ----
    if not isinstance(fixed.current_set, int) or isinstance(fixed.current_set, bool):
        raise MalformedStateError(f"Invalid current set index: {fixed.current_set!r}")

    if fixed.current_set < 0:
        raise MalformedStateError(f"Negative current set index: {fixed.current_set}")

    if fixed.current_set >= len(fixed.sets):
        logger.warning(
            "Current set index %d out of range; clamping to %d",
            fixed.current_set,
            len(fixed.sets) - 1,
        )
        fixed.current_set = len(fixed.sets) - 1

    # ---- current game ----
    _check_pair(fixed.current_game, "currentGame", upper=GAME_POINT)
    fixed.current_game = list(fixed.current_game)

    # ---- tie-breaks ----
    tiebreaks = list(fixed.tiebreak_scores or [])

    if len(tiebreaks) > len(fixed.sets):
        extra = tiebreaks[len(fixed.sets):]
        if any(tb is not None for tb in extra):
            raise MalformedStateError("Tie-break score recorded for a set that was never started")
        logger.warning("Dropping %d empty tie-break slot(s)", len(extra))
        tiebreaks = tiebreaks[:len(fixed.sets)]

    if len(tiebreaks) < len(fixed.sets):
        logger.warning(
            "Padding %d missing tie-break slot(s)", len(fixed.sets) - len(tiebreaks)
        )
        tiebreaks.extend([None] * (len(fixed.sets) - len(tiebreaks)))

    for i, tb in enumerate(tiebreaks):
        if tb is not None:
            _check_pair(tb, f"tieBreakScore[{i}]")
            tiebreaks[i] = list(tb)
    fixed.tiebreak_scores = tiebreaks

    # ---- advantage ----
    if fixed.advantage not in ADVANTAGE_VALUES:
        raise MalformedStateError(f"Invalid advantage value: {fixed.advantage!r}")

    if fixed.advantage is not None:
        deuce = fixed.current_game[0] == fixed.current_game[1] == GAME_POINT
        if not config.use_advantage or not deuce or fixed.current_tiebreak is not None:
            logger.warning("Clearing advantage held outside a deuce: %s", fixed.advantage)
            fixed.advantage = None

    fixed.final_set_completed = bool(fixed.final_set_completed)

    return fixed
