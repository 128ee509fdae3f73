"""
Point-by-point score engine.

apply_point() is the only way a score moves:
- Validate the event and repair the incoming state into a fresh copy
- Advance or revert one point (normal game or tie-break)
- Cascade into game, set and match completion
- Never touch the caller's state
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from scorekeeper.config import GAME_POINT
from scorekeeper.exceptions import MatchCompletedError
from scorekeeper.models import (
    AWARD,
    MatchConfig,
    MatchStatus,
    ScoreState,
    ScoreUpdate,
    advantage_label,
)
from scorekeeper.validation import normalize_state, validate_event

logger = logging.getLogger(__name__)


# =========================================================
# PUBLIC API
# =========================================================

def apply_point(
    state: ScoreState,
    config: MatchConfig,
    player: int,
    direction: str = AWARD,
) -> ScoreUpdate:
    """
    Award or retract one point for `player` (1 or 2) and return the
    successor state with its match status.
    """
    validate_event(player, direction)

    new_state = normalize_state(state, config)

    if direction == AWARD and new_state.final_set_completed:
        raise MatchCompletedError("Cannot award a point: the match is completed")

    idx = player - 1
    game_winner = None
    set_winner = None

    if new_state.current_tiebreak is not None:
        if direction == AWARD:
            set_winner = _award_tiebreak_point(new_state, config, idx)
        else:
            _retract_tiebreak_point(new_state, config, idx)
    elif direction == AWARD:
        if _award_game_point(new_state, config, idx):
            game_winner = player
            set_winner = _after_game_won(new_state, config, idx)
    elif _retract_game_point(new_state, config, idx):
        _after_game_retracted(new_state, config)

    status = match_status(new_state, config)

    logger.debug(
        "%s player%d -> sets=%s game=%s adv=%s tb=%s status=%s",
        direction,
        player,
        new_state.sets,
        new_state.current_game,
        new_state.advantage,
        new_state.current_tiebreak,
        status.value,
    )

    return ScoreUpdate(
        state=new_state,
        status=status,
        game_winner=game_winner,
        set_winner=set_winner,
    )


def match_status(state: ScoreState, config: Optional[MatchConfig] = None) -> MatchStatus:
    """
    Completed exactly when the deciding set has closed. `upcoming` is owned
    by the match record and never produced here.
    """
    if state.final_set_completed:
        return MatchStatus.COMPLETED
    return MatchStatus.ONGOING


def sets_won(state: ScoreState) -> Tuple[int, int]:
    """Sets won by each player, counting only closed sets."""
    closed = list(state.sets[:state.current_set])
    if state.final_set_completed:
        closed.append(state.sets[state.current_set])

    a_sets = sum(1 for games in closed if games[0] > games[1])
    b_sets = sum(1 for games in closed if games[1] > games[0])
    return a_sets, b_sets


def match_winner(state: ScoreState) -> Optional[int]:
    if not state.final_set_completed:
        return None

    a_sets, b_sets = sets_won(state)
    if a_sets == b_sets:
        return None
    return 1 if a_sets > b_sets else 2


# =========================================================
# NORMAL GAME
# =========================================================

def _award_game_point(state: ScoreState, config: MatchConfig, idx: int) -> bool:
    """Returns True when the point won the game."""
    opp = 1 - idx
    game = state.current_game

    if game[idx] < GAME_POINT:
        game[idx] += 1
        return False

    if config.use_advantage and game[opp] == GAME_POINT:
        label = advantage_label(idx + 1)

        if state.advantage is None:
            state.advantage = label
            return False

        if state.advantage != label:
            # Back to deuce
            state.advantage = None
            return False

    state.current_games[idx] += 1
    state.current_game = [0, 0]
    state.advantage = None

    logger.info("Game player%d, games %s", idx + 1, state.current_games)
    return True


def _retract_game_point(state: ScoreState, config: MatchConfig, idx: int) -> bool:
    """
    Take one point back. Returns True when a completed game was undone.

    Undoing a game can only approximate the score it was won from: the
    player is put back on 40, and given the advantage only if the opponent
    is on 40 as well.
    """
    opp = 1 - idx
    game = state.current_game

    if state.advantage == advantage_label(idx + 1):
        # Back to deuce
        state.advantage = None
        return False

    if game[idx] > 0:
        game[idx] -= 1
        state.advantage = None
        return False

    games = state.current_games
    if games[idx] == 0:
        return False

    games[idx] -= 1
    game[idx] = GAME_POINT

    if config.use_advantage and game[opp] == GAME_POINT:
        state.advantage = advantage_label(idx + 1)
    else:
        state.advantage = None

    logger.info("Game retracted for player%d, games %s", idx + 1, games)
    return True


# =========================================================
# SET LOGIC
# =========================================================

def _set_won(games, config: MatchConfig, idx: int) -> bool:
    return (
        games[idx] >= config.games_to_win_set
        and games[idx] - games[1 - idx] >= 2
    )


def _enter_tiebreak_if_level(state: ScoreState, config: MatchConfig):
    games = state.current_games
    if games[0] == games[1] == config.tiebreak_trigger:
        state.tiebreak_scores[state.current_set] = [0, 0]
        state.current_game = [0, 0]
        state.advantage = None
        logger.info("Tie-break in set %d", state.current_set + 1)


def _after_game_won(state: ScoreState, config: MatchConfig, idx: int) -> Optional[int]:
    """
    Only the player who just took the game can have won the set.
    Returns the set winner (1 or 2) if the set closed.
    """
    if _set_won(state.current_games, config, idx):
        _close_set(state, config, idx)
        return idx + 1

    _enter_tiebreak_if_level(state, config)
    return None


def _after_game_retracted(state: ScoreState, config: MatchConfig):
    """
    A retraction never closes a set. It can only reopen the deciding set
    of a completed match, when the winner's game was the one taken back.
    """
    if state.final_set_completed:
        games = state.current_games
        if _set_won(games, config, 0) or _set_won(games, config, 1):
            # Still decided
            state.current_game = [0, 0]
            state.advantage = None
            return

        state.final_set_completed = False
        logger.info("Match reopened in set %d %s", state.current_set + 1, games)

    _enter_tiebreak_if_level(state, config)


def _close_set(state: ScoreState, config: MatchConfig, winner: int):
    deciding = state.current_set >= config.max_sets - 1

    if config.finish_early and not deciding:
        previous = state.sets[:state.current_set]
        won = sum(1 for games in previous if games[winner] > games[1 - winner]) + 1
        deciding = won >= config.sets_to_win

    if deciding:
        state.final_set_completed = True
        state.current_game = [0, 0]
        state.advantage = None
        logger.info(
            "Match completed: player%d wins set %d %s",
            winner + 1,
            state.current_set + 1,
            state.current_games,
        )
        return

    logger.info(
        "Set %d to player%d %s",
        state.current_set + 1,
        winner + 1,
        state.current_games,
    )

    state.current_set += 1
    state.sets.append([0, 0])
    state.tiebreak_scores.append(None)
    state.current_game = [0, 0]
    state.advantage = None


# =========================================================
# TIE-BREAK
# =========================================================

def _tiebreak_won(points, config: MatchConfig) -> Optional[int]:
    for idx in (0, 1):
        if (
            points[idx] >= config.tiebreak_points
            and points[idx] - points[1 - idx] >= 2
        ):
            return idx
    return None


def _award_tiebreak_point(state: ScoreState, config: MatchConfig, idx: int) -> Optional[int]:
    points = state.current_tiebreak
    points[idx] += 1

    if _tiebreak_won(points, config) != idx:
        return None

    games = state.current_games
    games[idx] = config.games_to_win_set + 1
    games[1 - idx] = config.games_to_win_set

    _close_set(state, config, idx)
    return idx + 1


def _retract_tiebreak_point(state: ScoreState, config: MatchConfig, idx: int):
    points = state.current_tiebreak
    was_won = _tiebreak_won(points, config)

    if points[idx] > 0:
        points[idx] -= 1

    # Only the deciding set of a completed match can still hold a finished
    # tie-break; reopen it if the correction undid the win.
    if was_won is not None and _tiebreak_won(points, config) is None:
        state.sets[state.current_set] = [config.games_to_win_set] * 2
        state.final_set_completed = False
        logger.info("Tie-break reopened in set %d", state.current_set + 1)
