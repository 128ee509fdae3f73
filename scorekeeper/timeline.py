from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from scorekeeper.engine import apply_point, match_status, match_winner, sets_won
from scorekeeper.models import AWARD, MatchConfig, MatchStatus, PointEvent, ScoreState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreSnapshot:
    index: int
    set_number: int
    games: Tuple[int, int]
    points: Tuple[int, int]
    advantage: Optional[str]
    tiebreak: Optional[Tuple[int, int]]
    sets_a: int
    sets_b: int
    status: MatchStatus
    winner: Optional[int]
    timestamp: Optional[float] = None


def build_snapshot(
    state: ScoreState,
    config: MatchConfig,
    index: int,
    timestamp: Optional[float] = None,
) -> ScoreSnapshot:
    games = state.current_games
    tiebreak = state.current_tiebreak
    a_sets, b_sets = sets_won(state)

    return ScoreSnapshot(
        index=index,
        set_number=state.current_set + 1,
        games=(games[0], games[1]),
        points=(state.current_game[0], state.current_game[1]),
        advantage=state.advantage,
        tiebreak=(tiebreak[0], tiebreak[1]) if tiebreak is not None else None,
        sets_a=a_sets,
        sets_b=b_sets,
        status=match_status(state, config),
        winner=match_winner(state),
        timestamp=timestamp,
    )


def build_score_timeline(
    config: MatchConfig,
    events: Sequence[PointEvent],
    state: Optional[ScoreState] = None,
) -> List[ScoreSnapshot]:
    """
    Replays point events from `state` (a fresh match by default).
    Returns one snapshot per applied event.
    Awards arriving after the match completed are skipped; corrections
    (retractions) still apply. Does NOT mutate `state`.
    """
    current = state if state is not None else ScoreState()
    timeline: List[ScoreSnapshot] = []

    for index, event in enumerate(events):

        if event.direction == AWARD and current.final_set_completed:
            logger.debug("Skipping award #%d after match completion", index + 1)
            continue

        update = apply_point(current, config, event.player, event.direction)
        current = update.state

        timeline.append(
            build_snapshot(current, config, index + 1, event.timestamp)
        )

    return timeline
