"""Live score keeping for two-player racquet-sport matches."""

from scorekeeper.engine import apply_point, match_status, match_winner, sets_won
from scorekeeper.models import MatchConfig, MatchRecord, MatchStatus, PointEvent, ScoreState

__all__ = [
    "MatchConfig",
    "MatchRecord",
    "MatchStatus",
    "PointEvent",
    "ScoreState",
    "apply_point",
    "match_status",
    "match_winner",
    "sets_won",
]
