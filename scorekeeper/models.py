from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from scorekeeper.config import (
    DEFAULT_FORMAT,
    MATCH_FORMATS,
    SCHEMA_VERSION,
    TIEBREAK_POINTS,
)
from scorekeeper.exceptions import MatchRecordError, UnknownFormatError


Direction = Literal["award", "retract"]
AWARD = "award"
RETRACT = "retract"

PLAYERS = (1, 2)


def advantage_label(player: int) -> str:
    return f"player{player}"


class MatchStatus(str, Enum):
    """Match lifecycle: upcoming → ongoing → completed."""
    UPCOMING = "upcoming"  # Scheduled, no point recorded yet
    ONGOING = "ongoing"
    COMPLETED = "completed"


# ---------- Match configuration ----------

@dataclass(frozen=True)
class MatchConfig:
    """
    Rule variant in force for one match. Never changes after scheduling.
    """
    max_sets: int
    games_to_win_set: int
    use_advantage: bool = True
    tiebreak_points: int = TIEBREAK_POINTS
    finish_early: bool = False

    def __post_init__(self):
        if self.max_sets <= 0:
            raise ValueError("max_sets must be positive")

        if self.max_sets % 2 == 0:
            raise ValueError("max_sets must be odd")

        if self.games_to_win_set <= 0:
            raise ValueError("games_to_win_set must be positive")

        if self.tiebreak_points <= 0:
            raise ValueError("tiebreak_points must be positive")

    @property
    def sets_to_win(self) -> int:
        return (self.max_sets // 2) + 1

    @property
    def tiebreak_trigger(self) -> int:
        return self.games_to_win_set

    @classmethod
    def from_format(cls, match_format: str, use_advantage: bool = True) -> "MatchConfig":
        try:
            max_sets, games = MATCH_FORMATS[match_format]
        except KeyError:
            raise UnknownFormatError(f"Unknown match format: {match_format!r}") from None

        return cls(
            max_sets=max_sets,
            games_to_win_set=games,
            use_advantage=use_advantage,
        )


# ---------- Score state ----------

@dataclass
class ScoreState:
    """
    Live score of one match. Field names on the wire are camelCase and are
    shared with whatever stores and displays the score, so to_dict/from_dict
    must keep them stable.
    """
    sets: List[List[int]] = field(default_factory=lambda: [[0, 0]])
    current_set: int = 0
    current_game: List[int] = field(default_factory=lambda: [0, 0])
    advantage: Optional[str] = None
    tiebreak_scores: List[Optional[List[int]]] = field(default_factory=lambda: [None])
    final_set_completed: bool = False

    @property
    def current_games(self) -> List[int]:
        return self.sets[self.current_set]

    @property
    def current_tiebreak(self) -> Optional[List[int]]:
        return self.tiebreak_scores[self.current_set]

    def copy(self) -> "ScoreState":
        return deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sets": [list(s) for s in self.sets],
            "currentGame": list(self.current_game),
            "currentSet": self.current_set,
            "advantage": self.advantage,
            "tieBreakScore": [
                list(tb) if tb is not None else None
                for tb in self.tiebreak_scores
            ],
            "finalSetCompleted": self.final_set_completed,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ScoreState":
        # Older records have no tie-break slots or completion flag;
        # validation.normalize_state pads whatever is missing here.
        sets = d.get("sets")
        tiebreaks = d.get("tieBreakScore") or []

        return ScoreState(
            sets=[list(s) for s in sets] if sets is not None else [[0, 0]],
            current_set=d.get("currentSet", 0),
            current_game=list(d.get("currentGame") or [0, 0]),
            advantage=d.get("advantage"),
            tiebreak_scores=[
                list(tb) if tb is not None else None for tb in tiebreaks
            ],
            final_set_completed=bool(d.get("finalSetCompleted", False)),
        )


# ---------- Events and results ----------

@dataclass(frozen=True)
class PointEvent:
    player: int
    direction: Direction = AWARD
    timestamp: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"player": self.player, "direction": self.direction}
        if self.timestamp is not None:
            d["timestamp"] = self.timestamp
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PointEvent":
        timestamp = d.get("timestamp")
        return PointEvent(
            player=d["player"],
            direction=d.get("direction", AWARD),
            timestamp=float(timestamp) if timestamp is not None else None,
        )


@dataclass(frozen=True)
class ScoreUpdate:
    """Outcome of a single point transition."""
    state: ScoreState
    status: MatchStatus
    game_winner: Optional[int] = None
    set_winner: Optional[int] = None


# ---------- Match record ----------

@dataclass
class MatchRecord:
    """
    One stored match: who plays, under which rules, and its score.
    """
    id: str
    player1: str
    player2: str
    match_format: str = DEFAULT_FORMAT
    use_advantage: bool = True
    match_date: Optional[str] = None
    status: MatchStatus = MatchStatus.UPCOMING
    score_state: ScoreState = field(default_factory=ScoreState)

    @property
    def config(self) -> MatchConfig:
        return MatchConfig.from_format(self.match_format, self.use_advantage)

    @classmethod
    def schedule(
        cls,
        match_id: str,
        player1: str,
        player2: str,
        match_format: str = DEFAULT_FORMAT,
        use_advantage: bool = True,
        match_date: Optional[str] = None,
    ) -> "MatchRecord":
        # Resolve early so an unknown format never reaches storage.
        MatchConfig.from_format(match_format, use_advantage)

        return cls(
            id=match_id,
            player1=player1,
            player2=player2,
            match_format=match_format,
            use_advantage=use_advantage,
            match_date=match_date or date.today().isoformat(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": SCHEMA_VERSION,
            "id": self.id,
            "player1": self.player1,
            "player2": self.player2,
            "format": self.match_format,
            "use_ad": self.use_advantage,
            "match_date": self.match_date,
            "status": self.status.value,
            "score_state": self.score_state.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "MatchRecord":
        missing = {"id", "player1", "player2", "format"} - set(d.keys())
        if missing:
            raise MatchRecordError(f"Missing field(s): {sorted(missing)}")

        try:
            status = MatchStatus(d.get("status", MatchStatus.UPCOMING.value))
        except ValueError:
            raise MatchRecordError(f"Invalid status: {d.get('status')!r}") from None

        use_ad = d.get("use_ad", True)
        if not isinstance(use_ad, bool):
            raise MatchRecordError(f"Invalid use_ad: {use_ad!r}")

        score_raw = d.get("score_state")
        return MatchRecord(
            id=str(d["id"]),
            player1=str(d["player1"]),
            player2=str(d["player2"]),
            match_format=str(d["format"]),
            use_advantage=use_ad,
            match_date=d.get("match_date"),
            status=status,
            score_state=ScoreState.from_dict(score_raw) if score_raw else ScoreState(),
        )
