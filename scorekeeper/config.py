import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MATCHES_DIR = PROJECT_ROOT / "matches"

SCHEMA_VERSION = 1
DEFAULT_FORMAT = "best-of-3"

# format name -> (max_sets, games_to_win_set)
MATCH_FORMATS = {
    "best-of-3": (3, 6),
    "best-of-5": (5, 6),
    "one-set-4": (1, 4),
    "one-set-6": (1, 6),
}

TIEBREAK_POINTS = 7
# 0 / 15 / 30 / 40
GAME_POINT = 3

LOG_LEVEL = os.getenv("SCOREKEEPER_LOG_LEVEL", "WARNING").upper()
