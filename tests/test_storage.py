import json

import pytest

from scorekeeper.config import MATCHES_DIR
from scorekeeper.engine import apply_point
from scorekeeper.exceptions import MatchRecordError
from scorekeeper.models import MatchRecord, MatchStatus
from scorekeeper.storage import load_match, match_path, save_match


def test_save_then_load(tmp_path):
    record = MatchRecord.schedule("m7", "Ana", "Bea", "best-of-5", use_advantage=False)
    record.score_state = apply_point(record.score_state, record.config, 2).state
    record.status = MatchStatus.ONGOING

    path = tmp_path / "nested" / "m7.json"
    save_match(path, record)

    assert load_match(path) == record


def test_load_record_written_by_scheduler(tmp_path):
    path = tmp_path / "m1.json"
    path.write_text(json.dumps({
        "id": "m1",
        "player1": "Ana",
        "player2": "Bea",
        "use_ad": True,
        "format": "best-of-3",
        "match_date": "2025-03-01",
        "status": "upcoming",
        "score_state": {"sets": [[0, 0]], "currentGame": [0, 0], "currentSet": 0, "advantage": None},
    }))

    record = load_match(path)

    assert record.status == MatchStatus.UPCOMING
    update = apply_point(record.score_state, record.config, 1)
    assert update.state.current_game == [1, 0]


def test_load_rejects_future_schema(tmp_path):
    path = tmp_path / "m1.json"
    path.write_text(json.dumps({
        "schema_version": 99,
        "id": "m1",
        "player1": "Ana",
        "player2": "Bea",
        "format": "best-of-3",
    }))

    with pytest.raises(MatchRecordError):
        load_match(path)


def test_load_rejects_non_object(tmp_path):
    path = tmp_path / "m1.json"
    path.write_text("[]")

    with pytest.raises(MatchRecordError):
        load_match(path)


def test_match_path():
    assert match_path("abc") == MATCHES_DIR / "abc.json"
