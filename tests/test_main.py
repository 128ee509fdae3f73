import pytest

from main import main
from scorekeeper.models import MatchStatus
from scorekeeper.storage import load_match


def test_new_match_with_points(tmp_path, capsys):
    path = tmp_path / "final.json"

    code = main(["--new", "--format", "one-set-4", "--player1", "Ana", str(path), "+1", "+1"])

    assert code == 0
    record = load_match(path)
    assert record.id == "final"
    assert record.player1 == "Ana"
    assert record.score_state.current_game == [2, 0]
    assert record.status == MatchStatus.ONGOING

    out = capsys.readouterr().out
    assert "Game: 30 - 0" in out
    assert "Status: ongoing" in out


def test_existing_match_correction(tmp_path, capsys):
    path = tmp_path / "m.json"
    main(["--new", str(path), "+2", "+2", "+2"])

    code = main([str(path), "-2"])

    assert code == 0
    assert load_match(path).score_state.current_game == [0, 2]


def test_award_after_completion_reports_error(tmp_path, capsys):
    path = tmp_path / "m.json"
    main(["--new", "--format", "one-set-4", str(path)] + ["+1"] * 16)

    code = main([str(path), "+2"])

    assert code == 1
    assert "ERROR" in capsys.readouterr().out
    assert load_match(path).status == MatchStatus.COMPLETED


def test_missing_file(tmp_path):
    assert main([str(tmp_path / "absent.json"), "+1"]) == 1


def test_invalid_event_token(tmp_path):
    with pytest.raises(SystemExit):
        main(["--new", str(tmp_path / "m.json"), "+3"])
