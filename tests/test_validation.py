import pytest

from scorekeeper.engine import apply_point
from scorekeeper.exceptions import InvalidPointEventError, MalformedStateError
from scorekeeper.models import MatchConfig, ScoreState
from scorekeeper.validation import normalize_state, validate_event


@pytest.fixture
def config():
    return MatchConfig.from_format("best-of-3")


# ---------------------------------------------------------
# Recoverable repairs
# ---------------------------------------------------------

def test_current_set_is_clamped_to_last_set(config):
    state = ScoreState(sets=[[6, 2], [1, 0]], current_set=5, tiebreak_scores=[None, None])

    fixed = normalize_state(state, config)

    assert fixed.current_set == 1
    assert fixed.sets == [[6, 2], [1, 0]]


def test_missing_tiebreak_slots_are_padded(config):
    state = ScoreState(sets=[[6, 4], [2, 2]], current_set=1, tiebreak_scores=[])

    fixed = normalize_state(state, config)

    assert fixed.tiebreak_scores == [None, None]


def test_empty_trailing_tiebreak_slots_are_dropped(config):
    state = ScoreState(sets=[[1, 0]], tiebreak_scores=[None, None, None])

    fixed = normalize_state(state, config)

    assert fixed.tiebreak_scores == [None]


def test_empty_sets_start_fresh(config):
    state = ScoreState(sets=[], tiebreak_scores=[])

    fixed = normalize_state(state, config)

    assert fixed.sets == [[0, 0]]
    assert fixed.tiebreak_scores == [None]


def test_stale_advantage_is_cleared(config):
    state = ScoreState(current_game=[3, 1], advantage="player1")

    fixed = normalize_state(state, config)

    assert fixed.advantage is None
    assert fixed.current_game == [3, 1]


def test_advantage_is_cleared_without_advantage_scoring():
    config = MatchConfig.from_format("best-of-3", use_advantage=False)
    state = ScoreState(current_game=[3, 3], advantage="player2")

    assert normalize_state(state, config).advantage is None


def test_older_record_shape_can_be_scored(config):
    # As inserted when a match is scheduled: no completion flag, no tie-breaks
    raw = {
        "sets": [[0, 0]],
        "currentGame": [0, 0],
        "currentSet": 0,
        "advantage": None,
    }

    update = apply_point(ScoreState.from_dict(raw), config, 1)

    assert update.state.current_game == [1, 0]
    assert update.state.tiebreak_scores == [None]
    assert update.state.final_set_completed is False


def test_normalize_does_not_mutate_input(config):
    state = ScoreState(sets=[[2, 1]], current_set=3, tiebreak_scores=[])
    before = state.copy()

    normalize_state(state, config)

    assert state == before


def test_recorded_games_are_kept(config):
    state = ScoreState(sets=[[6, 3], [4, 5]], current_set=9, tiebreak_scores=[None])

    update = apply_point(state, config, 2, "retract")

    assert update.state.sets[0] == [6, 3]
    assert update.state.current_set == 1


# ---------------------------------------------------------
# Irrecoverable states
# ---------------------------------------------------------

@pytest.mark.parametrize("state", [
    ScoreState(sets=[[-1, 0]]),
    ScoreState(sets=[[1, 0, 0]]),
    ScoreState(sets=[[1.5, 0]]),
    ScoreState(current_game=[4, 0]),
    ScoreState(current_game=[0, -1]),
    ScoreState(current_set=-1),
    ScoreState(tiebreak_scores=[[-2, 0]]),
    ScoreState(sets=[[1, 0]], tiebreak_scores=[None, [0, 0]]),
    ScoreState(advantage="both"),
    ScoreState(sets=[[6, 0], [6, 0], [6, 0], [0, 0]]),
])
def test_malformed_state_is_rejected(config, state):
    with pytest.raises(MalformedStateError):
        normalize_state(state, config)


def test_malformed_state_is_a_value_error(config):
    with pytest.raises(ValueError):
        apply_point(ScoreState(sets=[[0, -3]]), config, 1)


# ---------------------------------------------------------
# Events
# ---------------------------------------------------------

def test_valid_events_pass():
    validate_event(1, "award")
    validate_event(2, "retract")


def test_boolean_player_is_rejected():
    with pytest.raises(InvalidPointEventError):
        validate_event(True, "award")


@pytest.mark.parametrize("player", [1.0, 2.0, "2"])
def test_non_integer_player_is_rejected(player):
    with pytest.raises(InvalidPointEventError):
        validate_event(player, "award")
