"""
Unit tests for the turn state machine.
"""
from autocade.core import Numbered, Throw
from autocade.game import TurnPhase, TurnStateMachine


def dart(number=20):
    return Throw(Numbered(number))


def test_initial_state():
    """Test machine starts waiting for the first player."""
    turn = TurnStateMachine(player_ids=["a", "b"])
    assert turn.phase == TurnPhase.WAITING_FOR_THROW
    assert turn.current_player_id == "a"
    assert turn.darts_left == 3


def test_accept_throw_caps_at_three():
    """A fourth dart is dropped."""
    turn = TurnStateMachine(player_ids=["a"])

    assert turn.accept_throw(dart())
    assert turn.phase == TurnPhase.TURN_ACTIVE
    assert turn.accept_throw(dart())
    assert turn.accept_throw(dart())
    assert not turn.accept_throw(dart())

    assert turn.darts_thrown == 3
    assert turn.darts_left == 0
    assert turn.dropped_darts == 1


def test_remove_throw():
    """Undoing every dart returns to waiting."""
    turn = TurnStateMachine(player_ids=["a"])
    turn.accept_throw(dart(1))
    turn.accept_throw(dart(2))

    assert turn.remove_throw().segment == Numbered(2)
    assert turn.phase == TurnPhase.TURN_ACTIVE
    assert turn.remove_throw().segment == Numbered(1)
    assert turn.phase == TurnPhase.WAITING_FOR_THROW
    assert turn.remove_throw() is None


def test_end_turn_rotates():
    """Ending a turn moves to the next player round-robin."""
    turn = TurnStateMachine(player_ids=["a", "b"])
    turn.accept_throw(dart())
    turn.begin_resolution()
    assert turn.phase == TurnPhase.TURN_RESOLVING

    assert turn.end_turn() == "b"
    assert turn.phase == TurnPhase.WAITING_FOR_THROW
    assert turn.darts == []
    assert turn.turns_completed == 1

    assert turn.end_turn() == "a"


def test_start_with():
    """Test starting a turn for a specific player."""
    turn = TurnStateMachine(player_ids=["a", "b", "c"])
    turn.accept_throw(dart())

    turn.start_with(2)
    assert turn.current_player_id == "c"
    assert turn.darts == []
    assert turn.phase == TurnPhase.WAITING_FOR_THROW


def test_state_transitions_counted():
    """Only phase changes count as transitions."""
    turn = TurnStateMachine(player_ids=["a"])
    turn.accept_throw(dart())
    turn.accept_throw(dart())
    assert turn.state_transitions == 1


def test_no_players():
    """Test machine without players."""
    turn = TurnStateMachine()
    assert turn.current_player_id is None
    assert turn.end_turn() is None
