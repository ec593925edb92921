"""
Unit tests for the Around the Clock game mode.
"""
import numpy as np

from autocade.core import Bed, Bull, Numbered, Player, Throw, parse_segment
from autocade.feed import ThrowAdded, ThrowRemoved, TurnEnded
from autocade.game import (
    AroundTheClockGame, AroundTheClockSettings, Trigger,
    build_sequence, hit_strength
)

ALICE = Player("a", "Alice")
BOB = Player("b", "Bob")


def make_game(players=(ALICE,), **kwargs):
    game = AroundTheClockGame(AroundTheClockSettings(**kwargs), rng=np.random.default_rng(11))
    return game, game.new_game(list(players))


def play(game, state, names):
    """Throw darts for the current player, ending the turn every three darts."""
    for name in names:
        if state.turn.darts_thrown == 3:
            state = game.reduce(state, TurnEnded())
        throw = name if isinstance(name, Throw) else Throw(parse_segment(name))
        state = game.reduce(state, ThrowAdded(throw, state.turn.darts_thrown))
    return state


def test_build_sequence():
    """Test the three orders with and without the bull."""
    assert build_sequence("1-20-bull", True) == list(range(1, 21)) + [25]
    assert build_sequence("20-1-bull", False) == list(range(20, 0, -1))

    shuffled = build_sequence("random-bull", True, np.random.default_rng(5))
    assert sorted(shuffled[:20]) == list(range(1, 21))
    assert shuffled[-1] == 25
    assert shuffled == build_sequence("random-bull", True, np.random.default_rng(5))


def test_hit_strength_modes():
    """Each mode counts only its bed."""
    target = 5
    single, double, triple = Throw(Numbered(5)), Throw(Numbered(5, 2)), Throw(Numbered(5, 3))

    full = AroundTheClockSettings(mode="full")
    assert [hit_strength(d, target, full) for d in (single, double, triple)] == [1, 2, 3]

    assert hit_strength(triple, target, AroundTheClockSettings(mode="single")) == 0
    assert hit_strength(single, target, AroundTheClockSettings(mode="single")) == 1
    assert hit_strength(double, target, AroundTheClockSettings(mode="double")) == 1
    assert hit_strength(single, target, AroundTheClockSettings(mode="triple")) == 0
    assert hit_strength(Throw(Numbered(6)), target, full) == 0


def test_hit_strength_outer_single():
    """Outer-single mode rejects the inner single bed."""
    settings = AroundTheClockSettings(mode="outer-single")
    assert hit_strength(Throw(Numbered(5), Bed.SINGLE_INNER), 5, settings) == 0
    assert hit_strength(Throw(Numbered(5), Bed.SINGLE_OUTER), 5, settings) == 1


def test_hit_strength_bull():
    """Bull mode decides which bull counts."""
    both = AroundTheClockSettings(bull_mode="both")
    inner = AroundTheClockSettings(bull_mode="inner")

    assert hit_strength(Throw(Bull(1)), 25, both) == 1
    assert hit_strength(Throw(Bull(2)), 25, both) == 2
    assert hit_strength(Throw(Bull(1)), 25, inner) == 0
    assert hit_strength(Throw(Bull(2)), 25, AroundTheClockSettings(mode="double", bull_mode="inner")) == 1
    assert hit_strength(Throw(Numbered(20)), 25, both) == 0


def test_single_hit_advances():
    """A hit moves to the next target."""
    game, state = make_game()
    assert state.current_target == 1

    state = play(game, state, ["S1"])
    assert state.progress["a"].targets_hit == [1]
    assert state.current_target == 2
    assert Trigger.TARGET_HIT in state.triggers

    state = play(game, state, ["S20"])
    assert state.current_target == 2
    assert state.progress["a"].misses == 1


def test_multiplier_skips_targets():
    """A triple with the multiplier option advances three targets."""
    game, state = make_game(multiplier=True)
    state = play(game, state, ["T1"])

    assert state.progress["a"].targets_hit == [1, 2, 3]
    assert state.current_target == 4


def test_multiplier_without_option():
    """Without the multiplier option a triple is a single hit."""
    game, state = make_game()
    state = play(game, state, ["T1"])
    assert state.progress["a"].targets_hit == [1]


def test_skip_never_passes_bull():
    """Skipping stops in front of the closing bull."""
    game, state = make_game(multiplier=True)
    state = play(game, state, ["T1", "T4", "T7", "T10", "T13", "T16", "T19"])

    progress = state.progress["a"]
    assert progress.targets_hit == list(range(1, 21))
    assert progress.current_target == 25
    assert state.winner_id is None

    state = play(game, state, ["25"])
    assert state.winner_id == "a"
    assert Trigger.WIN in state.triggers
    assert state.current_target is None


def test_hits_required():
    """A target needs the configured number of hits."""
    game, state = make_game(hits_required=2)

    state = play(game, state, ["S1"])
    assert state.progress["a"].targets_hit == []
    assert state.progress["a"].current_target_hits == 1

    state = play(game, state, ["D1"])
    assert state.progress["a"].targets_hit == [1]
    assert state.progress["a"].current_target_hits == 0


def test_double_mode():
    """Double mode only counts doubles."""
    game, state = make_game(mode="double")
    state = play(game, state, ["S1", "T1", "D1"])
    assert state.progress["a"].targets_hit == [1]
    assert state.progress["a"].misses == 2


def test_win_without_bull():
    """Without the bull the last number wins."""
    game, state = make_game(bull_finish=False)
    state = play(game, state, [f"S{n}" for n in range(1, 21)])

    assert state.winner_id == "a"
    assert state.progress["a"].total_darts == 20
    assert state.progress["a"].accuracy == 1.0


def test_undo_restores_progress():
    """Undo replays the remaining darts from the turn start."""
    game, state = make_game()
    state = play(game, state, ["S1", "S2"])
    assert state.progress["a"].targets_hit == [1, 2]

    state = game.reduce(state, ThrowRemoved(state.turn.darts[-1]))
    progress = state.progress["a"]
    assert progress.targets_hit == [1]
    assert progress.current_target == 2
    assert progress.total_darts == 1
    assert progress.hits == 1
    assert state.last_throw == "S1"


def test_undo_after_skip():
    """Undoing a multiplier dart takes back every skipped target."""
    game, state = make_game(multiplier=True)
    state = play(game, state, ["T1"])
    state = game.reduce(state, ThrowRemoved(state.turn.darts[-1]))

    assert state.progress["a"].targets_hit == []
    assert state.current_target == 1


def test_players_rotate():
    """Each player keeps their own progress."""
    game, state = make_game(players=(ALICE, BOB))
    state = play(game, state, ["S1", "S2", "S3"])
    state = game.reduce(state, TurnEnded())

    assert state.current_player_id == "b"
    assert state.current_target == 1
    assert state.progress["a"].current_target == 4

    state = play(game, state, ["S1"])
    assert state.progress["b"].targets_hit == [1]


def test_events_ignored_after_win():
    """A finished game ignores further darts."""
    game, state = make_game(bull_finish=False, order="20-1-bull")
    state = play(game, state, [f"S{n}" for n in range(20, 0, -1)])
    assert state.winner_id == "a"

    after = play(game, state, ["S1"])
    assert after.progress["a"].total_darts == 20
