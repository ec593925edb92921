"""
Unit tests for checkout suggestions.
"""
from autocade.core import Bull, Numbered
from autocade.game import checkout_suggestions, format_checkout, suggest_checkout

T20 = Numbered(20, 3)
D20 = Numbered(20, 2)
BULL = Bull(2)


def test_highest_checkout():
    """170 is T20, T20, Bull."""
    assert suggest_checkout(170, 3) == [T20, T20, BULL]


def test_bogey_numbers():
    """Scores without a three-dart finish have no suggestion."""
    for score in (169, 168, 166, 165, 163, 162, 159):
        assert suggest_checkout(score, 3) is None, score


def test_out_of_range():
    """Test scores outside the checkout range."""
    assert suggest_checkout(171, 3) is None
    assert suggest_checkout(1, 3) is None
    assert suggest_checkout(0, 3) is None
    assert suggest_checkout(40, 0) is None


def test_fewest_darts_first():
    """Shorter finishes rank ahead of longer ones."""
    assert suggest_checkout(40, 3) == [D20]
    assert suggest_checkout(50, 1) == [BULL]
    assert suggest_checkout(100, 3) == [T20, D20]


def test_darts_left_limits_suggestion():
    """A finish needing more darts than are left is not offered."""
    assert suggest_checkout(100, 1) is None
    assert suggest_checkout(110, 2) == [T20, BULL]
    assert suggest_checkout(3, 2) == [Numbered(1), Numbered(1, 2)]


def test_single_out():
    """Single-out finishes prefer singles and allow any last dart."""
    assert suggest_checkout(3, 1, double_out=False) == [Numbered(3)]
    assert suggest_checkout(1, 1, double_out=False) == [Numbered(1)]
    assert suggest_checkout(1, 1, double_out=True) is None


def test_suggestions_are_valid_finishes():
    """Every suggestion sums to the score and ends on a double."""
    for score in range(2, 171, 7):
        for combo in checkout_suggestions(score, 3, limit=3):
            assert sum(d.points for d in combo) == score
            assert combo[-1].is_double
            assert 1 <= len(combo) <= 3


def test_suggestions_limit_and_order():
    """Test suggestion list is deterministic and capped."""
    first = checkout_suggestions(100, 3, limit=2)
    assert len(first) == 2
    assert first[0] == [T20, D20]
    assert checkout_suggestions(100, 3, limit=2) == first


def test_format_checkout():
    """Test display formatting."""
    assert format_checkout([T20, T20, BULL]) == "T20 → T20 → Bull"
