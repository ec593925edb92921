"""
X01 checkout suggestions.

Enumerates every 1-, 2- and 3-dart finish for a score and ranks them the
way players call them: fewest darts first, then by the conventional
preference for each dart (T20, T19, T18, T17, singles, bull, doubles,
other trebles). With double-out the last dart must be a double or the
inner bull.
"""
from functools import lru_cache
from itertools import product
from typing import List, Optional, Sequence, Tuple
import logging

from autocade.core import Bull, Numbered, Segment

logger = logging.getLogger(__name__)

MIN_DOUBLE_OUT = 2
MAX_CHECKOUT = 170

ALL_DARTS: Tuple[Segment, ...] = tuple(
    Numbered(n, m) for n in range(1, 21) for m in (1, 2, 3)
) + (Bull(1), Bull(2))

DOUBLE_FINISHES: Tuple[Segment, ...] = tuple(d for d in ALL_DARTS if d.is_double)


def _priority_double_out(dart: Segment) -> int:
    if isinstance(dart, Numbered) and dart.multiplier == 3 and dart.number >= 17:
        return 20 - dart.number  # T20=0 .. T17=3
    if dart.multiplier == 1:
        return 4
    if isinstance(dart, Bull):
        return 5
    if dart.multiplier == 2:
        return 6
    return 7


def _priority_single_out(dart: Segment) -> int:
    if dart.multiplier == 1:
        return 0
    if isinstance(dart, Bull):
        return 5
    if dart.multiplier == 2:
        return 1
    if dart.number >= 18:
        return 2 + (20 - dart.number)  # T20=2, T19=3, T18=4
    return 6


@lru_cache(maxsize=None)
def _all_checkouts(score: int, double_out: bool) -> Tuple[Tuple[Segment, ...], ...]:
    """Every distinct finish for `score`, best first."""
    finishes = DOUBLE_FINISHES if double_out else ALL_DARTS
    priority = _priority_double_out if double_out else _priority_single_out

    combos: List[Tuple[Segment, ...]] = []
    seen = set()

    for darts in range(1, 4):
        for setup in product(ALL_DARTS, repeat=darts - 1):
            setup_points = sum(d.points for d in setup)
            if setup_points >= score:
                continue
            for last in finishes:
                if setup_points + last.points != score:
                    continue
                combo = setup + (last,)
                if combo not in seen:
                    seen.add(combo)
                    combos.append(combo)

    combos.sort(key=lambda c: (len(c), [priority(d) for d in c]))
    return tuple(combos)


def checkout_suggestions(
        remaining: int,
        darts_left: int = 3,
        double_out: bool = True,
        limit: int = 2
) -> List[List[Segment]]:
    """
    Best finishes for a remaining score.

    Args:
        remaining: Score left (2-170 for double-out, 1-170 for single-out)
        darts_left: Darts left in the turn (1-3)
        double_out: Last dart must be a double (or inner bull)
        limit: Maximum number of suggestions

    Returns:
        Up to `limit` dart sequences, best first; empty if no finish exists
    """
    lowest = MIN_DOUBLE_OUT if double_out else 1
    if not lowest <= remaining <= MAX_CHECKOUT or darts_left < 1:
        return []

    darts_left = min(darts_left, 3)
    fitting = [list(c) for c in _all_checkouts(remaining, double_out) if len(c) <= darts_left]
    return fitting[:limit]


def suggest_checkout(
        remaining: int,
        darts_left: int = 3,
        double_out: bool = True
) -> Optional[List[Segment]]:
    """
    Best finish for a remaining score, or None when the score cannot be
    checked out with the darts left.
    """
    suggestions = checkout_suggestions(remaining, darts_left, double_out, limit=1)
    return suggestions[0] if suggestions else None


def format_checkout(darts: Sequence[Segment]) -> str:
    return " → ".join(d.name for d in darts)
