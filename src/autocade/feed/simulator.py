"""
Board feed simulator.

Produces the same snapshot sequence the board bridge sends, for manual play,
replays and tests.
"""
from typing import List, Optional, Union
import logging

from autocade.core import Bed, BoardSnapshot, Miss, Segment, Throw, parse_segment
from autocade.board import SegmentMapper

logger = logging.getLogger(__name__)


class FeedSimulator:
    """
    Simulates a board: throw darts, undo, pull darts out, reset.

    Every action returns the snapshot the bridge would emit.
    """

    def __init__(self, mapper: Optional[SegmentMapper] = None):
        self.mapper = mapper or SegmentMapper()
        self.throws: List[Throw] = []

    def _snapshot(self, status: str, event: str) -> BoardSnapshot:
        return BoardSnapshot.create(list(self.throws), status=status, event=event)

    def make_throw(self, segment: Union[Segment, str], bed: Optional[Bed] = None) -> Throw:
        """Build a throw with coordinates at the centre of its bed."""
        if isinstance(segment, str):
            segment = parse_segment(segment)
        bed = bed or Bed.for_segment(segment)
        return Throw(segment=segment, bed=bed, coords=self.mapper.coords_for(segment, bed))

    def throw(self, segment: Union[Segment, str], bed: Optional[Bed] = None) -> BoardSnapshot:
        """Land a dart on the board."""
        self.throws.append(self.make_throw(segment, bed))
        logger.debug(f"Simulated throw: {self.throws[-1].name}")
        return self._snapshot("Throw", "Throw detected")

    def throw_at(self, x: float, y: float) -> BoardSnapshot:
        """Land a dart at board coordinates."""
        segment, bed = self.mapper.segment_at(x, y)
        self.throws.append(Throw(segment=segment, bed=bed, coords=(x, y)))
        return self._snapshot("Throw", "Throw detected")

    def miss(self) -> BoardSnapshot:
        return self.throw(Miss())

    def undo(self) -> BoardSnapshot:
        """Remove the last dart as a logical correction."""
        if self.throws:
            self.throws.pop()
        return self._snapshot("Throw", "Throw removed")

    def takeout(self) -> List[BoardSnapshot]:
        """
        Pull the darts out one by one.

        Returns:
            One "Takeout in progress" snapshot per pulled dart, then the
            "Takeout finished" snapshot on the empty board.
        """
        snapshots = []
        while self.throws:
            self.throws.pop()
            snapshots.append(self._snapshot("Takeout in progress", "Takeout started"))
        snapshots.append(self._snapshot("Takeout finished", "Takeout finished"))
        return snapshots

    def next_turn(self) -> BoardSnapshot:
        """Clear the board in one step, like the simulator's next-turn button."""
        self.throws.clear()
        return self._snapshot("Takeout finished", "Takeout finished")

    def reset(self) -> BoardSnapshot:
        self.throws.clear()
        return self._snapshot("Throw", "Reset")
