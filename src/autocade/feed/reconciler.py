"""
Throw-feed reconciler.

The board bridge restates every throw of the current turn on each update.
The reconciler diffs consecutive snapshots into discrete events:

- growth: one ThrowAdded per new dart (never beyond the third)
- shrink with an undo marker: one ThrowRemoved per dropped dart, tail first
- shrink while the takeout is in progress: nothing (darts are being pulled)
- empty board after a finished takeout or reset: TurnEnded
- any other shrink: nothing, and the previous throws stay in memory
- no change: nothing

An undo marker always wins over the takeout-in-progress suppression.
"""
from typing import Any, Dict, List, Tuple, Union
import logging

from autocade.core import BoardSnapshot, Throw, TakeoutPhase, MAX_THROWS_PER_TURN
from .events import ReconciledEvent, ThrowAdded, ThrowRemoved, TurnEnded

logger = logging.getLogger(__name__)


class FeedReconciler:
    """
    Converts a snapshot feed into ordered ReconciledEvents.

    Holds the previous snapshot's throws as private memory. Snapshots must be
    delivered one at a time, in feed order.
    """

    def __init__(self):
        self._prev: Tuple[Throw, ...] = ()
        # Darts were thrown this turn and no TurnEnded has been emitted yet
        self._turn_open = False
        # Board was cleared during a takeout that never reported "finished"
        self._cleared_in_takeout = False

        self.snapshots_seen = 0
        self.ambiguous_snapshots = 0

    @property
    def previous_names(self) -> List[str]:
        return [t.name for t in self._prev]

    def reconcile(self, snapshot: Union[BoardSnapshot, Dict[str, Any]]) -> List[ReconciledEvent]:
        """
        Diff a snapshot against the previous one.

        Args:
            snapshot: Parsed snapshot or the bridge's raw JSON dict

        Returns:
            Events in the order they happened (possibly empty)
        """
        if isinstance(snapshot, dict):
            snapshot = BoardSnapshot.from_dict(snapshot)

        self.snapshots_seen += 1
        current = snapshot.throws
        prev = self._prev
        events: List[ReconciledEvent] = []

        if len(current) > len(prev):
            events.extend(self._on_growth(prev, current))

        elif len(current) < len(prev):
            if snapshot.undo and not current and snapshot.takeout == TakeoutPhase.FINISHED:
                # Undo and finished takeout on the same empty board: keep memory
                # untouched and wait for an unambiguous snapshot.
                self.ambiguous_snapshots += 1
                logger.warning(
                    f"Ambiguous snapshot (undo + takeout finished, "
                    f"{len(prev)} → 0 darts), ignoring"
                )
                return []

            if snapshot.undo:
                events.extend(self._on_undo(prev, current))
            elif snapshot.takeout == TakeoutPhase.FINISHED and not current:
                events.extend(self._end_turn())
            elif snapshot.takeout == TakeoutPhase.IN_PROGRESS:
                logger.debug(f"Takeout in progress: {len(prev)} → {len(current)} darts")
                if not current:
                    self._cleared_in_takeout = True
            else:
                # Dropped detection: keep memory so a restored dart is not added twice
                self.ambiguous_snapshots += 1
                logger.debug(
                    f"Board shrank without undo or takeout "
                    f"({snapshot.status!r}/{snapshot.event!r}), ignoring"
                )
                return []

        elif not current and snapshot.takeout == TakeoutPhase.FINISHED:
            # Board was already cleared during the takeout; close the turn now
            events.extend(self._end_turn())

        self._prev = current
        return events

    def _on_growth(
            self,
            prev: Tuple[Throw, ...],
            current: Tuple[Throw, ...]
    ) -> List[ReconciledEvent]:
        events: List[ReconciledEvent] = []

        if not prev and self._cleared_in_takeout:
            # Takeout never reported finished before the next dart landed
            logger.info("New dart on a cleared board, closing previous turn")
            events.extend(self._end_turn())

        for index in range(len(prev), min(len(current), MAX_THROWS_PER_TURN)):
            events.append(ThrowAdded(throw=current[index], index=index))
            self._turn_open = True

        if len(current) > MAX_THROWS_PER_TURN:
            logger.warning(f"Feed reported {len(current)} darts, ignoring beyond {MAX_THROWS_PER_TURN}")

        return events

    def _on_undo(
            self,
            prev: Tuple[Throw, ...],
            current: Tuple[Throw, ...]
    ) -> List[ReconciledEvent]:
        dropped = len(prev) - len(current)
        if dropped > 1:
            logger.warning(f"Undo dropped {dropped} darts at once")

        events: List[ReconciledEvent] = []
        for index in range(len(prev) - 1, len(current) - 1, -1):
            if index >= MAX_THROWS_PER_TURN:
                continue
            events.append(ThrowRemoved(throw=prev[index]))

        if not current:
            self._turn_open = False
        return events

    def _end_turn(self) -> List[ReconciledEvent]:
        self._cleared_in_takeout = False
        if not self._turn_open:
            return []
        self._turn_open = False
        return [TurnEnded()]

    def reset(self) -> None:
        """Forget all feed memory."""
        self._prev = ()
        self._turn_open = False
        self._cleared_in_takeout = False
        logger.info("Feed reconciler reset")

    def get_stats(self) -> dict:
        return {
            "snapshots_seen": self.snapshots_seen,
            "ambiguous_snapshots": self.ambiguous_snapshots,
            "previous_throws": self.previous_names,
            "turn_open": self._turn_open,
        }
