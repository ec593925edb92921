"""
Game session: the single owner of the live game state.

The session feeds board snapshots through the reconciler, applies the
resulting events to the active game mode one at a time, and forwards the
produced triggers to listeners (lighting, audio).
"""
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar, Union
import logging

from autocade.core import BoardSnapshot, Player
from autocade.feed import FeedReconciler, ReconciledEvent
from .game_modes import GameMode, GameStateBase
from .triggers import Trigger

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=GameStateBase)

TriggerListener = Callable[[Trigger, GameStateBase], None]


class GameSession(Generic[S]):
    """
    Adapter between the board feed and one game mode.

    Args:
        mode: Rule engine of the active variant
        players: Roster entries (inactive players are skipped by the mode)
        reconciler: Feed reconciler (a fresh one by default)
    """

    def __init__(
            self,
            mode: GameMode[S],
            players: Sequence[Player],
            reconciler: Optional[FeedReconciler] = None
    ):
        self.mode = mode
        self.players = list(players)
        self.reconciler = reconciler or FeedReconciler()
        self._listeners: List[TriggerListener] = []
        self._state: S = mode.new_game(self.players)

        self.events_processed = 0

    @property
    def state(self) -> S:
        return self._state

    def add_listener(self, listener: TriggerListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: TriggerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def feed(self, snapshot: Union[BoardSnapshot, Dict[str, Any]]) -> S:
        """
        Process one board snapshot.

        Args:
            snapshot: Parsed snapshot or the bridge's raw JSON dict

        Returns:
            State after all events of the snapshot
        """
        for event in self.reconciler.reconcile(snapshot):
            self.apply(event)
        return self._state

    def apply(self, event: ReconciledEvent) -> S:
        """Apply a single event (e.g. from manual score entry)."""
        self._state = self.mode.reduce(self._state, event)
        self.events_processed += 1
        self._publish()
        return self._state

    def advance(self) -> S:
        """Run the mode's timer-driven transition (e.g. roulette spin)."""
        self._state = self.mode.advance(self._state)
        self._publish()
        return self._state

    def reset(self) -> S:
        """Discard all game and feed state and start a fresh game."""
        self.reconciler.reset()
        self._state = self.mode.new_game(self.players)
        self.events_processed = 0
        logger.info(f"Session reset: {self.mode.get_name()}")
        return self._state

    def _publish(self) -> None:
        for trigger in self._state.triggers:
            logger.debug(f"Trigger: {trigger.value}")
            for listener in list(self._listeners):
                try:
                    listener(trigger, self._state)
                except Exception:
                    logger.exception(f"Trigger listener failed on {trigger.value}")
