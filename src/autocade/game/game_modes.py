"""
Base classes for game modes.

Each mode is a reducer: `reduce(state, event)` returns a new state and never
mutates the state it was given. The session adapter owns the one live state.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, TypeVar
import copy
import logging

from autocade.core import Player
from autocade.feed import ReconciledEvent, ThrowAdded, ThrowRemoved, TurnEnded
from .triggers import Trigger

logger = logging.getLogger(__name__)


@dataclass
class GameStateBase:
    """Fields every variant's state carries."""
    winner_id: Optional[str] = None
    last_throw: Optional[str] = None
    # Triggers produced by the most recent reduce() call
    triggers: List[Trigger] = field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        return self.winner_id is not None


S = TypeVar("S", bound=GameStateBase)


class GameMode(ABC, Generic[S]):
    """Abstract base class for game modes."""

    @abstractmethod
    def get_name(self) -> str:
        """Get game mode name."""
        pass

    @abstractmethod
    def new_game(self, players: Sequence[Player]) -> S:
        """
        Create the initial state.

        Args:
            players: Roster entries; inactive players are left out
        """
        pass

    @abstractmethod
    def on_throw(self, state: S, event: ThrowAdded) -> None:
        """Apply a new dart to `state` in place."""
        pass

    @abstractmethod
    def on_undo(self, state: S, event: ThrowRemoved) -> None:
        """Apply an undone dart to `state` in place."""
        pass

    @abstractmethod
    def on_turn_end(self, state: S) -> None:
        """Apply the end of a turn to `state` in place."""
        pass

    def reduce(self, state: S, event: ReconciledEvent) -> S:
        """
        Apply one reconciled event.

        Args:
            state: Current state (left untouched)
            event: Event from the feed reconciler

        Returns:
            New state with `triggers` set to what this event produced
        """
        state = copy.deepcopy(state)
        state.triggers = []

        if state.is_finished:
            logger.debug(f"Game finished, ignoring {type(event).__name__}")
            return state

        if isinstance(event, ThrowAdded):
            self.on_throw(state, event)
        elif isinstance(event, ThrowRemoved):
            self.on_undo(state, event)
        elif isinstance(event, TurnEnded):
            self.on_turn_end(state)

        return state

    def advance(self, state: S) -> S:
        """
        Timer-driven transition outside the dart feed.
        Turn-based modes have none; the state comes back without triggers.
        """
        state = copy.deepcopy(state)
        state.triggers = []
        return state

    @staticmethod
    def active_players(players: Sequence[Player]) -> List[Player]:
        return [p for p in players if p.is_active]
