"""
Turn state machine shared by the turn-based variants.

State flow:
- WAITING_FOR_THROW: board is empty for the current player
- TURN_ACTIVE: at least one dart of the turn is on the board
- TURN_RESOLVING: takeout finished, the variant applies the turn result
- TURN_ENDED: result applied, rotating to the next player

The machine caps a turn at three darts; a fourth dart never reaches a
rule engine.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import logging

from autocade.core import Throw, MAX_THROWS_PER_TURN

logger = logging.getLogger(__name__)


class TurnPhase(Enum):
    WAITING_FOR_THROW = "waiting_for_throw"
    TURN_ACTIVE = "turn_active"
    TURN_RESOLVING = "turn_resolving"
    TURN_ENDED = "turn_ended"


@dataclass
class TurnStateMachine:
    """
    Per-match turn boundary and round-robin rotation.

    Args:
        player_ids: Active players in throwing order
    """
    player_ids: List[str] = field(default_factory=list)
    current_index: int = 0
    phase: TurnPhase = TurnPhase.WAITING_FOR_THROW
    darts: List[Throw] = field(default_factory=list)

    # Statistics
    turns_completed: int = 0
    dropped_darts: int = 0
    state_transitions: int = 0

    @property
    def current_player_id(self) -> Optional[str]:
        if not self.player_ids:
            return None
        return self.player_ids[self.current_index]

    @property
    def darts_thrown(self) -> int:
        return len(self.darts)

    @property
    def darts_left(self) -> int:
        return MAX_THROWS_PER_TURN - len(self.darts)

    def accept_throw(self, throw: Throw) -> bool:
        """
        Record a dart for the current player.

        Returns:
            False if the turn already holds three darts (dart dropped)
        """
        if len(self.darts) >= MAX_THROWS_PER_TURN:
            self.dropped_darts += 1
            logger.warning(f"Dropping dart {throw.name}: turn already has {MAX_THROWS_PER_TURN} darts")
            return False

        self.darts.append(throw)
        if self.phase != TurnPhase.TURN_ACTIVE:
            self._transition_to(TurnPhase.TURN_ACTIVE)
        return True

    def remove_throw(self) -> Optional[Throw]:
        """Undo the last dart of the turn."""
        if not self.darts:
            return None

        throw = self.darts.pop()
        if not self.darts:
            self._transition_to(TurnPhase.WAITING_FOR_THROW)
        return throw

    def begin_resolution(self) -> None:
        self._transition_to(TurnPhase.TURN_RESOLVING)

    def end_turn(self) -> Optional[str]:
        """
        Close the turn and rotate to the next player.

        Returns:
            Id of the player now on throw
        """
        self._transition_to(TurnPhase.TURN_ENDED)
        self.darts.clear()
        self.turns_completed += 1

        if self.player_ids:
            self.current_index = (self.current_index + 1) % len(self.player_ids)

        self._transition_to(TurnPhase.WAITING_FOR_THROW)
        logger.debug(f"Next player: {self.current_player_id}")
        return self.current_player_id

    def start_with(self, index: int) -> None:
        """Start a fresh turn for the player at `index`."""
        self.darts.clear()
        self.current_index = index % len(self.player_ids) if self.player_ids else 0
        if self.phase != TurnPhase.WAITING_FOR_THROW:
            self._transition_to(TurnPhase.WAITING_FOR_THROW)

    def _transition_to(self, new_phase: TurnPhase) -> None:
        logger.debug(f"Turn transition: {self.phase.value} → {new_phase.value}")
        self.phase = new_phase
        self.state_transitions += 1
