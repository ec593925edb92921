"""
Around the Clock game mode.

Rules:
- Hit every number of the sequence in order (1-20, 20-1 or shuffled),
  optionally finishing on the bull
- The hit mode decides which beds count: any bed ("full") or only
  singles, outer singles, doubles or triples
- Each target needs `hits_required` hits before moving on
- With the multiplier option in "full" mode a double advances two
  targets and a triple three, but never skips over the closing bull
- First player through the whole sequence wins
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import copy
import logging

import numpy as np

from autocade.core import Bed, Numbered, Player, Throw, BULL_NUMBER
from autocade.feed import ThrowAdded, ThrowRemoved
from .game_modes import GameMode, GameStateBase
from .triggers import Trigger
from .turn import TurnStateMachine

logger = logging.getLogger(__name__)


@dataclass
class AroundTheClockSettings:
    """Configuration for Around the Clock."""
    mode: str = "full"
    order: str = "1-20-bull"
    multiplier: bool = False  # Doubles/triples skip ahead ("full" mode only)
    hits_required: int = 1
    bull_mode: str = "both"  # "both" | "inner"
    bull_finish: bool = True
    starting_order: str = "listed"  # "listed" | "random"


@dataclass
class ATCPlayerProgress:
    """Progress and accuracy of one player."""
    targets_hit: List[int] = field(default_factory=list)
    current_target: Optional[int] = None
    current_target_hits: int = 0

    total_darts: int = 0
    hits: int = 0
    misses: int = 0

    @property
    def accuracy(self) -> float:
        if self.total_darts == 0:
            return 0.0
        return self.hits / self.total_darts


@dataclass
class AroundTheClockState(GameStateBase):
    settings: AroundTheClockSettings = field(default_factory=AroundTheClockSettings)
    sequence: List[int] = field(default_factory=list)
    turn: TurnStateMachine = field(default_factory=TurnStateMachine)
    progress: Dict[str, ATCPlayerProgress] = field(default_factory=dict)
    # Current player's progress before the first dart of the turn
    turn_start_progress: Optional[ATCPlayerProgress] = None

    @property
    def current_player_id(self) -> Optional[str]:
        return self.turn.current_player_id

    @property
    def current_target(self) -> Optional[int]:
        pid = self.current_player_id
        if pid is None:
            return None
        return self.progress[pid].current_target


def build_sequence(
        order: str,
        bull_finish: bool,
        rng: Optional[np.random.Generator] = None
) -> List[int]:
    """
    Target sequence for a match.

    Args:
        order: "1-20-bull", "20-1-bull" or "random-bull"
        bull_finish: Append the bull (25) as the last target
        rng: Random generator for the shuffled order
    """
    if order == "20-1-bull":
        numbers = list(range(20, 0, -1))
    elif order == "random-bull":
        rng = rng or np.random.default_rng()
        numbers = [int(n) for n in rng.permutation(np.arange(1, 21))]
    else:
        numbers = list(range(1, 21))

    if bull_finish:
        numbers.append(BULL_NUMBER)
    return numbers


def hit_strength(throw: Throw, target: Optional[int], settings: AroundTheClockSettings) -> int:
    """
    How strongly a dart hits the target.

    Returns:
        0 for no hit; in "full" mode the dart's multiplier; otherwise 1
        when the dart landed in the bed the mode asks for
    """
    if target is None:
        return 0

    segment = throw.segment

    if target == BULL_NUMBER:
        if not segment.is_bull:
            return 0
        if settings.bull_mode == "inner" and segment.multiplier != 2:
            return 0
        return segment.multiplier if settings.mode == "full" else 1

    if not isinstance(segment, Numbered) or segment.number != target:
        return 0

    mode = settings.mode
    if mode == "full":
        return segment.multiplier
    if mode == "single":
        return 1 if segment.multiplier == 1 else 0
    if mode == "outer-single":
        return 1 if segment.multiplier == 1 and throw.bed != Bed.SINGLE_INNER else 0
    if mode == "double":
        return 1 if segment.multiplier == 2 else 0
    if mode == "triple":
        return 1 if segment.multiplier == 3 else 0

    logger.warning(f"Unknown hit mode {mode!r}, counting no hits")
    return 0


class AroundTheClockGame(GameMode[AroundTheClockState]):
    """
    Around the Clock rule engine.

    Args:
        settings: Game settings
        rng: Random generator for shuffled order and random starting order
    """

    def __init__(
            self,
            settings: Optional[AroundTheClockSettings] = None,
            rng: Optional[np.random.Generator] = None
    ):
        self.settings = settings or AroundTheClockSettings()
        self.rng = rng or np.random.default_rng()

    def get_name(self) -> str:
        return f"Around the Clock ({self.settings.mode}, {self.settings.order})"

    def new_game(self, players: Sequence[Player]) -> AroundTheClockState:
        active = self.active_players(players)
        if self.settings.starting_order == "random" and active:
            active = [active[i] for i in self.rng.permutation(len(active))]

        ids = [p.id for p in active]
        sequence = build_sequence(self.settings.order, self.settings.bull_finish, self.rng)
        first = sequence[0] if sequence else None

        state = AroundTheClockState(
            settings=self.settings,
            sequence=sequence,
            turn=TurnStateMachine(player_ids=ids),
            progress={pid: ATCPlayerProgress(current_target=first) for pid in ids},
        )
        self._capture_turn_start(state)
        logger.info(f"{self.get_name()} started with {len(ids)} players: {sequence}")
        return state

    def on_throw(self, state: AroundTheClockState, event: ThrowAdded) -> None:
        if state.current_player_id is None:
            return
        if not state.turn.accept_throw(event.throw):
            return

        state.last_throw = event.throw.name
        self._apply_dart(state, event.throw, emit=True)

    def on_undo(self, state: AroundTheClockState, event: ThrowRemoved) -> None:
        if state.turn.remove_throw() is None:
            return

        pid = state.current_player_id
        state.progress[pid] = copy.deepcopy(state.turn_start_progress)
        for throw in state.turn.darts:
            self._apply_dart(state, throw, emit=False)
        state.last_throw = state.turn.darts[-1].name if state.turn.darts else None

    def on_turn_end(self, state: AroundTheClockState) -> None:
        if state.current_player_id is None:
            return
        state.turn.begin_resolution()
        state.turn.end_turn()
        state.last_throw = None
        self._capture_turn_start(state)

    def _apply_dart(self, state: AroundTheClockState, throw: Throw, emit: bool) -> None:
        pid = state.current_player_id
        progress = state.progress[pid]
        settings = state.settings
        sequence = state.sequence

        strength = hit_strength(throw, progress.current_target, settings)
        progress.total_darts += 1

        if strength == 0:
            progress.misses += 1
            return

        progress.hits += 1
        if settings.mode == "full" and settings.multiplier:
            start = len(progress.targets_hit)
            for step in range(strength):
                if start + step >= len(sequence):
                    break
                target = sequence[start + step]
                # The bull is never reached by skipping; it needs its own dart
                if target == BULL_NUMBER and step > 0:
                    break
                progress.targets_hit.append(target)
            progress.current_target_hits = 0
        else:
            progress.current_target_hits += 1
            if progress.current_target_hits >= settings.hits_required:
                progress.targets_hit.append(progress.current_target)
                progress.current_target_hits = 0

        next_index = len(progress.targets_hit)
        progress.current_target = sequence[next_index] if next_index < len(sequence) else None

        if emit:
            state.triggers.append(Trigger.TARGET_HIT)
        logger.debug(f"{pid} hit {throw.name}: {len(progress.targets_hit)}/{len(sequence)} targets")

        if next_index >= len(sequence):
            state.winner_id = pid
            if emit:
                state.triggers.append(Trigger.WIN)
            logger.info(f"Game finished! Winner: {pid} ({progress.total_darts} darts)")

    @staticmethod
    def _capture_turn_start(state: AroundTheClockState) -> None:
        pid = state.current_player_id
        state.turn_start_progress = copy.deepcopy(state.progress[pid]) if pid else None
