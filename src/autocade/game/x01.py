"""
X01 game mode (121 ... 901) with configurable in/out rules and legs/sets.

Rules:
- Each player starts at the base score and counts down
- A dart that would leave the score below 0 or at exactly 1 busts the turn
- Double-out: reaching 0 with anything but a double (or inner bull) busts
- Double-in: darts score nothing until the player hits a double
- A busted turn reverts to the score at the start of the turn
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import logging

import numpy as np

from autocade.core import Player, Segment, Throw
from autocade.feed import ThrowAdded, ThrowRemoved
from .checkout import MAX_CHECKOUT, MIN_DOUBLE_OUT, suggest_checkout
from .game_modes import GameMode, GameStateBase
from .triggers import Trigger
from .turn import TurnStateMachine

logger = logging.getLogger(__name__)

MAX_TURN_SCORE = 180


@dataclass
class X01Settings:
    """Match configuration for X01."""
    base_score: int = 501
    in_mode: str = "single"  # "single" | "double"
    out_mode: str = "double"  # "single" | "double"
    match_mode: str = "off"  # "off" | "legs" | "sets"
    legs_to_win: int = 3
    sets_to_win: int = 3
    starting_order: str = "listed"  # "listed" | "random"

    @property
    def double_out(self) -> bool:
        return self.out_mode == "double"

    @property
    def double_in(self) -> bool:
        return self.in_mode == "double"


@dataclass
class X01PlayerStats:
    """Per-player statistics across the match."""
    darts_thrown: int = 0
    points_scored: int = 0
    highest_turn: int = 0
    busts: int = 0
    checkouts: int = 0

    @property
    def average_per_dart(self) -> float:
        if self.darts_thrown == 0:
            return 0.0
        return self.points_scored / self.darts_thrown

    @property
    def three_dart_average(self) -> float:
        return self.average_per_dart * 3


@dataclass
class X01State(GameStateBase):
    settings: X01Settings = field(default_factory=X01Settings)
    turn: TurnStateMachine = field(default_factory=TurnStateMachine)

    remaining: Dict[str, int] = field(default_factory=dict)
    turn_score: int = 0
    turn_start_remaining: int = 0
    bust: bool = False
    # Points each dart on the board contributed to turn_score
    dart_points: List[int] = field(default_factory=list)

    # Double-in progress
    opened: Dict[str, bool] = field(default_factory=dict)
    turn_start_opened: bool = False

    # Match progress
    legs_won: Dict[str, int] = field(default_factory=dict)
    sets_won: Dict[str, int] = field(default_factory=dict)
    leg_winner_id: Optional[str] = None
    leg_starter_index: int = 0
    legs_played: int = 0

    stats: Dict[str, X01PlayerStats] = field(default_factory=dict)

    @property
    def current_player_id(self) -> Optional[str]:
        return self.turn.current_player_id

    @property
    def projected(self) -> int:
        """Remaining score shown for the current player (reverted while bust)."""
        if self.bust:
            return self.turn_start_remaining
        return self.turn_start_remaining - self.turn_score

    @property
    def darts_left(self) -> int:
        return self.turn.darts_left

    @property
    def checkout(self) -> Optional[List[Segment]]:
        """Suggested finish for the current player, if one exists."""
        if self.bust or self.leg_winner_id or self.winner_id:
            return None
        lowest = MIN_DOUBLE_OUT if self.settings.double_out else 1
        if not lowest <= self.projected <= MAX_CHECKOUT:
            return None
        return suggest_checkout(self.projected, self.darts_left, self.settings.double_out)


class X01Game(GameMode[X01State]):
    """
    X01 rule engine.

    Args:
        settings: Match settings (default: 501, double-out, single leg)
        rng: Random generator for the random starting order
    """

    def __init__(
            self,
            settings: Optional[X01Settings] = None,
            rng: Optional[np.random.Generator] = None
    ):
        self.settings = settings or X01Settings()
        self.rng = rng or np.random.default_rng()

    def get_name(self) -> str:
        """Get game mode name."""
        suffix = ""
        if self.settings.double_in:
            suffix += " (Double In)"
        if self.settings.double_out:
            suffix += " (Double Out)"
        return f"{self.settings.base_score}{suffix}"

    def new_game(self, players: Sequence[Player]) -> X01State:
        active = self.active_players(players)
        if self.settings.starting_order == "random" and active:
            active = [active[i] for i in self.rng.permutation(len(active))]

        ids = [p.id for p in active]
        base = self.settings.base_score
        state = X01State(
            settings=self.settings,
            turn=TurnStateMachine(player_ids=ids),
            remaining={pid: base for pid in ids},
            turn_start_remaining=base,
            opened={pid: not self.settings.double_in for pid in ids},
            turn_start_opened=not self.settings.double_in,
            legs_won={pid: 0 for pid in ids},
            sets_won={pid: 0 for pid in ids},
            stats={pid: X01PlayerStats() for pid in ids},
        )
        logger.info(f"X01 started: {self.get_name()} with {len(ids)} players")
        return state

    def on_throw(self, state: X01State, event: ThrowAdded) -> None:
        if state.leg_winner_id or state.current_player_id is None:
            return
        if not state.turn.accept_throw(event.throw):
            return

        state.last_throw = event.throw.name
        self._score_dart(state, event.throw, emit=True)

        if (state.turn.darts_thrown == 3 and not state.bust
                and state.turn_score == MAX_TURN_SCORE):
            state.triggers.append(Trigger.ONE_EIGHTY)

    def on_undo(self, state: X01State, event: ThrowRemoved) -> None:
        if state.leg_winner_id:
            return
        if state.turn.remove_throw() is None:
            logger.debug("Undo with no darts in the turn, ignoring")
            return

        # Bust is cleared and re-derived from the darts still on the board
        self._replay_turn(state)
        state.last_throw = state.turn.darts[-1].name if state.turn.darts else None

    def on_turn_end(self, state: X01State) -> None:
        pid = state.current_player_id
        if pid is None:
            return

        state.turn.begin_resolution()

        if state.leg_winner_id:
            self._start_next_leg(state)
            return

        stats = state.stats[pid]
        stats.darts_thrown += state.turn.darts_thrown
        if state.bust:
            stats.busts += 1
            state.remaining[pid] = state.turn_start_remaining
            state.opened[pid] = state.turn_start_opened
            logger.info(f"{pid} busted, back to {state.turn_start_remaining}")
        else:
            state.remaining[pid] = state.turn_start_remaining - state.turn_score
            stats.points_scored += state.turn_score
            stats.highest_turn = max(stats.highest_turn, state.turn_score)

        self._clear_turn(state)
        state.turn.end_turn()
        self._capture_turn_start(state)

    def _score_dart(self, state: X01State, throw: Throw, emit: bool) -> None:
        """Apply one dart of the current turn."""
        pid = state.current_player_id

        if state.bust:
            # Scoring is frozen for the rest of a busted turn
            state.dart_points.append(0)
            return

        if not state.opened[pid]:
            if not throw.segment.is_double:
                state.dart_points.append(0)
                return
            state.opened[pid] = True

        points = throw.points
        projected = state.turn_start_remaining - (state.turn_score + points)
        state.turn_score += points
        state.dart_points.append(points)

        bad_finish = projected == 0 and state.settings.double_out and not throw.segment.is_double
        if projected < 0 or projected == 1 or bad_finish:
            state.bust = True
            logger.debug(f"{pid} bust with {throw.name} (would leave {projected})")
            if emit:
                state.triggers.append(Trigger.BUST)
        elif projected == 0:
            self._win_leg(state, pid)
        else:
            logger.debug(f"{pid} {throw.name}: turn {state.turn_score}, left {projected}")

    def _replay_turn(self, state: X01State) -> None:
        pid = state.current_player_id
        state.turn_score = 0
        state.bust = False
        state.dart_points = []
        state.opened[pid] = state.turn_start_opened
        for throw in state.turn.darts:
            self._score_dart(state, throw, emit=False)

    def _win_leg(self, state: X01State, pid: str) -> None:
        settings = state.settings
        state.remaining[pid] = 0
        state.leg_winner_id = pid
        state.triggers.append(Trigger.CHECKOUT)

        stats = state.stats[pid]
        stats.darts_thrown += state.turn.darts_thrown
        stats.points_scored += state.turn_score
        stats.highest_turn = max(stats.highest_turn, state.turn_score)
        stats.checkouts += 1

        state.legs_won[pid] += 1
        match_won = False
        if settings.match_mode == "legs":
            match_won = state.legs_won[pid] >= settings.legs_to_win
        elif settings.match_mode == "sets":
            if state.legs_won[pid] >= settings.legs_to_win:
                state.sets_won[pid] += 1
                state.legs_won = {p: 0 for p in state.legs_won}
                logger.info(f"{pid} wins set ({state.sets_won[pid]}/{settings.sets_to_win})")
            match_won = state.sets_won[pid] >= settings.sets_to_win
        else:
            match_won = True

        logger.info(f"{pid} checks out with {state.last_throw}")
        if match_won:
            state.winner_id = pid
            state.triggers.append(Trigger.WIN)
            logger.info(f"Game finished! Winner: {pid}")

    def _start_next_leg(self, state: X01State) -> None:
        base = self.settings.base_score
        state.remaining = {pid: base for pid in state.remaining}
        state.opened = {pid: not self.settings.double_in for pid in state.opened}
        state.leg_winner_id = None
        state.legs_played += 1
        state.leg_starter_index = (state.leg_starter_index + 1) % max(len(state.turn.player_ids), 1)

        self._clear_turn(state)
        state.turn.end_turn()
        state.turn.start_with(state.leg_starter_index)
        self._capture_turn_start(state)
        logger.info(f"Leg {state.legs_played + 1} started, {state.current_player_id} throws first")

    @staticmethod
    def _clear_turn(state: X01State) -> None:
        state.turn_score = 0
        state.bust = False
        state.dart_points = []
        state.last_throw = None

    @staticmethod
    def _capture_turn_start(state: X01State) -> None:
        pid = state.current_player_id
        state.turn_start_remaining = state.remaining[pid]
        state.turn_start_opened = state.opened[pid]
