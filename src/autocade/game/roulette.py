"""
Dart Roulette - a drinking game where a randomly picked shooter throws at a
random number to make a randomly picked victim drink.

Phase flow:
- LOBBY: waiting for the first spin
- SPIN: shooter, target number and victim picked (animation runs)
- AIM: shooter throws; the first dart is judged
- RESULT: penalty shown, then the next spin
- FINISHED: a player reached the winning score; no more spins

Victims are picked fairly: always among the players targeted least so far.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence
import copy
import logging

import numpy as np

from autocade.core import Player, Segment, BULL_NUMBER
from autocade.feed import ThrowAdded, ThrowRemoved
from .game_modes import GameMode, GameStateBase
from .triggers import Trigger

logger = logging.getLogger(__name__)

WIN_SCORE = 10


@dataclass
class RouletteSettings:
    """Penalty configuration."""
    single_sips: int = 1
    double_sips: int = 2
    triple_action: str = "down-it"  # "down-it" | "sips"
    triple_sips: int = 3
    backfire_sips: int = 1


class RoulettePhase(Enum):
    LOBBY = "lobby"
    SPIN = "spin"
    AIM = "aim"
    RESULT = "result"
    FINISHED = "finished"


class HitType(Enum):
    MISS = "miss"
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    BULLSEYE = "bullseye"


@dataclass
class RoulettePlayer:
    id: str
    name: str
    times_targeted: int = 0
    score: int = 0


@dataclass
class Penalty:
    """Who drinks and how much."""
    target: str  # "victim" | "shooter" | "everyone"
    player_name: str = ""
    sips: Optional[int] = None
    down_it: bool = False

    def describe(self) -> str:
        if self.target == "everyone":
            return "Everyone finishes their drink!"
        who = self.player_name or self.target.title()
        if self.down_it:
            return f"{who} has to down it!"
        plural = "s" if self.sips != 1 else ""
        return f"{who} takes {self.sips} sip{plural}!"


@dataclass
class RouletteResult:
    """Outcome of one judged dart."""
    hit_type: HitType
    shooter_id: str
    shooter_name: str
    victim_id: Optional[str]
    victim_name: str
    target_number: int
    penalty: Penalty
    points_scored: int = 0

    @property
    def is_jailbreak(self) -> bool:
        return self.hit_type == HitType.BULLSEYE

    @property
    def is_backfire(self) -> bool:
        return self.hit_type == HitType.MISS

    @property
    def message(self) -> str:
        if self.is_jailbreak:
            return f"JAILBREAK! {self.penalty.describe()}"
        if self.is_backfire:
            return f"BACKFIRE! {self.penalty.describe()}"
        return self.penalty.describe()


@dataclass
class RouletteState(GameStateBase):
    settings: RouletteSettings = field(default_factory=RouletteSettings)
    players: List[RoulettePlayer] = field(default_factory=list)
    shooter_index: int = 0
    target_number: Optional[int] = None
    victim_id: Optional[str] = None
    phase: RoulettePhase = RoulettePhase.LOBBY
    last_result: Optional[RouletteResult] = None
    spins: int = 0

    @property
    def shooter(self) -> Optional[RoulettePlayer]:
        if not self.players:
            return None
        return self.players[self.shooter_index]

    @property
    def victim(self) -> Optional[RoulettePlayer]:
        return self.find_player(self.victim_id)

    def find_player(self, player_id: Optional[str]) -> Optional[RoulettePlayer]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def standings(self) -> List[RoulettePlayer]:
        """Players sorted by score, best first."""
        return sorted(self.players, key=lambda p: p.score, reverse=True)


class DartRouletteGame(GameMode[RouletteState]):
    """
    Dart Roulette rule engine.

    Args:
        settings: Penalty settings
        rng: Random generator for shooter, target and victim picks
    """

    def __init__(
            self,
            settings: Optional[RouletteSettings] = None,
            rng: Optional[np.random.Generator] = None
    ):
        self.settings = settings or RouletteSettings()
        self.rng = rng or np.random.default_rng()

    def get_name(self) -> str:
        return "Dart Roulette"

    def new_game(self, players: Sequence[Player]) -> RouletteState:
        active = self.active_players(players)
        state = RouletteState(
            settings=self.settings,
            players=[RoulettePlayer(id=p.id, name=p.name) for p in active],
        )
        logger.info(f"Dart Roulette started with {len(active)} players")
        return state

    def spin(self, state: RouletteState) -> RouletteState:
        """
        Pick shooter, target number and victim.

        The victim is drawn uniformly among the non-shooters with the
        fewest times targeted.
        """
        state = copy.deepcopy(state)
        state.triggers = []

        if state.is_finished:
            logger.info("Game already won, not spinning")
            return state
        if not state.players:
            logger.warning("Cannot spin: no players")
            return state

        state.shooter_index = int(self.rng.integers(len(state.players)))
        state.target_number = int(self.rng.integers(1, 21))
        shooter = state.players[state.shooter_index]

        eligible = [p for p in state.players if p.id != shooter.id]
        if eligible:
            fewest = min(p.times_targeted for p in eligible)
            least_targeted = [p for p in eligible if p.times_targeted == fewest]
            victim = least_targeted[int(self.rng.integers(len(least_targeted)))]
            state.victim_id = victim.id
        else:
            state.victim_id = None

        state.phase = RoulettePhase.SPIN
        state.last_result = None
        state.spins += 1
        logger.debug(
            f"Spin {state.spins}: {shooter.name} aims at {state.target_number} "
            f"for {state.victim.name if state.victim else 'nobody'}"
        )
        return state

    def start_aim(self, state: RouletteState) -> RouletteState:
        """Spin animation done; the shooter may throw."""
        state = copy.deepcopy(state)
        state.triggers = []
        if state.phase == RoulettePhase.SPIN:
            state.phase = RoulettePhase.AIM
        return state

    def next_round(self, state: RouletteState) -> RouletteState:
        """Clear the round; the next spin picks a new shooter."""
        state = copy.deepcopy(state)
        state.triggers = []
        if state.is_finished:
            return state
        state.target_number = None
        state.victim_id = None
        state.last_result = None
        state.phase = RoulettePhase.LOBBY
        return state

    def advance(self, state: RouletteState) -> RouletteState:
        """Timer-driven step: lobby/result → spin → aim."""
        if state.is_finished:
            logger.debug("Game already won, nothing to advance")
            return super().advance(state)
        if state.phase == RoulettePhase.SPIN:
            return self.start_aim(state)
        if state.phase == RoulettePhase.RESULT:
            return self.spin(self.next_round(state))
        if state.phase == RoulettePhase.LOBBY:
            return self.spin(state)
        return super().advance(state)

    def judge(self, state: RouletteState, segment: Segment) -> RouletteState:
        """Judge the shooter's dart (only in the AIM phase)."""
        state = copy.deepcopy(state)
        state.triggers = []
        if state.phase == RoulettePhase.AIM and not state.is_finished:
            self._judge(state, segment)
        return state

    def on_throw(self, state: RouletteState, event: ThrowAdded) -> None:
        if state.phase != RoulettePhase.AIM:
            logger.debug(f"Ignoring {event.throw.name} in phase {state.phase.value}")
            return
        state.last_throw = event.throw.name
        self._judge(state, event.throw.segment)

    def on_undo(self, state: RouletteState, event: ThrowRemoved) -> None:
        # Judged darts are final
        logger.debug(f"Ignoring undo of {event.throw.name}")

    def on_turn_end(self, state: RouletteState) -> None:
        pass

    def _judge(self, state: RouletteState, segment: Segment) -> None:
        settings = state.settings
        shooter = state.players[state.shooter_index]
        victim = state.victim
        victim_name = victim.name if victim else ""
        target = state.target_number

        points = 0
        if segment.number == BULL_NUMBER:
            hit_type = HitType.BULLSEYE
            penalty = Penalty(target="everyone", down_it=True)
            state.triggers.append(Trigger.JAILBREAK)
        elif segment.number == target:
            points = segment.multiplier
            if segment.multiplier == 3:
                hit_type = HitType.TRIPLE
                if settings.triple_action == "down-it":
                    penalty = Penalty(target="victim", player_name=victim_name, down_it=True)
                else:
                    penalty = Penalty(target="victim", player_name=victim_name, sips=settings.triple_sips)
            elif segment.multiplier == 2:
                hit_type = HitType.DOUBLE
                penalty = Penalty(target="victim", player_name=victim_name, sips=settings.double_sips)
            else:
                hit_type = HitType.SINGLE
                penalty = Penalty(target="victim", player_name=victim_name, sips=settings.single_sips)

            shooter.score += points
            if victim:
                victim.times_targeted += 1
            state.triggers.append(Trigger.HIT)
        else:
            hit_type = HitType.MISS
            penalty = Penalty(target="shooter", player_name=shooter.name, sips=settings.backfire_sips)
            state.triggers.append(Trigger.BACKFIRE)

        state.last_result = RouletteResult(
            hit_type=hit_type,
            shooter_id=shooter.id,
            shooter_name=shooter.name,
            victim_id=state.victim_id,
            victim_name=victim_name,
            target_number=target,
            penalty=penalty,
            points_scored=points,
        )
        logger.info(f"{shooter.name} threw {segment.name} at {target}: {state.last_result.message}")

        if shooter.score >= WIN_SCORE:
            state.winner_id = shooter.id
            state.phase = RoulettePhase.FINISHED
            state.triggers.append(Trigger.WIN)
            logger.info(f"Game finished! Winner: {shooter.name}")
        else:
            state.phase = RoulettePhase.RESULT
