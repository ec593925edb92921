"""
Killer game mode.

Rules:
- Every player draws a board number; numbers are spread around the
  board, at least four sectors apart while the board has room
- Hitting your own number charges you; three charges make you a killer
- A killer hitting an opponent's number takes lives; at zero lives the
  opponent is eliminated
- The hit mode decides which beds count ("full", "single",
  "outer-single", "double", "triple")
- With the multiplier option a double/triple counts two/three hits
- Suicide: a killer hitting their own number loses lives
- Killer vs killer: a hit on another killer takes a life ("life"),
  strips charge ("status") or both ("both")
- Last player alive wins
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence
import copy
import logging

import numpy as np

from autocade.core import Bed, BoardGeometry, Numbered, Player, Throw
from autocade.feed import ThrowAdded, ThrowRemoved
from .game_modes import GameMode, GameStateBase
from .triggers import Trigger
from .turn import TurnStateMachine

logger = logging.getLogger(__name__)

CHARGE_TO_KILL = 3
MAX_KILLER_PLAYERS = 20
# Preferred board distance between two players' numbers
NUMBER_SPACING = 4


@dataclass
class KillerSettings:
    """Configuration for Killer."""
    starting_lives: int = 5
    mode: str = "full"
    multiplier: bool = False  # Doubles/triples count two/three hits
    suicide: bool = False
    killer_vs_killer: str = "life"  # "life" | "status" | "both"
    starting_order: str = "listed"  # "listed" | "random"


class KillerOutcome(Enum):
    MISS = "miss"
    INVALID_ZONE = "invalid_zone"
    CHARGED = "charged"
    BECAME_KILLER = "became_killer"
    ALREADY_KILLER = "already_killer"
    MUST_BE_KILLER = "must_be_killer"
    SAFE = "safe"
    LIFE_TAKEN = "life_taken"
    STATUS_TAKEN = "status_taken"
    ELIMINATED = "eliminated"
    SUICIDE = "suicide"
    SKIPPED = "skipped"


@dataclass
class KillerPlayer:
    id: str
    name: str
    number: int
    lives: int
    charge: int = 0
    is_killer: bool = False
    # Final placing, set on elimination (1 for the winner)
    rank: Optional[int] = None

    @property
    def is_alive(self) -> bool:
        return self.lives > 0


@dataclass
class KillerState(GameStateBase):
    settings: KillerSettings = field(default_factory=KillerSettings)
    turn: TurnStateMachine = field(default_factory=TurnStateMachine)
    players: List[KillerPlayer] = field(default_factory=list)
    # All players before the first dart of the turn
    turn_start_players: List[KillerPlayer] = field(default_factory=list)
    last_outcome: Optional[KillerOutcome] = None

    @property
    def current_player_id(self) -> Optional[str]:
        return self.turn.current_player_id

    @property
    def current_player(self) -> Optional[KillerPlayer]:
        return self.find_player(self.current_player_id)

    def find_player(self, player_id: Optional[str]) -> Optional[KillerPlayer]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def find_owner(self, number: int) -> Optional[KillerPlayer]:
        """Living player who owns `number`."""
        for p in self.players:
            if p.number == number and p.is_alive:
                return p
        return None

    def alive_players(self) -> List[KillerPlayer]:
        return [p for p in self.players if p.is_alive]

    def standings(self) -> List[KillerPlayer]:
        """Living players by lives and charge, then the eliminated by rank."""
        alive = sorted(self.alive_players(), key=lambda p: (p.lives, p.charge), reverse=True)
        out = sorted(
            (p for p in self.players if not p.is_alive),
            key=lambda p: p.rank if p.rank is not None else len(self.players)
        )
        return alive + out


def board_distance(a: int, b: int, geometry: Optional[BoardGeometry] = None) -> int:
    """Number of sectors between two numbers, going the short way round."""
    sequence = (geometry or BoardGeometry()).sector_sequence
    diff = abs(sequence.index(a) - sequence.index(b))
    return min(diff, len(sequence) - diff)


def assign_numbers(count: int, rng: Optional[np.random.Generator] = None) -> List[int]:
    """
    Draw distinct board numbers for `count` players.

    Each number after the first is the first free one at least
    NUMBER_SPACING sectors from every number already taken; the spacing
    is relaxed step by step when the board gets crowded.

    Raises:
        ValueError: If more than 20 numbers are requested
    """
    if count > MAX_KILLER_PLAYERS:
        raise ValueError(f"Killer supports at most {MAX_KILLER_PLAYERS} players, got {count}")

    rng = rng or np.random.default_rng()
    available = [int(n) for n in rng.permutation(np.arange(1, 21))]
    chosen: List[int] = []

    for _ in range(count):
        pick = available[0]
        if chosen:
            for spacing in range(NUMBER_SPACING, -1, -1):
                fits = [n for n in available if all(board_distance(n, c) >= spacing for c in chosen)]
                if fits:
                    pick = fits[0]
                    break
        chosen.append(pick)
        available.remove(pick)

    return chosen


def hit_value(throw: Throw, mode: str) -> int:
    """
    Multiplier of a dart that counts in `mode`, or 0.
    The bull never counts.
    """
    segment = throw.segment
    if not isinstance(segment, Numbered):
        return 0

    m = segment.multiplier
    if mode == "full":
        return m
    if mode == "single":
        return m if m == 1 else 0
    if mode == "outer-single":
        return m if m == 1 and throw.bed != Bed.SINGLE_INNER else 0
    if mode == "double":
        return m if m == 2 else 0
    if mode == "triple":
        return m if m == 3 else 0

    logger.warning(f"Unknown hit mode {mode!r}, counting no hits")
    return 0


class KillerGame(GameMode[KillerState]):
    """
    Killer rule engine.

    Args:
        settings: Game settings
        rng: Random generator for number draw and random starting order
    """

    def __init__(
            self,
            settings: Optional[KillerSettings] = None,
            rng: Optional[np.random.Generator] = None
    ):
        self.settings = settings or KillerSettings()
        self.rng = rng or np.random.default_rng()

    def get_name(self) -> str:
        return f"Killer ({self.settings.starting_lives} lives, {self.settings.mode})"

    def new_game(self, players: Sequence[Player]) -> KillerState:
        active = self.active_players(players)
        if self.settings.starting_order == "random" and active:
            active = [active[i] for i in self.rng.permutation(len(active))]

        numbers = assign_numbers(len(active), self.rng)
        state = KillerState(
            settings=self.settings,
            turn=TurnStateMachine(player_ids=[p.id for p in active]),
            players=[
                KillerPlayer(id=p.id, name=p.name, number=n, lives=self.settings.starting_lives)
                for p, n in zip(active, numbers)
            ],
        )
        self._capture_turn_start(state)
        logger.info(
            f"{self.get_name()} started: "
            + ", ".join(f"{p.name}={p.number}" for p in state.players)
        )
        return state

    def on_throw(self, state: KillerState, event: ThrowAdded) -> None:
        if state.current_player_id is None:
            return
        if not state.turn.accept_throw(event.throw):
            return

        state.last_throw = event.throw.name
        self._apply_dart(state, event.throw, emit=True)

    def on_undo(self, state: KillerState, event: ThrowRemoved) -> None:
        if state.turn.remove_throw() is None:
            return

        state.players = copy.deepcopy(state.turn_start_players)
        state.last_outcome = None
        for throw in state.turn.darts:
            self._apply_dart(state, throw, emit=False)
        state.last_throw = state.turn.darts[-1].name if state.turn.darts else None

    def on_turn_end(self, state: KillerState) -> None:
        if state.current_player_id is None:
            return
        state.turn.begin_resolution()
        state.turn.end_turn()

        # Eliminated players lose their turns
        turn = state.turn
        for step in range(len(turn.player_ids)):
            index = (turn.current_index + step) % len(turn.player_ids)
            player = state.find_player(turn.player_ids[index])
            if player is not None and player.is_alive:
                if step:
                    turn.start_with(index)
                    logger.debug(f"Skipped {step} eliminated, next player: {player.id}")
                break

        state.last_throw = None
        state.last_outcome = None
        self._capture_turn_start(state)

    def _apply_dart(self, state: KillerState, throw: Throw, emit: bool) -> None:
        settings = state.settings
        shooter = state.current_player

        if shooter is None or not shooter.is_alive:
            state.last_outcome = KillerOutcome.SKIPPED
            return

        value = hit_value(throw, settings.mode)
        owner = state.find_owner(throw.segment.number)
        damage = value if settings.multiplier else 1

        if owner is None:
            state.last_outcome = KillerOutcome.MISS
        elif owner is shooter:
            self._own_number(state, shooter, value, damage, emit)
        elif not shooter.is_killer:
            state.last_outcome = KillerOutcome.MUST_BE_KILLER
        elif value == 0:
            state.last_outcome = KillerOutcome.SAFE
        else:
            self._attack(state, owner, damage, emit)

        logger.debug(f"{shooter.name} threw {throw.name}: {state.last_outcome.value}")

        alive = state.alive_players()
        if len(alive) == 1 and len(state.players) > 1:
            winner = alive[0]
            winner.rank = 1
            state.winner_id = winner.id
            if emit:
                state.triggers.append(Trigger.WIN)
            logger.info(f"Game finished! Winner: {winner.name} ({winner.lives} lives left)")

    def _own_number(self, state: KillerState, shooter: KillerPlayer, value: int, damage: int, emit: bool) -> None:
        if value == 0:
            state.last_outcome = KillerOutcome.INVALID_ZONE
        elif shooter.is_killer and state.settings.suicide:
            shooter.lives -= damage
            state.last_outcome = KillerOutcome.SUICIDE
            if not shooter.is_alive:
                self._eliminate(state, shooter, emit)
        elif not shooter.is_killer:
            shooter.charge = min(CHARGE_TO_KILL, shooter.charge + damage)
            if shooter.charge >= CHARGE_TO_KILL:
                shooter.is_killer = True
                state.last_outcome = KillerOutcome.BECAME_KILLER
                logger.info(f"{shooter.name} is now a killer")
            else:
                state.last_outcome = KillerOutcome.CHARGED
        else:
            state.last_outcome = KillerOutcome.ALREADY_KILLER

    def _attack(self, state: KillerState, victim: KillerPlayer, damage: int, emit: bool) -> None:
        rule = state.settings.killer_vs_killer
        takes_life = not victim.is_killer or rule in ("life", "both")

        if victim.is_killer and rule in ("status", "both"):
            victim.charge = max(0, victim.charge - damage)
            if victim.charge <= 0:
                victim.is_killer = False
            state.last_outcome = KillerOutcome.STATUS_TAKEN

        if takes_life:
            victim.lives -= damage
            state.last_outcome = KillerOutcome.LIFE_TAKEN
            if not victim.is_alive:
                self._eliminate(state, victim, emit)

    @staticmethod
    def _eliminate(state: KillerState, player: KillerPlayer, emit: bool) -> None:
        player.lives = 0
        player.is_killer = False
        player.rank = len(state.alive_players()) + 1
        state.last_outcome = KillerOutcome.ELIMINATED
        if emit:
            state.triggers.append(Trigger.ELIMINATION)
        logger.info(f"{player.name} eliminated (rank {player.rank})")

    @staticmethod
    def _capture_turn_start(state: KillerState) -> None:
        state.turn_start_players = copy.deepcopy(state.players)
