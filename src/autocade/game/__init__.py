"""
Game module - turn handling, rule engines, roster and session.
"""
from .triggers import Trigger
from .turn import TurnPhase, TurnStateMachine
from .checkout import checkout_suggestions, suggest_checkout, format_checkout
from .game_modes import GameMode, GameStateBase
from .x01 import X01Game, X01Settings, X01State, X01PlayerStats
from .around_the_clock import (
    AroundTheClockGame,
    AroundTheClockSettings,
    AroundTheClockState,
    ATCPlayerProgress,
    build_sequence,
    hit_strength,
)
from .roulette import (
    DartRouletteGame,
    RouletteSettings,
    RouletteState,
    RoulettePhase,
    RoulettePlayer,
    RouletteResult,
    HitType,
    Penalty,
)
from .killer import (
    KillerGame,
    KillerSettings,
    KillerState,
    KillerPlayer,
    KillerOutcome,
    assign_numbers,
    board_distance,
    hit_value,
)
from .tournament import (
    RoundRobinTournament,
    TournamentMatch,
    PlayerStanding,
    generate_schedule,
)
from .player import Roster
from .config_loader import (
    load_game_settings,
    build_x01_settings,
    build_around_the_clock_settings,
    build_roulette_settings,
    build_killer_settings,
)
from .session import GameSession

__all__ = [
    "Trigger",
    # Turns
    "TurnPhase",
    "TurnStateMachine",
    # Checkout
    "checkout_suggestions",
    "suggest_checkout",
    "format_checkout",
    # Modes
    "GameMode",
    "GameStateBase",
    "X01Game",
    "X01Settings",
    "X01State",
    "X01PlayerStats",
    "AroundTheClockGame",
    "AroundTheClockSettings",
    "AroundTheClockState",
    "ATCPlayerProgress",
    "build_sequence",
    "hit_strength",
    "DartRouletteGame",
    "RouletteSettings",
    "RouletteState",
    "RoulettePhase",
    "RoulettePlayer",
    "RouletteResult",
    "HitType",
    "Penalty",
    "KillerGame",
    "KillerSettings",
    "KillerState",
    "KillerPlayer",
    "KillerOutcome",
    "assign_numbers",
    "board_distance",
    "hit_value",
    # Tournament
    "RoundRobinTournament",
    "TournamentMatch",
    "PlayerStanding",
    "generate_schedule",
    # Players
    "Roster",
    # Settings
    "load_game_settings",
    "build_x01_settings",
    "build_around_the_clock_settings",
    "build_roulette_settings",
    "build_killer_settings",
    # Session
    "GameSession",
]
