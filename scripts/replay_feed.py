"""
Replay a recorded board feed through a game.

Loads a YAML recording of board snapshots, feeds it through the reconciler
and the selected game mode, and prints triggers and the final standings.
Without a recording, plays a short simulated X01 turn.

Usage:
    python scripts/replay_feed.py recordings/match.yaml --game x01 --players Alice Bob
    python scripts/replay_feed.py recordings/atc.yaml --game atc --config config/default_config.yaml
    python scripts/replay_feed.py --demo --record recordings/demo.yaml
"""
import argparse
import logging
from pathlib import Path

import numpy as np

from autocade.feed import FeedSimulator, load_recording, save_recording
from autocade.game import (
    AroundTheClockGame,
    DartRouletteGame,
    GameSession,
    KillerGame,
    KillerState,
    Roster,
    X01Game,
    build_around_the_clock_settings,
    build_killer_settings,
    build_roulette_settings,
    build_x01_settings,
    load_game_settings,
)

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_mode(game: str, settings: dict, seed):
    rng = np.random.default_rng(seed)

    if game == "x01":
        return X01Game(build_x01_settings(settings), rng=rng)
    if game == "atc":
        return AroundTheClockGame(build_around_the_clock_settings(settings), rng=rng)
    if game == "killer":
        return KillerGame(build_killer_settings(settings), rng=rng)
    return DartRouletteGame(build_roulette_settings(settings), rng=rng)


def demo_snapshots():
    """One X01 turn: T20, T20, T20, takeout."""
    sim = FeedSimulator()
    snapshots = [sim.throw("T20"), sim.throw("T20"), sim.throw("T20")]
    snapshots.extend(sim.takeout())
    return snapshots


def print_summary(session: GameSession) -> None:
    state = session.state
    print("\n" + "=" * 50)
    print(f"GAME: {session.mode.get_name()}")
    print("=" * 50)

    names = {p.id: p.name for p in session.players}
    if hasattr(state, "remaining"):
        for pid, remaining in state.remaining.items():
            stats = state.stats[pid]
            print(f"  {names[pid]:<12} {remaining:>4} left   avg {stats.three_dart_average:6.2f}")
    elif hasattr(state, "progress"):
        for pid, progress in state.progress.items():
            print(
                f"  {names[pid]:<12} {len(progress.targets_hit):>2}/{len(state.sequence)} targets"
                f"   accuracy {progress.accuracy:.0%}"
            )
    elif isinstance(state, KillerState):
        for player in state.standings():
            status = "killer" if player.is_killer else f"charge {player.charge}"
            print(f"  {player.name:<12} #{player.number:<3} {player.lives} lives   {status}")
    else:
        for player in state.standings():
            print(f"  {player.name:<12} {player.score:>2} points   targeted {player.times_targeted}x")

    if state.winner_id:
        print(f"\nWinner: {names[state.winner_id]}")
    print("=" * 50)


def main():
    parser = argparse.ArgumentParser(description="Replay a board feed recording")
    parser.add_argument("recording", nargs="?", type=Path, help="YAML recording of snapshots")
    parser.add_argument("--game", choices=["x01", "atc", "killer", "roulette"], default="x01")
    parser.add_argument("--config", type=Path, default=None, help="Game settings YAML")
    parser.add_argument("--players", nargs="+", default=["Player 1", "Player 2"])
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--demo", action="store_true", help="Use a simulated feed")
    parser.add_argument("--record", type=Path, default=None, help="Save the replayed feed here")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.recording and not args.demo:
        snapshots = load_recording(args.recording)
    else:
        snapshots = demo_snapshots()

    roster = Roster()
    for name in args.players:
        roster.add_player(name)

    mode = build_mode(args.game, load_game_settings(args.config), args.seed)
    session = GameSession(mode, roster.active_players())
    session.add_listener(lambda trigger, state: print(f"  >> {trigger.value}"))

    for snapshot in snapshots:
        if args.game == "roulette":
            # Spin and open the aim phase before every dart
            while session.state.phase.value in ("lobby", "result", "spin"):
                session.advance()
        session.feed(snapshot)

    print_summary(session)

    if args.record:
        save_recording(args.record, snapshots, note=f"game: {args.game}, players: {', '.join(args.players)}")


if __name__ == "__main__":
    main()
