"""
Round-robin tournament: every player meets every other player once.

Pairings come from the circle method on a randomly seeded player list
(a bye fills in for odd player counts), then get reordered so nobody
plays two matches back to back when that can be avoided. Match results
are entered one at a time in schedule order.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import logging

import numpy as np

from autocade.core import Player

logger = logging.getLogger(__name__)

BYE = None


@dataclass
class TournamentMatch:
    id: str
    player1_id: str
    player2_id: str
    round: int
    winner_id: Optional[str] = None
    played: bool = False

    @property
    def player_ids(self) -> Tuple[str, str]:
        return self.player1_id, self.player2_id

    def loser_id(self) -> Optional[str]:
        if self.winner_id is None:
            return None
        return self.player2_id if self.winner_id == self.player1_id else self.player1_id


@dataclass
class PlayerStanding:
    player_id: str
    player_name: str
    points: int = 0
    wins: int = 0
    losses: int = 0
    matches_played: int = 0


def _order_matches(matches: List[TournamentMatch]) -> List[TournamentMatch]:
    """Greedy reorder: prefer a match sharing no player with the previous one."""
    remaining = list(matches)
    ordered: List[TournamentMatch] = []

    while remaining:
        pick = 0
        if ordered:
            busy = set(ordered[-1].player_ids)
            for i, match in enumerate(remaining):
                if not busy.intersection(match.player_ids):
                    pick = i
                    break
        ordered.append(remaining.pop(pick))

    return ordered


def generate_schedule(
        players: Sequence[Player],
        rng: Optional[np.random.Generator] = None
) -> List[TournamentMatch]:
    """
    Circle-method schedule for a single round robin.

    Args:
        players: Tournament entrants
        rng: Random generator for the seeding

    Returns:
        Matches in play order (empty for fewer than two players)
    """
    if len(players) < 2:
        return []

    rng = rng or np.random.default_rng()
    seeded: List[Optional[str]] = [players[i].id for i in rng.permutation(len(players))]
    if len(seeded) % 2:
        seeded.append(BYE)

    n = len(seeded)
    matches: List[TournamentMatch] = []

    # Seat 0 stays put, the other n - 1 seats rotate one step per round
    for rnd in range(n - 1):
        for m in range(n // 2):
            if m == 0:
                a, b = 0, (n - 1 - rnd) or (n - 1)
            else:
                a = (rnd + m) % (n - 1) or (n - 1)
                b = (rnd + n - 1 - m) % (n - 1) or (n - 1)

            p1, p2 = seeded[a], seeded[b]
            if p1 is BYE or p2 is BYE:
                continue
            matches.append(TournamentMatch(
                id=f"match-{rnd}-{m}",
                player1_id=p1,
                player2_id=p2,
                round=rnd + 1,
            ))

    return _order_matches(matches)


@dataclass
class RoundRobinTournament:
    """
    Schedule plus standings of one round robin.

    Results are entered for the current match only; each win is worth
    one point.
    """
    matches: List[TournamentMatch] = field(default_factory=list)
    standings: Dict[str, PlayerStanding] = field(default_factory=dict)
    current_match_index: int = 0

    @classmethod
    def create(
            cls,
            players: Sequence[Player],
            rng: Optional[np.random.Generator] = None
    ) -> "RoundRobinTournament":
        tournament = cls(
            matches=generate_schedule(players, rng),
            standings={p.id: PlayerStanding(player_id=p.id, player_name=p.name) for p in players},
        )
        logger.info(
            f"Round robin with {len(players)} players: "
            f"{len(tournament.matches)} matches over {tournament.rounds} rounds"
        )
        return tournament

    @property
    def rounds(self) -> int:
        return max((m.round for m in self.matches), default=0)

    @property
    def is_complete(self) -> bool:
        return self.current_match_index >= len(self.matches)

    @property
    def current_match(self) -> Optional[TournamentMatch]:
        if self.is_complete:
            return None
        return self.matches[self.current_match_index]

    def current_match_players(self, players: Sequence[Player]) -> Optional[Tuple[Player, Player]]:
        """Roster entries of the two players due on the board."""
        match = self.current_match
        if match is None:
            return None
        by_id = {p.id: p for p in players}
        p1, p2 = by_id.get(match.player1_id), by_id.get(match.player2_id)
        if p1 is None or p2 is None:
            logger.warning(f"Players of {match.id} not in roster")
            return None
        return p1, p2

    def record_result(self, winner_id: str) -> bool:
        """
        Enter the winner of the current match and move on.

        Returns:
            False if there is no match to record or `winner_id` is not in it
        """
        match = self.current_match
        if match is None or match.played:
            logger.warning("No open match to record")
            return False
        if winner_id not in match.player_ids:
            logger.warning(f"{winner_id} is not playing {match.id}")
            return False

        match.winner_id = winner_id
        match.played = True

        winner = self.standings[winner_id]
        winner.points += 1
        winner.wins += 1
        winner.matches_played += 1

        loser = self.standings[match.loser_id()]
        loser.losses += 1
        loser.matches_played += 1

        self.current_match_index += 1
        logger.info(f"{match.id}: {winner.player_name} beat {loser.player_name}")
        if self.is_complete:
            logger.info(f"Tournament complete, leader: {self.sorted_standings()[0].player_name}")
        return True

    def sorted_standings(self) -> List[PlayerStanding]:
        """Standings by points, then wins."""
        return sorted(self.standings.values(), key=lambda s: (s.points, s.wins), reverse=True)
