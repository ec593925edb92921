"""
Player roster management.
"""
from dataclasses import dataclass, field
from typing import List, Optional
import logging
import uuid

from autocade.core import Player

logger = logging.getLogger(__name__)


@dataclass
class Roster:
    """Ordered list of players; games are started with the active ones."""
    players: List[Player] = field(default_factory=list)

    def add_player(self, name: str, player_id: Optional[str] = None) -> Player:
        """
        Add a player to the roster.

        Args:
            name: Player name
            player_id: Explicit id (generated when omitted)

        Returns:
            The created player
        """
        player = Player(id=player_id or uuid.uuid4().hex[:8], name=name)
        self.players.append(player)
        logger.info(f"Player added: {name} ({player.id})")
        return player

    def get(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def remove_player(self, player_id: str) -> bool:
        """
        Remove a player from the roster.

        Returns:
            True if removed, False if not found
        """
        player = self.get(player_id)
        if player is None:
            return False
        self.players.remove(player)
        logger.info(f"Player removed: {player.name}")
        return True

    def rename(self, player_id: str, name: str) -> bool:
        player = self.get(player_id)
        if player is None:
            return False
        player.name = name
        return True

    def set_active(self, player_id: str, active: bool) -> bool:
        player = self.get(player_id)
        if player is None:
            return False
        player.is_active = active
        logger.debug(f"{player.name} active={active}")
        return True

    def toggle_active(self, player_id: str) -> bool:
        player = self.get(player_id)
        return player is not None and self.set_active(player_id, not player.is_active)

    def active_players(self) -> List[Player]:
        return [p for p in self.players if p.is_active]
