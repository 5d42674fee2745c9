import logging
from typing import Dict, List, Optional

from uuid6 import uuid7

from bingo_server.domain.bingo_rules import get_variant
from bingo_server.errors import ValidationError
from bingo_server.models.dc_models import RegisterPlayerModel
from bingo_server.models.schema_models import PlayerSchema


def generate_player_id() -> str:
    """Time-ordered id, unique within the process lifetime."""
    return f"player_{uuid7().hex}"


class SessionRegistry:
    """Maps player ids to player records and their connection handles.

    Access contract: only called from the event loop thread, so no locking.
    """

    def __init__(self):
        self._players: Dict[str, PlayerSchema] = {}

    def register(self, connection, profile: RegisterPlayerModel) -> PlayerSchema:
        """Create a player record for a connection

        Args:
            connection: Handle used to reach the player
            profile (RegisterPlayerModel): Registration payload

        Raises:
            ValidationError: A required field is missing or invalid, or the
                connection already has a player

        Returns:
            PlayerSchema: The new player, not yet seated in a room
        """
        if not profile.name or not profile.phone or not profile.game_type:
            raise ValidationError("Missing required registration data")
        if profile.stake is None or profile.stake <= 0:
            raise ValidationError("Missing required registration data")
        if get_variant(profile.game_type) is None:
            raise ValidationError(f"Unknown game type: {profile.game_type}")
        if self.lookup_by_connection(connection) is not None:
            raise ValidationError("Player already registered on this connection")

        payment = profile.payment or 0
        player = PlayerSchema(
            player_id=generate_player_id(),
            name=profile.name,
            phone=profile.phone,
            stake=profile.stake,
            board_id=profile.board_id or 1,
            game_type=profile.game_type,
            payment=payment,
            balance=payment,
            connection=connection,
        )
        self._players[player.player_id] = player
        return player

    def lookup(self, player_id: Optional[str]) -> Optional[PlayerSchema]:
        if player_id is None:
            return None
        return self._players.get(player_id)

    def lookup_by_connection(self, connection) -> Optional[PlayerSchema]:
        # Linear scan; player counts per process are small.
        for player in self._players.values():
            if player.connection is connection:
                return player
        return None

    def remove(self, player_id: str) -> None:
        player = self._players.pop(player_id, None)
        if player is not None:
            logging.info(f"Player {player.name} disconnected")

    def players(self) -> List[PlayerSchema]:
        return list(self._players.values())

    def __len__(self) -> int:
        return len(self._players)
