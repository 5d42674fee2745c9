import logging
from typing import Optional

from bingo_server.domain.bingo_rules import display_number, get_variant
from bingo_server.errors import NotFoundError
from bingo_server.manager import BroadcastManager
from bingo_server.matchmaker import RoomMatchmaker
from bingo_server.models.dc_models import (
    GameStateDataModel,
    GameStateModel,
    NumberMarkedModel,
    PlayerConnectedModel,
    PlayerEntryModel,
    PlayerJoinedModel,
    PlayerLeftModel,
    PlayerRefModel,
    RegisterPlayerModel,
)
from bingo_server.models.schema_models import PlayerSchema
from bingo_server.services.number_caller import NumberCaller
from bingo_server.session_registry import SessionRegistry


class LobbyService:
    """Player lifecycle: registration, marks, state queries and disconnects."""

    def __init__(
        self,
        registry: SessionRegistry,
        matchmaker: RoomMatchmaker,
        broadcaster: BroadcastManager,
        caller: NumberCaller,
    ):
        self.registry = registry
        self.matchmaker = matchmaker
        self.broadcaster = broadcaster
        self.caller = caller

    def register_player(self, connection, profile: RegisterPlayerModel) -> PlayerSchema:
        """Register a player, seat them in a room and announce them

        Args:
            connection: Handle the registration arrived on
            profile (RegisterPlayerModel): Registration payload

        Raises:
            ValidationError: The registration payload is incomplete

        Returns:
            PlayerSchema: The seated player
        """
        player = self.registry.register(connection, profile)
        room_id = self.matchmaker.assign(player.game_type)
        room = self.matchmaker.join(room_id, player)

        self.broadcaster.send_personal_message(
            PlayerConnectedModel(player_id=player.player_id, room_id=room_id),
            connection,
        )
        self.broadcaster.broadcast_to_room(
            room_id,
            PlayerJoinedModel(
                players=[
                    PlayerEntryModel(id=p.player_id, name=p.name, stake=p.stake)
                    for p in room.players.values()
                ]
            ),
            exclude_player_id=player.player_id,
        )
        logging.info(f"Player {player.name} joined room {room_id}")
        return player

    def mark_number(
        self, player_id: Optional[str], room_id: Optional[str], number: Optional[int]
    ) -> None:
        player = self.registry.lookup(player_id)
        if player is None or player.room_id != room_id:
            raise NotFoundError("player", player_id)
        if number is None:
            return

        player.marked_numbers.add(number)
        self.broadcaster.broadcast_to_room(
            room_id,
            NumberMarkedModel(player_id=player.player_id, number=number),
            exclude_player_id=player.player_id,
        )

    def game_state(
        self, player_id: Optional[str], room_id: Optional[str]
    ) -> GameStateModel:
        """Snapshot of a room for one of its players

        Raises:
            NotFoundError: Unknown player or room
        """
        player = self.registry.lookup(player_id)
        if player is None:
            raise NotFoundError("player", player_id)
        room = self.matchmaker.get_room(room_id)
        if room is None:
            raise NotFoundError("room", room_id)

        current_number = None
        variant = get_variant(room.game_type)
        if room.current_number is not None and variant is not None:
            current_number = display_number(room.current_number, variant)
        return GameStateModel(
            state=GameStateDataModel(
                called_numbers=list(room.called_numbers),
                current_number=current_number,
                is_calling=room.is_calling,
                game_active=room.game_active,
                players_count=len(room.players),
            )
        )

    def disconnect(self, connection) -> Optional[PlayerSchema]:
        """Remove the player behind a lost connection

        The room is told who left; an emptied room has its draw job
        cancelled and is destroyed.

        Returns:
            Optional[PlayerSchema]: The removed player, if the connection had one
        """
        player = self.registry.lookup_by_connection(connection)
        if player is None:
            return None

        room_id = player.room_id
        room = self.matchmaker.leave(room_id, player.player_id) if room_id else None
        if room is not None:
            self.broadcaster.broadcast_to_room(
                room_id,
                PlayerLeftModel(
                    player_id=player.player_id,
                    players=[
                        PlayerRefModel(id=p.player_id, name=p.name)
                        for p in room.players.values()
                    ],
                ),
            )
            if not room.players:
                self.caller.stop_calling(room_id)
                self.matchmaker.remove_room(room_id)

        self.registry.remove(player.player_id)
        return player
