import logging
from typing import Dict, List, Optional

from uuid6 import uuid7

from bingo_server.models.schema_models import GameRoomSchema, PlayerSchema

ROOM_CAPACITY = 90


def generate_room_id() -> str:
    return f"room_{uuid7().hex}"


class RoomMatchmaker:
    """Owns the room table.

    Access contract: only called from the event loop thread, so no locking.
    A multi-threaded host would need one lock per room.
    """

    def __init__(self, capacity: int = ROOM_CAPACITY):
        self.capacity = capacity
        self._rooms: Dict[str, GameRoomSchema] = {}

    def assign(self, game_type: str) -> str:
        """Return the first open room of the variant, creating one if needed

        Rooms are scanned in creation order, so the choice is deterministic
        for a given history.

        Args:
            game_type (str): Variant id the player registered for

        Returns:
            str: The room id the player should join
        """
        for room_id, room in self._rooms.items():
            if room.game_type == game_type and len(room.players) < self.capacity:
                return room_id

        room = GameRoomSchema(room_id=generate_room_id(), game_type=game_type)
        self._rooms[room.room_id] = room
        logging.info(f"Created new room {room.room_id} for game type {game_type}")
        return room.room_id

    def get_room(self, room_id: Optional[str]) -> Optional[GameRoomSchema]:
        if room_id is None:
            return None
        return self._rooms.get(room_id)

    def join(self, room_id: str, player: PlayerSchema) -> GameRoomSchema:
        room = self._rooms[room_id]
        room.players[player.player_id] = player
        player.room_id = room_id
        return room

    def leave(self, room_id: str, player_id: str) -> Optional[GameRoomSchema]:
        """Drop a member and return the room, or None if the room is gone."""
        room = self._rooms.get(room_id)
        if room is None:
            return None
        room.players.pop(player_id, None)
        return room

    def remove_room(self, room_id: str) -> None:
        if self._rooms.pop(room_id, None) is not None:
            logging.info(f"Room {room_id} removed (empty)")

    def rooms(self) -> List[GameRoomSchema]:
        return list(self._rooms.values())

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms
