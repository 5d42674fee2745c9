import asyncio
import json
import logging
from typing import Optional

from fastapi import WebSocket
from pydantic import BaseModel

from bingo_server.errors import TransportError
from bingo_server.matchmaker import RoomMatchmaker


def to_frame(message: BaseModel) -> str:
    """Serialize an outbound model into a text frame."""
    return json.dumps(message.model_dump(by_alias=True), ensure_ascii=False)


class ClientConnection:
    """Connection handle wrapping one accepted websocket.

    Frames are queued with ``send_text`` and written by ``pump``, so callers
    never suspend while sending.
    """

    def __init__(self, websocket: WebSocket, queue_size: int = 100):
        self.websocket = websocket
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self.is_open = True

    def send_text(self, frame: str) -> None:
        """Queue a frame for delivery

        Args:
            frame (str): Serialized message

        Raises:
            TransportError: The connection is closed or its outbox is full
        """
        if not self.is_open:
            raise TransportError("connection is closed")
        try:
            self.outbox.put_nowait(frame)
        except asyncio.QueueFull:
            raise TransportError("outbound queue is full")

    async def pump(self) -> None:
        """Write queued frames to the websocket in order until it fails."""
        while True:
            frame = await self.outbox.get()
            try:
                await self.websocket.send_text(frame)
            except Exception as e:
                logging.debug(f"Send failed, closing connection: {e}")
                self.is_open = False
                return

    def close(self) -> None:
        self.is_open = False


class BroadcastManager:
    def __init__(self, matchmaker: RoomMatchmaker):
        self.matchmaker = matchmaker

    def send_personal_message(self, message: BaseModel, connection) -> None:
        """Send a private message, dropping it if the connection cannot take it."""
        if connection is None or not connection.is_open:
            return
        try:
            connection.send_text(to_frame(message))
        except TransportError as e:
            logging.debug(f"Dropped private message: {e}")

    def broadcast_to_room(
        self,
        room_id: str,
        message: BaseModel,
        exclude_player_id: Optional[str] = None,
    ) -> None:
        """Deliver one event to every open connection in a room

        Args:
            room_id (str): Target room, silently skipped when it no longer exists
            message (BaseModel): Event to deliver, serialized once
            exclude_player_id (Optional[str]): Member that should not receive it
        """
        room = self.matchmaker.get_room(room_id)
        if room is None:
            return
        frame = to_frame(message)
        logging.debug(f"Broadcasting {message.type} to room: {room_id}")
        for player in list(room.players.values()):
            if player.player_id == exclude_player_id:
                continue
            connection = player.connection
            if connection is None or not connection.is_open:
                continue
            try:
                connection.send_text(frame)
            except TransportError as e:
                logging.debug(f"Dropped frame for player {player.player_id}: {e}")
