import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from bingo_server.hall import BingoHall
from bingo_server.manager import ClientConnection

game_router = APIRouter()


class GameSocket:
    @staticmethod
    @game_router.websocket("/ws")
    async def connect(websocket: WebSocket):
        """Accept a client and feed its frames to the dispatcher

        Args:
            websocket (WebSocket): Connector with the connected client
        """
        hall: BingoHall = websocket.app.state.hall
        await websocket.accept()
        connection = ClientConnection(websocket, hall.settings.outbound_queue_size)
        writer = asyncio.create_task(connection.pump())
        logging.info("New WebSocket connection")

        try:
            while True:
                raw = await websocket.receive_text()
                hall.dispatcher.dispatch(connection, raw)
        except WebSocketDisconnect:
            logging.info("WebSocket closed")
        except Exception as e:
            logging.error(f"WebSocket error: {e}")
        finally:
            connection.close()
            hall.dispatcher.disconnect(connection)
            writer.cancel()
