import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from bingo_server.hall import BingoHall
from bingo_server.models.settings_models import ServerSettings
from bingo_server.routers import game, restapi

logging.basicConfig(level=ServerSettings().log_level)


def create_app(settings: Optional[ServerSettings] = None) -> FastAPI:
    """Build the ASGI app with its own rooms, players and scheduler."""
    settings = settings or ServerSettings()
    hall = BingoHall(settings)

    @asynccontextmanager
    async def lifespan(app):
        """Start the draw scheduler with the server and stop it on shutdown."""
        hall.scheduler.start()
        logging.info("Start Server")
        try:
            yield
        finally:
            hall.scheduler.shutdown(wait=False)
            logging.info("Stop Server")

    app = FastAPI(lifespan=lifespan)
    app.state.hall = hall
    app.include_router(game.game_router)
    app.include_router(restapi.rest_router)
    return app


app = create_app()


def run():
    settings = ServerSettings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
