import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, PlainTextResponse

from bingo_server.domain.bingo_rules import GAME_VARIANTS
from bingo_server.hall import BingoHall
from bingo_server.models.dc_models import (
    PlayerInfoModel,
    RoomStatsModel,
    StatsModel,
    VariantModel,
)

rest_router = APIRouter()


class LandingPage:
    @staticmethod
    @rest_router.get("/", include_in_schema=False)
    @rest_router.get("/index.html", include_in_schema=False)
    async def index(request: Request):
        hall: BingoHall = request.app.state.hall
        page = Path(hall.settings.index_html_path)
        if page.is_file():
            return FileResponse(page, media_type="text/html")
        logging.debug(f"Landing page {page} not found")
        return PlainTextResponse("Bingo server is running")


class StatsAPI:
    @staticmethod
    @rest_router.get("/api/stats", response_model=StatsModel)
    async def get_stats(request: Request) -> StatsModel:
        hall: BingoHall = request.app.state.hall
        rooms = hall.matchmaker.rooms()
        return StatsModel(
            total_players=len(hall.registry),
            total_rooms=len(rooms),
            rooms=[
                RoomStatsModel(
                    id=room.room_id,
                    game_type=room.game_type,
                    player_count=len(room.players),
                    is_calling=room.is_calling,
                    game_active=room.game_active,
                )
                for room in rooms
            ],
        )

    @staticmethod
    @rest_router.get("/api/players", response_model=List[PlayerInfoModel])
    async def get_players(request: Request) -> List[PlayerInfoModel]:
        hall: BingoHall = request.app.state.hall
        return [
            PlayerInfoModel(
                id=player.player_id,
                name=player.name,
                phone=player.phone,
                stake=player.stake,
                balance=player.balance,
                won=player.won,
                room_id=player.room_id,
            )
            for player in hall.registry.players()
        ]

    @staticmethod
    @rest_router.get("/api/variants", response_model=List[VariantModel])
    async def get_variants() -> List[VariantModel]:
        return [
            VariantModel(
                variant_id=variant.variant_id,
                name=variant.name,
                number_range=variant.number_range,
                lettered=variant.lettered,
            )
            for variant in GAME_VARIANTS.values()
        ]
