import math

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional, Type


class WireModel(BaseModel):
    """Frames travel with camelCase keys, attributes stay snake_case."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True


# ---- Inbound (client -> server) ---------------------------------------------


class RegisterPlayerModel(WireModel):
    type: Literal["register_player"] = "register_player"
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    stake: int = Field(gt=0)
    game_type: str = Field(min_length=1)
    board_id: Optional[int] = None
    payment: Optional[int] = None

    @field_validator("board_id", "payment", mode="before")
    @classmethod
    def parse_optional_int(cls, value):
        """Unparseable or negative values fall back to the registry defaults."""
        if value is None or isinstance(value, bool):
            return None
        try:
            number = math.trunc(float(str(value).strip()))
        except (TypeError, ValueError, OverflowError):
            return None
        return number if number >= 0 else None


class MarkNumberModel(WireModel):
    type: Literal["mark_number"] = "mark_number"
    player_id: Optional[str] = None
    room_id: Optional[str] = None
    number: Optional[int] = None


class AnnounceWinModel(WireModel):
    type: Literal["announce_win"] = "announce_win"
    player_id: Optional[str] = None
    room_id: Optional[str] = None
    pattern: Optional[str] = None


class StartCallingModel(WireModel):
    type: Literal["start_calling"] = "start_calling"
    room_id: Optional[str] = None


class StopCallingModel(WireModel):
    type: Literal["stop_calling"] = "stop_calling"
    room_id: Optional[str] = None


class GetGameStateModel(WireModel):
    type: Literal["get_game_state"] = "get_game_state"
    player_id: Optional[str] = None
    room_id: Optional[str] = None


class WithdrawModel(WireModel):
    type: Literal["withdraw"] = "withdraw"
    player_id: Optional[str] = None
    room_id: Optional[str] = None
    account: Optional[str] = None
    amount: Optional[int] = None


INBOUND_MODELS: Dict[str, Type[WireModel]] = {
    "register_player": RegisterPlayerModel,
    "mark_number": MarkNumberModel,
    "announce_win": AnnounceWinModel,
    "start_calling": StartCallingModel,
    "stop_calling": StopCallingModel,
    "get_game_state": GetGameStateModel,
    "withdraw": WithdrawModel,
}


# ---- Outbound (server -> client/room) ---------------------------------------


class PlayerEntryModel(WireModel):
    id: str
    name: str
    stake: int


class PlayerRefModel(WireModel):
    id: str
    name: str


class PlayerConnectedModel(WireModel):
    type: Literal["player_connected"] = "player_connected"
    player_id: str
    room_id: str


class PlayerJoinedModel(WireModel):
    type: Literal["player_joined"] = "player_joined"
    players: List[PlayerEntryModel]


class PlayerLeftModel(WireModel):
    type: Literal["player_left"] = "player_left"
    player_id: str
    players: List[PlayerRefModel]


class NumberMarkedModel(WireModel):
    type: Literal["number_marked"] = "number_marked"
    player_id: str
    number: int


class NumberCalledModel(WireModel):
    type: Literal["number_called"] = "number_called"
    number: int
    display_text: str
    called_numbers: List[int]  # most recent calls only


class RangeExhaustedModel(WireModel):
    type: Literal["range_exhausted"] = "range_exhausted"
    room_id: str
    called_count: int


class WinAnnouncedModel(WireModel):
    type: Literal["win_announced"] = "win_announced"
    winner_name: str
    pattern: Optional[str] = None
    win_amount: int


class BalanceUpdatedModel(WireModel):
    type: Literal["balance_updated"] = "balance_updated"
    balance: int
    won: int


class WithdrawalProcessedModel(WireModel):
    type: Literal["withdrawal_processed"] = "withdrawal_processed"
    amount: int
    new_balance: int
    transaction_id: str


class GameStateDataModel(WireModel):
    called_numbers: List[int]
    current_number: Optional[str] = None
    is_calling: bool
    game_active: bool
    players_count: int


class GameStateModel(WireModel):
    type: Literal["game_state"] = "game_state"
    state: GameStateDataModel


class ErrorModel(WireModel):
    type: Literal["error"] = "error"
    message: str


# ---- HTTP (read-only) -------------------------------------------------------


class RoomStatsModel(WireModel):
    id: str
    game_type: str
    player_count: int
    is_calling: bool
    game_active: bool


class StatsModel(WireModel):
    total_players: int
    total_rooms: int
    rooms: List[RoomStatsModel]


class PlayerInfoModel(WireModel):
    id: str
    name: str
    phone: str
    stake: int
    balance: int
    won: int
    room_id: Optional[str] = None


class VariantModel(WireModel):
    variant_id: str = Field(alias="id")
    name: str
    number_range: int = Field(alias="range")
    lettered: bool
