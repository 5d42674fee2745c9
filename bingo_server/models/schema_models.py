from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field


class CallingState(str, Enum):
    idle = "idle"  # no draw job armed
    calling = "calling"  # draw job armed, numbers are being called


class PlayerSchema(BaseModel):
    player_id: str
    name: str
    phone: str
    stake: int
    board_id: int
    game_type: str
    payment: int
    balance: int
    won: int = 0
    room_id: Optional[str] = None
    marked_numbers: Set[int] = Field(default_factory=set)
    connection: Any = Field(default=None, exclude=True)


class GameRoomSchema(BaseModel):
    room_id: str
    game_type: str
    players: Dict[str, PlayerSchema] = Field(default_factory=dict)
    called_numbers: List[int] = Field(default_factory=list)
    current_number: Optional[int] = None
    calling_state: CallingState = CallingState.idle
    call_job_id: Optional[str] = None
    game_active: bool = True

    @property
    def is_calling(self) -> bool:
        return self.calling_state == CallingState.calling
