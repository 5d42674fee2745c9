from typing import Optional

import numpy as np
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from bingo_server.dispatcher import MessageDispatcher
from bingo_server.manager import BroadcastManager
from bingo_server.matchmaker import RoomMatchmaker
from bingo_server.models.settings_models import ServerSettings
from bingo_server.services.lobby import LobbyService
from bingo_server.services.number_caller import NumberCaller
from bingo_server.services.payout import PayoutService
from bingo_server.session_registry import SessionRegistry


class BingoHall:
    """Wires the room orchestration components together for one process."""

    def __init__(
        self,
        settings: ServerSettings,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.settings = settings
        self.scheduler = scheduler if scheduler is not None else AsyncIOScheduler()
        self.registry = SessionRegistry()
        self.matchmaker = RoomMatchmaker(capacity=settings.room_capacity)
        self.broadcaster = BroadcastManager(self.matchmaker)
        self.payout = PayoutService(
            self.registry,
            self.matchmaker,
            self.broadcaster,
            min_withdrawal=settings.min_withdrawal,
        )
        self.caller = NumberCaller(
            self.scheduler,
            self.matchmaker,
            self.broadcaster,
            self.payout,
            rng=np.random.default_rng(settings.random_seed),
            interval_sec=settings.call_interval_sec,
            warmup_sec=settings.call_warmup_sec,
        )
        self.lobby = LobbyService(
            self.registry, self.matchmaker, self.broadcaster, self.caller
        )
        self.dispatcher = MessageDispatcher(
            self.lobby, self.caller, self.payout, self.broadcaster
        )
