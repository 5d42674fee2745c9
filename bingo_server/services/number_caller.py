import logging
from datetime import datetime, timedelta
from typing import Optional

import numpy as np
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from bingo_server.domain.bingo_rules import (
    display_number,
    draw_number,
    get_variant,
    recent_calls,
)
from bingo_server.errors import RangeExhaustedError
from bingo_server.manager import BroadcastManager
from bingo_server.matchmaker import RoomMatchmaker
from bingo_server.models.dc_models import NumberCalledModel, RangeExhaustedModel
from bingo_server.models.schema_models import CallingState
from bingo_server.services.payout import PayoutService

CALL_INTERVAL_SEC = 7.0
CALL_WARMUP_SEC = 1.0


class NumberCaller:
    """Per-room number calling driven by one scheduler job per room.

    A room is either idle or calling. The draw job re-checks that state when
    it fires, so a draw already queued at stop time changes nothing.
    """

    def __init__(
        self,
        scheduler: AsyncIOScheduler,
        matchmaker: RoomMatchmaker,
        broadcaster: BroadcastManager,
        payout: PayoutService,
        rng: Optional[np.random.Generator] = None,
        interval_sec: float = CALL_INTERVAL_SEC,
        warmup_sec: float = CALL_WARMUP_SEC,
    ):
        self.scheduler = scheduler
        self.matchmaker = matchmaker
        self.broadcaster = broadcaster
        self.payout = payout
        self.rng = rng if rng is not None else np.random.default_rng()
        self.interval_sec = interval_sec
        self.warmup_sec = warmup_sec

    def start_calling(self, room_id: Optional[str]) -> bool:
        """Arm the draw job of a room

        The first draw fires after the warm-up delay, then every interval.

        Args:
            room_id (Optional[str]): Room to start

        Returns:
            bool: False if the room is unknown or already calling
        """
        room = self.matchmaker.get_room(room_id)
        if room is None or room.is_calling:
            return False

        job_id = f"draw:{room.room_id}"
        self.scheduler.add_job(
            self._fire_draw,
            "interval",
            seconds=self.interval_sec,
            next_run_time=datetime.now() + timedelta(seconds=self.warmup_sec),
            args=[room.room_id],
            id=job_id,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        room.calling_state = CallingState.calling
        room.call_job_id = job_id
        logging.info(f"Started calling numbers in room {room.room_id}")
        return True

    def stop_calling(self, room_id: Optional[str]) -> bool:
        """Disarm the draw job of a room

        Returns:
            bool: False if the room is unknown or not calling
        """
        room = self.matchmaker.get_room(room_id)
        if room is None or not room.is_calling:
            return False

        room.calling_state = CallingState.idle
        job_id, room.call_job_id = room.call_job_id, None
        if job_id is not None:
            try:
                self.scheduler.remove_job(job_id)
            except JobLookupError:
                logging.debug(f"Draw job {job_id} was already gone")
        logging.info(f"Stopped calling numbers in room {room.room_id}")
        return True

    async def _fire_draw(self, room_id: str) -> None:
        # Coroutine job so the draw runs on the event loop thread.
        self.call_next_number(room_id)

    def call_next_number(self, room_id: str) -> Optional[int]:
        """Draw one unseen number for a calling room and broadcast it

        Args:
            room_id (str): Room to draw for

        Returns:
            Optional[int]: The number drawn, or None when nothing was drawn
        """
        room = self.matchmaker.get_room(room_id)
        if room is None or not room.is_calling:
            return None
        variant = get_variant(room.game_type)
        if variant is None:
            return None

        try:
            number = draw_number(self.rng, room.called_numbers, variant.number_range)
        except RangeExhaustedError:
            logging.info(f"Room {room_id} has called every number, stopping")
            self.stop_calling(room_id)
            self.broadcaster.broadcast_to_room(
                room_id,
                RangeExhaustedModel(
                    room_id=room_id, called_count=len(room.called_numbers)
                ),
            )
            return None

        room.called_numbers.append(number)
        room.current_number = number
        display_text = display_number(number, variant)
        logging.debug(f"Room {room_id} called {display_text}")

        self.broadcaster.broadcast_to_room(
            room_id,
            NumberCalledModel(
                number=number,
                display_text=display_text,
                called_numbers=recent_calls(room.called_numbers),
            ),
        )
        self.payout.check_for_winners(room)
        return number
