import json

import pytest
from apscheduler.jobstores.base import JobLookupError

from bingo_server.errors import TransportError
from bingo_server.hall import BingoHall
from bingo_server.models.settings_models import ServerSettings


class FakeConnection:
    """Records every frame sent to it, decoded."""

    def __init__(self):
        self.is_open = True
        self.frames = []

    def send_text(self, frame):
        if not self.is_open:
            raise TransportError("connection is closed")
        self.frames.append(json.loads(frame))

    def of_type(self, message_type):
        return [f for f in self.frames if f["type"] == message_type]

    def last(self):
        return self.frames[-1]


class BrokenConnection(FakeConnection):
    """Claims to be open but fails every send."""

    def send_text(self, frame):
        raise TransportError("socket reset")


class FakeScheduler:
    def __init__(self):
        self.jobs = {}
        self.removed = []

    def add_job(self, func, trigger, **kwargs):
        self.jobs[kwargs["id"]] = {"func": func, "trigger": trigger, **kwargs}

    def remove_job(self, job_id):
        if job_id not in self.jobs:
            raise JobLookupError(job_id)
        del self.jobs[job_id]
        self.removed.append(job_id)

    def start(self):
        pass

    def shutdown(self, wait=True):
        pass


@pytest.fixture()
def scheduler():
    return FakeScheduler()


@pytest.fixture()
def hall(scheduler):
    return BingoHall(ServerSettings(random_seed=7), scheduler=scheduler)


def send(hall, connection, **message):
    hall.dispatcher.dispatch(connection, json.dumps(message))


def register(hall, connection, name="A", stake=100, game_type="75ball", payment=0):
    """Register through the dispatcher and return (player_id, room_id)."""
    send(
        hall,
        connection,
        type="register_player",
        name=name,
        phone="0911000000",
        stake=stake,
        boardId=1,
        gameType=game_type,
        payment=payment,
    )
    connected = connection.of_type("player_connected")[-1]
    return connected["playerId"], connected["roomId"]
