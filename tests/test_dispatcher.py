from bingo_server.matchmaker import ROOM_CAPACITY
from tests.conftest import BrokenConnection, FakeConnection, register, send


def test_malformed_frames_get_private_error(hall):
    a, b = FakeConnection(), FakeConnection()
    register(hall, b, name="B")
    before = len(b.frames)

    hall.dispatcher.dispatch(a, "{not json")
    hall.dispatcher.dispatch(a, "[1, 2]")
    send(hall, a, type="shout")
    send(hall, a, number=4)
    send(hall, a, type="mark_number", number="four")

    assert [f["message"] for f in a.frames] == [
        "Invalid message format",
        "Invalid message format",
        "Unknown message type: shout",
        "Unknown message type: None",
        "Invalid message format",
    ]
    assert len(b.frames) == before


def test_register_with_missing_fields_is_rejected(hall):
    conn = FakeConnection()
    send(hall, conn, type="register_player", name="A", phone="0911", gameType="75ball")
    send(hall, conn, type="register_player", name="A", phone="0911", stake=0, gameType="75ball")
    send(hall, conn, type="register_player", name="A", phone="0911", stake=10, gameType="80ball")

    assert [f["message"] for f in conn.frames] == [
        "Missing required registration data",
        "Missing required registration data",
        "Unknown game type: 80ball",
    ]
    assert len(hall.registry) == 0
    assert len(hall.matchmaker) == 0


def test_first_registration_creates_room(hall):
    conn = FakeConnection()
    player_id, room_id = register(hall, conn, name="A", stake=100)

    assert conn.frames == [
        {"type": "player_connected", "playerId": player_id, "roomId": room_id}
    ]
    room = hall.matchmaker.get_room(room_id)
    assert list(room.players) == [player_id]
    assert room.game_type == "75ball"


def test_second_registration_is_announced_to_room(hall):
    a, b = FakeConnection(), FakeConnection()
    a_id, room_a = register(hall, a, name="A", stake=100)
    b_id, room_b = register(hall, b, name="B", stake=50)

    assert room_a == room_b
    assert a.of_type("player_joined") == [
        {
            "type": "player_joined",
            "players": [
                {"id": a_id, "name": "A", "stake": 100},
                {"id": b_id, "name": "B", "stake": 50},
            ],
        }
    ]
    assert b.of_type("player_joined") == []


def test_91st_registration_opens_second_room(hall):
    rooms = [register(hall, FakeConnection(), name=f"P{i}")[1] for i in range(ROOM_CAPACITY + 1)]

    assert len(set(rooms[:ROOM_CAPACITY])) == 1
    assert rooms[ROOM_CAPACITY] != rooms[0]
    assert len(hall.matchmaker.get_room(rooms[0]).players) == ROOM_CAPACITY


def test_mark_number_is_shared_with_room(hall):
    a, b = FakeConnection(), FakeConnection()
    a_id, room_id = register(hall, a, name="A")
    register(hall, b, name="B")

    send(hall, a, type="mark_number", playerId=a_id, roomId=room_id, number=12)
    send(hall, a, type="mark_number", playerId=a_id, roomId="room_other", number=13)

    assert hall.registry.lookup(a_id).marked_numbers == {12}
    assert b.of_type("number_marked") == [
        {"type": "number_marked", "playerId": a_id, "number": 12}
    ]
    assert a.of_type("number_marked") == []


def test_get_game_state(hall):
    conn = FakeConnection()
    player_id, room_id = register(hall, conn, game_type="75ball")
    hall.caller.start_calling(room_id)
    number = hall.caller.call_next_number(room_id)

    send(hall, conn, type="get_game_state", playerId=player_id, roomId=room_id)

    state = conn.last()
    assert state["type"] == "game_state"
    assert state["state"]["calledNumbers"] == [number]
    assert state["state"]["currentNumber"].endswith(f"-{number}")
    assert state["state"]["isCalling"] is True
    assert state["state"]["gameActive"] is True
    assert state["state"]["playersCount"] == 1


def test_get_game_state_before_any_draw(hall):
    conn = FakeConnection()
    player_id, room_id = register(hall, conn)

    send(hall, conn, type="get_game_state", playerId=player_id, roomId=room_id)

    assert conn.last()["state"]["currentNumber"] is None
    assert conn.last()["state"]["isCalling"] is False


def test_disconnect_announces_player_left(hall):
    a, b = FakeConnection(), FakeConnection()
    a_id, room_id = register(hall, a, name="A")
    b_id, _ = register(hall, b, name="B")

    hall.dispatcher.disconnect(b)

    assert a.of_type("player_left") == [
        {"type": "player_left", "playerId": b_id, "players": [{"id": a_id, "name": "A"}]}
    ]
    assert hall.registry.lookup(b_id) is None
    assert room_id in hall.matchmaker


def test_disconnect_of_last_player_cancels_timer_and_room(hall, scheduler):
    conn = FakeConnection()
    player_id, room_id = register(hall, conn)
    hall.caller.start_calling(room_id)

    hall.dispatcher.disconnect(conn)

    assert scheduler.jobs == {}
    assert room_id not in hall.matchmaker
    assert hall.registry.lookup(player_id) is None
    assert hall.caller.call_next_number(room_id) is None


def test_disconnect_of_unknown_connection_is_noop(hall):
    hall.dispatcher.disconnect(FakeConnection())
    assert len(hall.matchmaker) == 0


def test_broken_connection_does_not_block_others(hall):
    broken, healthy = BrokenConnection(), FakeConnection()
    send(hall, broken, type="register_player", name="X", phone="1", stake=10, gameType="75ball")
    _, room_id = register(hall, healthy, name="Y")
    hall.caller.start_calling(room_id)

    number = hall.caller.call_next_number(room_id)

    assert healthy.of_type("number_called")[-1]["number"] == number


def test_closed_connections_are_skipped(hall):
    a, b = FakeConnection(), FakeConnection()
    _, room_id = register(hall, a, name="A")
    register(hall, b, name="B")
    b.is_open = False
    before = len(b.frames)
    hall.caller.start_calling(room_id)

    hall.caller.call_next_number(room_id)

    assert len(b.frames) == before
    assert len(a.of_type("number_called")) == 1


def test_second_registration_on_same_connection_is_rejected(hall, scheduler):
    conn = FakeConnection()
    player_id, room_id = register(hall, conn, name="A", game_type="75ball")

    send(hall, conn, type="register_player", name="A2", phone="0911", stake=10, gameType="90ball")

    assert conn.last() == {
        "type": "error",
        "message": "Player already registered on this connection",
    }
    assert len(hall.registry) == 1
    assert len(hall.matchmaker) == 1

    hall.caller.start_calling(room_id)
    hall.dispatcher.disconnect(conn)

    assert len(hall.registry) == 0
    assert len(hall.matchmaker) == 0
    assert scheduler.jobs == {}
    assert hall.registry.lookup(player_id) is None


def test_register_with_unparseable_board_and_payment_uses_defaults(hall):
    conn = FakeConnection()
    send(
        hall,
        conn,
        type="register_player",
        name="A",
        phone="0911",
        stake=10,
        gameType="75ball",
        boardId="first",
        payment="12.75",
    )
    player_id = conn.of_type("player_connected")[-1]["playerId"]
    player = hall.registry.lookup(player_id)
    assert player.board_id == 1
    assert player.balance == 12

    other = FakeConnection()
    send(
        hall,
        other,
        type="register_player",
        name="B",
        phone="0911",
        stake=10,
        gameType="75ball",
        boardId=2.5,
        payment="cash",
    )
    other_player = hall.registry.lookup(other.of_type("player_connected")[-1]["playerId"])
    assert other_player.board_id == 2
    assert other_player.balance == 0
