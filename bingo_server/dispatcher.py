import json
import logging
from typing import Callable, Dict

from pydantic import ValidationError as PydanticValidationError

from bingo_server.errors import NotFoundError, ProtocolError, ValidationError
from bingo_server.manager import BroadcastManager
from bingo_server.models.dc_models import (
    INBOUND_MODELS,
    AnnounceWinModel,
    ErrorModel,
    GetGameStateModel,
    MarkNumberModel,
    RegisterPlayerModel,
    StartCallingModel,
    StopCallingModel,
    WireModel,
    WithdrawModel,
)
from bingo_server.services.lobby import LobbyService
from bingo_server.services.number_caller import NumberCaller
from bingo_server.services.payout import PayoutService

# Reply text when a known message type fails validation.
INVALID_PAYLOAD_MESSAGES = {
    "register_player": "Missing required registration data",
    "withdraw": "Invalid withdrawal request",
}


class MessageDispatcher:
    """Single entry point for inbound frames and lost connections.

    Errors never leave this class: validation and protocol failures become a
    private ``error`` reply, unknown ids are ignored.
    """

    def __init__(
        self,
        lobby: LobbyService,
        caller: NumberCaller,
        payout: PayoutService,
        broadcaster: BroadcastManager,
    ):
        self.lobby = lobby
        self.caller = caller
        self.payout = payout
        self.broadcaster = broadcaster
        self._handlers: Dict[str, Callable] = {
            "register_player": self._register_player,
            "mark_number": self._mark_number,
            "announce_win": self._announce_win,
            "start_calling": self._start_calling,
            "stop_calling": self._stop_calling,
            "get_game_state": self._get_game_state,
            "withdraw": self._withdraw,
        }

    def decode(self, raw: str) -> WireModel:
        """Parse a text frame into its inbound model

        Args:
            raw (str): Frame received from the client

        Raises:
            ProtocolError: Not a JSON object, or an unknown type
            ValidationError: A registration or withdrawal with invalid fields

        Returns:
            WireModel: The decoded message
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            raise ProtocolError("Invalid message format")
        if not isinstance(data, dict):
            raise ProtocolError("Invalid message format")

        message_type = data.get("type")
        model = INBOUND_MODELS.get(message_type) if isinstance(message_type, str) else None
        if model is None:
            raise ProtocolError(f"Unknown message type: {message_type}")
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logging.debug(f"Rejected {message_type} payload: {e}")
            if message_type in INVALID_PAYLOAD_MESSAGES:
                raise ValidationError(INVALID_PAYLOAD_MESSAGES[message_type])
            raise ProtocolError("Invalid message format")

    def dispatch(self, connection, raw: str) -> None:
        try:
            message = self.decode(raw)
            self._handlers[message.type](connection, message)
        except NotFoundError as e:
            logging.debug(f"Ignored message: {e}")
        except (ValidationError, ProtocolError) as e:
            self.send_error(connection, str(e))
        except Exception:
            logging.exception("Unexpected error while handling message")
            self.send_error(connection, "Internal server error")

    def disconnect(self, connection) -> None:
        try:
            self.lobby.disconnect(connection)
        except Exception:
            logging.exception("Unexpected error while handling disconnect")

    def send_error(self, connection, text: str) -> None:
        self.broadcaster.send_personal_message(ErrorModel(message=text), connection)

    def _register_player(self, connection, message: RegisterPlayerModel) -> None:
        self.lobby.register_player(connection, message)

    def _mark_number(self, connection, message: MarkNumberModel) -> None:
        self.lobby.mark_number(message.player_id, message.room_id, message.number)

    def _announce_win(self, connection, message: AnnounceWinModel) -> None:
        self.payout.announce_win(message.player_id, message.room_id, message.pattern)

    def _start_calling(self, connection, message: StartCallingModel) -> None:
        self.caller.start_calling(message.room_id)

    def _stop_calling(self, connection, message: StopCallingModel) -> None:
        self.caller.stop_calling(message.room_id)

    def _get_game_state(self, connection, message: GetGameStateModel) -> None:
        state = self.lobby.game_state(message.player_id, message.room_id)
        self.broadcaster.send_personal_message(state, connection)

    def _withdraw(self, connection, message: WithdrawModel) -> None:
        receipt = self.payout.withdraw(message.player_id, message.account, message.amount)
        self.broadcaster.send_personal_message(receipt, connection)
