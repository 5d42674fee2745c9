import logging
from typing import Optional

from uuid6 import uuid7

from bingo_server.domain.bingo_rules import is_full_house, potential_win
from bingo_server.errors import NotFoundError, ValidationError
from bingo_server.manager import BroadcastManager
from bingo_server.matchmaker import RoomMatchmaker
from bingo_server.models.dc_models import (
    BalanceUpdatedModel,
    WinAnnouncedModel,
    WithdrawalProcessedModel,
)
from bingo_server.models.schema_models import GameRoomSchema, PlayerSchema
from bingo_server.session_registry import SessionRegistry

FULL_HOUSE_PATTERN = "full-house"
MIN_WITHDRAWAL = 25


def generate_transaction_id() -> str:
    return f"tx_{uuid7().hex}"


class PayoutService:
    """Validates wins and keeps the in-memory balance ledger."""

    def __init__(
        self,
        registry: SessionRegistry,
        matchmaker: RoomMatchmaker,
        broadcaster: BroadcastManager,
        min_withdrawal: int = MIN_WITHDRAWAL,
    ):
        self.registry = registry
        self.matchmaker = matchmaker
        self.broadcaster = broadcaster
        self.min_withdrawal = min_withdrawal

    def announce_win(
        self, player_id: Optional[str], room_id: Optional[str], pattern: Optional[str]
    ) -> int:
        """Pay out a win claimed by a player

        The claimed pattern is trusted as reported; it is not checked against
        the player's marked numbers.

        Args:
            player_id (Optional[str]): The claiming player
            room_id (Optional[str]): The room the player claims in
            pattern (Optional[str]): Pattern label reported by the client

        Raises:
            NotFoundError: Unknown player or room, or the player is not seated there

        Returns:
            int: Amount credited
        """
        player = self.registry.lookup(player_id)
        if player is None:
            raise NotFoundError("player", player_id)
        room = self.matchmaker.get_room(room_id)
        if room is None or player.player_id not in room.players:
            raise NotFoundError("room", room_id)
        return self._pay_out(player, room, pattern)

    def check_for_winners(self, room: GameRoomSchema) -> int:
        """Pay every player who has marked all numbers called so far

        Returns:
            int: Number of winners found
        """
        winners = 0
        for player in list(room.players.values()):
            if is_full_house(room.called_numbers, player.marked_numbers):
                self._pay_out(player, room, FULL_HOUSE_PATTERN)
                winners += 1
        return winners

    def _pay_out(
        self, player: PlayerSchema, room: GameRoomSchema, pattern: Optional[str]
    ) -> int:
        win_amount = potential_win(player.stake)
        player.won += win_amount
        player.balance += win_amount
        player.marked_numbers.clear()

        self.broadcaster.broadcast_to_room(
            room.room_id,
            WinAnnouncedModel(
                winner_name=player.name, pattern=pattern, win_amount=win_amount
            ),
        )
        self.broadcaster.send_personal_message(
            BalanceUpdatedModel(balance=player.balance, won=player.won),
            player.connection,
        )
        logging.info(f"Player {player.name} won {win_amount} with pattern {pattern}")
        return win_amount

    def withdraw(
        self,
        player_id: Optional[str],
        account: Optional[str],
        amount: Optional[int],
    ) -> WithdrawalProcessedModel:
        """Debit a player's balance

        Args:
            player_id (Optional[str]): The withdrawing player
            account (Optional[str]): Payout destination, informational only
            amount (Optional[int]): Amount to debit

        Raises:
            NotFoundError: Unknown player
            ValidationError: Missing account, amount below the minimum or above the balance

        Returns:
            WithdrawalProcessedModel: Receipt with the new balance
        """
        player = self.registry.lookup(player_id)
        if player is None:
            raise NotFoundError("player", player_id)
        if not account or amount is None or amount < self.min_withdrawal:
            raise ValidationError("Invalid withdrawal request")
        if amount > player.balance:
            raise ValidationError("Insufficient balance")

        player.balance -= amount
        logging.info(
            f"Player {player.name} withdrew {amount}, new balance: {player.balance}"
        )
        return WithdrawalProcessedModel(
            amount=amount,
            new_balance=player.balance,
            transaction_id=generate_transaction_id(),
        )
