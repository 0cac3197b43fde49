"""Authoritative room transitions for the real-time channel."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import RoomStoreError
from ..models.room import Room
from ..store.base import RoomStore
from ..websocket_manager import ConnectionManager
from .locks import RoomLocks
from .registry import Binding, SessionRegistry

logger = logging.getLogger(__name__)


class Rejection(str, Enum):
    """Why an event was dropped."""

    ROOM_NOT_FOUND = "room_not_found"
    NOT_BOUND = "not_bound"
    PLAYER_NOT_FOUND = "player_not_found"
    NOT_HOST = "not_host"
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_CHIPS = "insufficient_chips"
    WINNER_NOT_FOUND = "winner_not_found"
    TARGET_NOT_FOUND = "target_not_found"


@dataclass
class Outcome:
    """Result of one state machine operation.

    Rejections are never sent to the client; they exist so callers and
    tests can tell a dropped event from an applied one.
    """

    applied: bool
    room: Optional[Room] = None
    reason: Optional[Rejection] = None
    room_deleted: bool = False

    @classmethod
    def ok(cls, room: Optional[Room], room_deleted: bool = False) -> "Outcome":
        return cls(applied=True, room=room, room_deleted=room_deleted)

    @classmethod
    def rejected(cls, reason: Rejection) -> "Outcome":
        return cls(applied=False, reason=reason)


class RoomStateMachine:
    """Single mutator of room state for connected clients.

    Every operation runs under the room's lock: load, check, mutate,
    persist, publish. A failed check drops the event without a broadcast.
    """

    def __init__(
        self,
        store: RoomStore,
        registry: SessionRegistry,
        broadcaster: ConnectionManager,
        locks: RoomLocks,
    ):
        self.store = store
        self.registry = registry
        self.broadcaster = broadcaster
        self.locks = locks

    def _reject(self, reason: Rejection, operation: str, room_code: str, **context) -> Outcome:
        details = " ".join(f"{k}={v}" for k, v in context.items())
        logger.warning("Dropped %s in room %s: %s %s", operation, room_code, reason.value, details)
        return Outcome.rejected(reason)

    async def _commit(self, room: Room) -> Outcome:
        await self.store.set(room)
        await self.broadcaster.publish(room.code, room)
        return Outcome.ok(room)

    def _check_host(
        self, room: Room, acting_player_id: Optional[str], operation: str
    ) -> Optional[Outcome]:
        """Rejection if the acting player may not use host authority, else None."""
        if acting_player_id is None:
            return self._reject(Rejection.NOT_BOUND, operation, room.code)
        actor = room.find_player(acting_player_id)
        if actor is None:
            return self._reject(
                Rejection.PLAYER_NOT_FOUND, operation, room.code, player=acting_player_id
            )
        if not actor.is_host:
            return self._reject(Rejection.NOT_HOST, operation, room.code, player=actor.id)
        return None

    async def join(self, room_code: str, player_id: str, connection_id: str) -> Outcome:
        """Bind a connection to a player and push the current room to the group."""
        async with self.locks.hold(room_code):
            room = await self.store.get(room_code)
            if room is None:
                return self._reject(
                    Rejection.ROOM_NOT_FOUND, "joinRoom", room_code, connection=connection_id
                )

            previous = self.registry.bind(connection_id, room_code, player_id)
            if previous is not None and previous.room_code != room_code:
                await self.broadcaster.unsubscribe(previous.room_code, connection_id)
            await self.broadcaster.subscribe(room_code, connection_id)
            logger.info("Connection %s joined room %s as %s", connection_id, room_code, player_id)

            await self.broadcaster.publish(room_code, room)
            return Outcome.ok(room)

    async def start_game(self, room_code: str, acting_player_id: Optional[str]) -> Outcome:
        """Host moves the room from not started to started."""
        async with self.locks.hold(room_code):
            room = await self.store.get(room_code)
            if room is None:
                return self._reject(Rejection.ROOM_NOT_FOUND, "startGame", room_code)

            rejection = self._check_host(room, acting_player_id, "startGame")
            if rejection is not None:
                return rejection

            room.game_started = True
            logger.info("Game started in room %s", room_code)
            return await self._commit(room)

    async def place_bet(self, room_code: str, player_id: str, amount: int) -> Outcome:
        """Move ``amount`` chips from a player into the pot."""
        async with self.locks.hold(room_code):
            room = await self.store.get(room_code)
            if room is None:
                return self._reject(Rejection.ROOM_NOT_FOUND, "placeBet", room_code)

            player = room.find_player(player_id)
            if player is None:
                return self._reject(
                    Rejection.PLAYER_NOT_FOUND, "placeBet", room_code, player=player_id
                )
            if amount < 0:
                return self._reject(
                    Rejection.INVALID_AMOUNT, "placeBet", room_code, player=player_id, amount=amount
                )
            if player.chips < amount:
                return self._reject(
                    Rejection.INSUFFICIENT_CHIPS,
                    "placeBet",
                    room_code,
                    player=player_id,
                    amount=amount,
                    chips=player.chips,
                )

            player.chips -= amount
            room.pot += amount
            room.current_bets[player_id] = room.current_bets.get(player_id, 0) + amount
            room.current_round_bets[player_id] = room.current_round_bets.get(player_id, 0) + amount
            return await self._commit(room)

    async def decide_winner(
        self, room_code: str, acting_player_id: Optional[str], winner_id: str
    ) -> Outcome:
        """Host awards the whole pot to ``winner_id`` and clears the bets."""
        async with self.locks.hold(room_code):
            room = await self.store.get(room_code)
            if room is None:
                return self._reject(Rejection.ROOM_NOT_FOUND, "decideWinner", room_code)

            rejection = self._check_host(room, acting_player_id, "decideWinner")
            if rejection is not None:
                return rejection

            winner = room.find_player(winner_id)
            if winner is None:
                return self._reject(
                    Rejection.WINNER_NOT_FOUND, "decideWinner", room_code, winner=winner_id
                )

            logger.info(
                "Room %s pot of %d goes to %s (had %d chips)",
                room_code,
                room.pot,
                winner_id,
                winner.chips,
            )
            winner.chips += room.pot
            room.pot = 0
            room.current_bets = {}
            room.current_round_bets = {}
            return await self._commit(room)

    async def add_chips(
        self,
        room_code: str,
        acting_player_id: Optional[str],
        target_player_id: str,
        amount: int,
    ) -> Outcome:
        """Host adds ``amount`` (any sign) to a player's balance."""
        async with self.locks.hold(room_code):
            room = await self.store.get(room_code)
            if room is None:
                return self._reject(Rejection.ROOM_NOT_FOUND, "addChips", room_code)

            rejection = self._check_host(room, acting_player_id, "addChips")
            if rejection is not None:
                return rejection

            target = room.find_player(target_player_id)
            if target is None:
                return self._reject(
                    Rejection.TARGET_NOT_FOUND, "addChips", room_code, target=target_player_id
                )

            target.chips += amount
            logger.info(
                "Room %s: %s adjusted %s by %d to %d",
                room_code,
                acting_player_id,
                target.id,
                amount,
                target.chips,
            )
            return await self._commit(room)

    async def disconnect(self, connection_id: str) -> Outcome:
        """Remove the connection's player; delete the room or hand off host.

        The binding is removed first, so a second call for the same
        connection is a no-op. If the store fails part way the binding is
        put back, leaving the departure to a later call.
        """
        binding = self.registry.unbind(connection_id)
        if binding is None:
            logger.debug("Connection %s closed without joining a room", connection_id)
            return Outcome.rejected(Rejection.NOT_BOUND)

        await self.broadcaster.unsubscribe(binding.room_code, connection_id)
        try:
            return await self._depart(binding, connection_id)
        except RoomStoreError:
            if self.registry.lookup(connection_id) is None:
                self.registry.bind(connection_id, binding.room_code, binding.player_id)
            logger.error(
                "Room %s still lists departed player %s; store failed during disconnect",
                binding.room_code,
                binding.player_id,
            )
            raise

    async def _depart(self, binding: Binding, connection_id: str) -> Outcome:
        room_code = binding.room_code
        async with self.locks.hold(room_code):
            room = await self.store.get(room_code)
            if room is None:
                return self._reject(
                    Rejection.ROOM_NOT_FOUND, "disconnect", room_code, connection=connection_id
                )

            if room.find_player(binding.player_id) is None:
                return self._reject(
                    Rejection.PLAYER_NOT_FOUND, "disconnect", room_code, player=binding.player_id
                )

            room.players = [p for p in room.players if p.id != binding.player_id]
            logger.info("Player %s left room %s", binding.player_id, room_code)

            if room.is_empty:
                await self.store.delete(room_code)
                logger.info("Room %s is empty and was deleted", room_code)
                return Outcome.ok(None, room_deleted=True)

            if room.host is None:
                room.players[0].is_host = True
                logger.info("Player %s is now host of room %s", room.players[0].id, room_code)

            return await self._commit(room)

    def acting_player(self, connection_id: str, room_code: str) -> Optional[str]:
        """Player id a connection may act as in ``room_code``, if bound there."""
        return self.registry.player_id_for(connection_id, room_code)
