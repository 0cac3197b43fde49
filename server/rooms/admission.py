"""Room creation and joining (request/response)."""

import asyncio
import logging
import time
from typing import Callable, Optional

from ..config import settings
from ..errors import NotFoundError, RoomFullError, ValidationError
from ..models.room import Player, Room
from ..store.base import RoomStore
from ..store.codes import create_unique_room
from .locks import RoomLocks

logger = logging.getLogger(__name__)


class PlayerIdFactory:
    """Millisecond-timestamp player ids, strictly increasing per process."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        now_ms = int(self._clock() * 1000)
        self._last = max(now_ms, self._last + 1)
        return str(self._last)


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


class RoomAdmission:
    """Creates rooms and admits players before they open a live connection."""

    def __init__(
        self,
        store: RoomStore,
        locks: RoomLocks,
        starting_chips: int = settings.starting_chips,
        max_players: int = settings.max_players,
        min_bet: int = settings.min_bet,
        new_player_id: Optional[Callable[[], str]] = None,
    ):
        self.store = store
        self.locks = locks
        self.starting_chips = starting_chips
        self.max_players = max_players
        self.min_bet = min_bet
        self.new_player_id = new_player_id or PlayerIdFactory()
        # Code lookup and store must not interleave between two creates.
        self._create_lock = asyncio.Lock()

    async def create_room(self, player_name: Optional[str]) -> tuple[str, str]:
        """Open a room with the caller as host.

        Returns:
            (room_code, player_id)

        Raises:
            ValidationError: if ``player_name`` is missing or blank
        """
        name = _clean(player_name)
        if not name:
            raise ValidationError("Player name is required")

        host = Player(
            id=self.new_player_id(),
            name=name,
            chips=self.starting_chips,
            is_host=True,
        )
        async with self._create_lock:
            room = await create_unique_room(self.store, host, min_bet=self.min_bet)
        return room.code, host.id

    async def join_room(self, room_code: Optional[str], player_name: Optional[str]) -> str:
        """Append a non-host player to an existing room.

        The new player only receives live updates once their connection
        sends ``joinRoom``; admission itself does not broadcast.

        Returns:
            The new player's id

        Raises:
            ValidationError: if the code or name is missing or blank
            NotFoundError: if no room has that code
            RoomFullError: if the room already has ``max_players`` players
        """
        code = _clean(room_code).upper()
        name = _clean(player_name)
        if not code or not name:
            raise ValidationError("Room code and player name are required")

        async with self.locks.hold(code):
            room = await self.store.get(code)
            if room is None:
                raise NotFoundError(code)
            if len(room.players) >= self.max_players:
                logger.warning("Rejected %r: room %s is full", name, code)
                raise RoomFullError(code)

            player_id = self.new_player_id()
            while room.find_player(player_id) is not None:
                player_id = self.new_player_id()

            room.players.append(
                Player(id=player_id, name=name, chips=self.starting_chips, is_host=False)
            )
            await self.store.set(room)

        logger.info("Player %s (%s) joined room %s", player_id, name, code)
        return player_id

    async def get_room(self, room_code: Optional[str]) -> Room:
        """Current snapshot of a room.

        Raises:
            NotFoundError: if no room has that code
        """
        code = _clean(room_code).upper()
        room = await self.store.get(code) if code else None
        if room is None:
            raise NotFoundError(code)
        return room
