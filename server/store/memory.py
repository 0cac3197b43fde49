"""In-memory room store."""

from typing import Optional

from ..models.room import Room
from .base import RoomStore


class InMemoryRoomStore(RoomStore):
    """Process-local dict of rooms. Lost on restart."""

    def __init__(self):
        self._rooms: dict[str, Room] = {}

    async def get(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    async def set(self, room: Room) -> None:
        self._rooms[room.code] = room

    async def delete(self, code: str) -> None:
        self._rooms.pop(code, None)

    async def exists(self, code: str) -> bool:
        return code in self._rooms

    async def count(self) -> int:
        return len(self._rooms)

    async def close(self) -> None:
        self._rooms.clear()
