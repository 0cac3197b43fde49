"""Per-room locks."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class RoomLocks:
    """One ``asyncio.Lock`` per room code, alive only while in use.

    Wrap every read-modify-write of a room in ``async with locks.hold(code)``
    so that awaits on the store cannot interleave two mutations of the same
    room. Different rooms never contend. An entry is dropped as soon as no
    caller holds or waits on it, so codes that name no room leave nothing
    behind.
    """

    def __init__(self):
        self._locks: dict[str, _Entry] = {}

    @asynccontextmanager
    async def hold(self, room_code: str) -> AsyncIterator[None]:
        entry = self._locks.get(room_code)
        if entry is None:
            entry = self._locks[room_code] = _Entry()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._locks.get(room_code) is entry:
                del self._locks[room_code]

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, room_code: str) -> bool:
        return room_code in self._locks
