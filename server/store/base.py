"""Room store interface."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models.room import Room


class RoomStore(ABC):
    """Keyed storage of rooms by room code.

    Implementations are awaited from the event loop; callers serialize
    read-modify-write sequences per room with ``RoomLocks``.
    """

    @abstractmethod
    async def get(self, code: str) -> Optional[Room]:
        """Return the room stored under ``code``, or None."""

    @abstractmethod
    async def set(self, room: Room) -> None:
        """Store ``room`` under its own code, replacing any previous value."""

    @abstractmethod
    async def delete(self, code: str) -> None:
        """Remove the room stored under ``code``. Missing codes are ignored."""

    @abstractmethod
    async def exists(self, code: str) -> bool:
        """Whether a room is stored under ``code``."""

    @abstractmethod
    async def count(self) -> int:
        """Number of stored rooms."""

    async def close(self) -> None:
        """Release any resources held by the store."""
