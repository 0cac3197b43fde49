"""Room storage backends."""

from .base import RoomStore
from .memory import InMemoryRoomStore
from .kv import KVRoomStore
from .codes import generate_room_code, create_unique_room

__all__ = [
    "RoomStore",
    "InMemoryRoomStore",
    "KVRoomStore",
    "generate_room_code",
    "create_unique_room",
]
