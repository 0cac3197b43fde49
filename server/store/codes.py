"""Room code generation."""

import logging
import random
import string

from ..config import settings
from ..models.room import Player, Room
from .base import RoomStore

logger = logging.getLogger(__name__)


ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_room_code(length: int = settings.room_code_length) -> str:
    """Short, shareable room code like ``K7QD``. Not cryptographically random."""
    return "".join(random.choices(ROOM_CODE_ALPHABET, k=length))


async def create_unique_room(
    store: RoomStore,
    host: Player,
    min_bet: int = settings.min_bet,
) -> Room:
    """Store a new room under a code no live room is using.

    Retries until an unused code is found; with 36^4 codes a collision is
    rare while only a handful of rooms are live.
    """
    code = generate_room_code()
    while await store.exists(code):
        logger.warning("Room code collision on %s, regenerating", code)
        code = generate_room_code()

    room = Room(code=code, players=[host], min_bet=min_bet)
    await store.set(room)
    logger.info("Created room %s for host %s", code, host.id)
    return room
