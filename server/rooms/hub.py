"""Wiring of the room components for one server process."""

import logging
from typing import Optional

from ..config import Settings, settings
from ..store import InMemoryRoomStore, KVRoomStore, RoomStore
from ..websocket_manager import ConnectionManager
from .admission import RoomAdmission
from .locks import RoomLocks
from .registry import SessionRegistry
from .state_machine import RoomStateMachine

logger = logging.getLogger(__name__)


def build_store(config: Settings = settings) -> RoomStore:
    """KV-backed store when a KV URL is configured, in-memory otherwise."""
    if config.kv_url:
        logger.info("Using KV room store at %s", config.kv_url)
        return KVRoomStore(url=config.kv_url, token=config.kv_token, timeout=config.kv_timeout)
    logger.info("Using in-memory room store")
    return InMemoryRoomStore()


class RoomHub:
    """Owns the store, bindings, connections and the operations on them."""

    def __init__(self, store: Optional[RoomStore] = None, config: Settings = settings):
        self.store = store if store is not None else build_store(config)
        self.locks = RoomLocks()
        self.registry = SessionRegistry()
        self.connections = ConnectionManager()
        self.admission = RoomAdmission(
            self.store,
            self.locks,
            starting_chips=config.starting_chips,
            max_players=config.max_players,
            min_bet=config.min_bet,
        )
        self.state_machine = RoomStateMachine(
            self.store,
            self.registry,
            self.connections,
            self.locks,
        )

    async def active_room_count(self) -> int:
        return await self.store.count()

    async def cleanup(self) -> None:
        """Close all connections and release the store."""
        await self.connections.close_all()
        await self.store.close()
