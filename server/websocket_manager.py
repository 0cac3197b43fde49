"""WebSocket connection manager and room broadcaster."""

import asyncio
import logging
import uuid
from typing import Optional
from fastapi import WebSocket
from pydantic import BaseModel

from .models.events import RoomUpdateEvent
from .models.room import Room

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks live WebSocket connections and their room broadcast groups.

    A connection is identified by a short id assigned on ``connect``. A
    group is the set of connections subscribed to one room code.
    """

    def __init__(self):
        self.active_connections: dict[str, WebSocket] = {}
        self.groups: dict[str, dict[str, WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> str:
        """Accept and register a new connection, returning its id."""
        await websocket.accept()
        connection_id = str(uuid.uuid4())[:8]
        async with self._lock:
            self.active_connections[connection_id] = websocket
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        """Forget a connection and remove it from every group."""
        async with self._lock:
            self.active_connections.pop(connection_id, None)
            for room_code in list(self.groups):
                self._discard(room_code, connection_id)

    async def subscribe(self, room_code: str, connection_id: str) -> None:
        """Add a connection to a room's broadcast group."""
        async with self._lock:
            websocket = self.active_connections.get(connection_id)
            if websocket is None:
                return
            self.groups.setdefault(room_code, {})[connection_id] = websocket

    async def unsubscribe(self, room_code: str, connection_id: str) -> None:
        """Remove a connection from a room's broadcast group."""
        async with self._lock:
            self._discard(room_code, connection_id)

    def _discard(self, room_code: str, connection_id: str) -> None:
        group = self.groups.get(room_code)
        if group is None:
            return
        group.pop(connection_id, None)
        if not group:
            del self.groups[room_code]

    async def send_event(self, connection_id: str, event: BaseModel) -> None:
        """Send an event to a specific connection."""
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return
        try:
            await websocket.send_text(event.model_dump_json(by_alias=True))
        except Exception:
            logger.warning("Send to connection %s failed, dropping it", connection_id)
            await self.disconnect(connection_id)

    async def publish(self, room_code: str, room: Room) -> int:
        """Send the full room snapshot to every subscriber of ``room_code``.

        Returns the number of connections that received it.
        """
        message = RoomUpdateEvent(room=room).model_dump_json(by_alias=True)
        failed = []

        async with self._lock:
            subscribers = list(self.groups.get(room_code, {}).items())

        delivered = 0
        for connection_id, websocket in subscribers:
            try:
                await websocket.send_text(message)
                delivered += 1
            except Exception:
                failed.append(connection_id)

        # Dead sockets leave the group; their handler runs the disconnect.
        for connection_id in failed:
            logger.warning("Dropping unreachable connection %s from room %s", connection_id, room_code)
            await self.unsubscribe(room_code, connection_id)

        return delivered

    def subscribers(self, room_code: str) -> list[str]:
        """Connection ids subscribed to a room, in subscription order."""
        return list(self.groups.get(room_code, {}))

    def get_websocket(self, connection_id: str) -> Optional[WebSocket]:
        return self.active_connections.get(connection_id)

    @property
    def connection_count(self) -> int:
        """Number of active connections."""
        return len(self.active_connections)

    async def close_all(self) -> None:
        """Close all connections."""
        async with self._lock:
            for websocket in self.active_connections.values():
                try:
                    await websocket.close()
                except Exception:
                    pass
            self.active_connections.clear()
            self.groups.clear()
