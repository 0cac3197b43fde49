"""Root conftest for path setup and shared fixtures.

This file is loaded first by pytest and ensures the project root
is on sys.path before any test modules are imported.
"""

import sys
from pathlib import Path

# Add project root to path IMMEDIATELY
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import asyncio
import json
from typing import Optional

import pytest
import pytest_asyncio

from server.models.room import Player, Room
from server.rooms import RoomHub
from server.store import InMemoryRoomStore


# =============================================================================
# Room Fixtures
# =============================================================================


@pytest.fixture
def alice() -> Player:
    """Host player."""
    return Player(id="1000", name="Alice", chips=100, is_host=True)


@pytest.fixture
def bob() -> Player:
    """Regular player."""
    return Player(id="1001", name="Bob", chips=100, is_host=False)


@pytest.fixture
def carol() -> Player:
    """Second regular player."""
    return Player(id="1002", name="Carol", chips=100, is_host=False)


@pytest.fixture
def sample_room(alice, bob) -> Room:
    """Two-player room, Alice hosting."""
    return Room(code="ABCD", players=[alice, bob])


@pytest.fixture
def room_store() -> InMemoryRoomStore:
    """Empty in-memory store."""
    return InMemoryRoomStore()


@pytest.fixture
def hub(room_store) -> RoomHub:
    """Room hub over an in-memory store."""
    return RoomHub(store=room_store)


class CopyingRoomStore(InMemoryRoomStore):
    """In-memory store that hands out and keeps copies, like a remote store.

    Changes made to a loaded room are lost unless written back with ``set``.
    """

    async def get(self, code: str) -> Optional[Room]:
        room = await super().get(code)
        return room.model_copy(deep=True) if room is not None else None

    async def set(self, room: Room) -> None:
        await super().set(room.model_copy(deep=True))


@pytest.fixture
def copying_hub() -> RoomHub:
    """Room hub whose store never shares objects with its callers."""
    return RoomHub(store=CopyingRoomStore())


# =============================================================================
# Mock WebSocket Fixture
# =============================================================================


class MockWebSocket:
    """Mock WebSocket for testing."""

    def __init__(self):
        self.accepted = False
        self.closed = False
        self.sent_messages: list[str] = []
        self.receive_queue: list[str] = []
        self._should_fail = False

    async def accept(self) -> None:
        """Accept the connection."""
        self.accepted = True

    async def close(self) -> None:
        """Close the connection."""
        self.closed = True

    async def send_text(self, message: str) -> None:
        """Send a text message."""
        if self._should_fail:
            raise ConnectionError("Connection closed")
        self.sent_messages.append(message)

    async def receive_text(self) -> str:
        """Receive a text message."""
        if self.receive_queue:
            return self.receive_queue.pop(0)
        raise asyncio.TimeoutError("No message")

    def queue_message(self, message: str) -> None:
        """Queue a message to be received."""
        self.receive_queue.append(message)

    def set_should_fail(self, should_fail: bool) -> None:
        """Set whether send should fail."""
        self._should_fail = should_fail

    def get_sent_events(self) -> list[dict]:
        """Parse sent messages as JSON events."""
        return [json.loads(msg) for msg in self.sent_messages]

    def last_room(self) -> Optional[dict]:
        """Room from the most recent roomUpdate, if any."""
        for event in reversed(self.get_sent_events()):
            if event["type"] == "roomUpdate":
                return event["room"]
        return None

    def clear(self) -> None:
        self.sent_messages.clear()


@pytest.fixture
def mock_websocket() -> MockWebSocket:
    """Create a mock WebSocket."""
    return MockWebSocket()


@pytest.fixture
def mock_websocket_factory():
    """Factory to create multiple mock WebSockets."""

    def factory() -> MockWebSocket:
        return MockWebSocket()

    return factory


# =============================================================================
# Connected Room Fixture
# =============================================================================


@pytest_asyncio.fixture
async def seeded_hub(hub, sample_room, mock_websocket_factory):
    """Hub holding ``sample_room`` with Alice and Bob connected and joined.

    Yields (hub, {"alice": (connection_id, ws), "bob": (connection_id, ws)}).
    """
    await hub.store.set(sample_room)
    connections = {}
    for name, player in (("alice", sample_room.players[0]), ("bob", sample_room.players[1])):
        ws = mock_websocket_factory()
        connection_id = await hub.connections.connect(ws)
        await hub.state_machine.join(sample_room.code, player.id, connection_id)
        connections[name] = (connection_id, ws)
    for _, ws in connections.values():
        ws.clear()
    yield hub, connections
