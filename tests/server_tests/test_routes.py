"""Tests for API routes."""

# Add project root to path for imports BEFORE other imports
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import re
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from server.api.routes import router, init_dependencies, register_exception_handlers
from server.errors import RoomStoreError
from server.rooms import RoomHub
from server.store import InMemoryRoomStore


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def app():
    """Create a FastAPI app with routes."""
    app = FastAPI()
    app.include_router(router, prefix="/api")
    register_exception_handlers(app)
    return app


@pytest.fixture
def client(app):
    """Create a test client."""
    init_dependencies(None)
    return TestClient(app)


@pytest.fixture
def room_hub():
    """Hub backed by a fresh in-memory store."""
    return RoomHub(store=InMemoryRoomStore())


@pytest.fixture
def initialized_client(app, room_hub):
    """Create a test client with initialized dependencies."""
    init_dependencies(room_hub)
    yield TestClient(app)
    init_dependencies(None)


def create(client, name="Alice") -> dict:
    response = client.post("/api/room/create", json={"playerName": name})
    assert response.status_code == 200
    return response.json()


# =============================================================================
# Health Check Tests
# =============================================================================


class TestHealthCheck:
    """Tests for health check endpoint."""

    def test_health_check_not_initialized(self, client):
        """Test health check when not initialized."""
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "activeRooms": 0, "activeConnections": 0}

    def test_health_check_counts_rooms(self, initialized_client):
        """Test health check reports live rooms."""
        create(initialized_client)
        create(initialized_client, "Bob")

        data = initialized_client.get("/api/health").json()

        assert data["status"] == "healthy"
        assert data["activeRooms"] == 2
        assert data["activeConnections"] == 0


# =============================================================================
# Create Room Tests
# =============================================================================


class TestCreateRoom:
    """Tests for POST /room/create."""

    def test_create_room(self, initialized_client):
        """Test creating a room returns a 4 character code and a player id."""
        data = create(initialized_client)

        assert set(data) == {"roomCode", "playerId"}
        assert len(data["roomCode"]) == 4
        assert re.fullmatch(r"[A-Z0-9]{4}", data["roomCode"])

    def test_creator_is_host(self, initialized_client):
        data = create(initialized_client)

        room = initialized_client.get(f"/api/room/{data['roomCode']}").json()

        assert room["players"] == [
            {"id": data["playerId"], "name": "Alice", "chips": 100, "isHost": True}
        ]
        assert room["pot"] == 0
        assert room["gameStarted"] is False

    @pytest.mark.parametrize("body", [{}, {"playerName": ""}, {"playerName": "   "}])
    def test_create_requires_name(self, initialized_client, body):
        """Test a missing name returns 400 with the error message."""
        response = initialized_client.post("/api/room/create", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Player name is required"}

    def test_create_without_body(self, initialized_client):
        """Test a request with no body gets the 400 error contract."""
        response = initialized_client.post("/api/room/create")

        assert response.status_code == 400
        assert response.json() == {"error": "Player name is required"}

    def test_create_wrong_type(self, initialized_client):
        """Test a non-string name is a 400 with an error body, not a 422."""
        response = initialized_client.post("/api/room/create", json={"playerName": 7})

        assert response.status_code == 400
        assert set(response.json()) == {"error"}
        assert "playerName" in response.json()["error"]

    def test_create_malformed_json(self, initialized_client):
        response = initialized_client.post(
            "/api/room/create",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "error" in response.json()

    def test_create_not_initialized(self, client):
        """Test create when the server is not initialized."""
        response = client.post("/api/room/create", json={"playerName": "Alice"})
        assert response.status_code == 500


# =============================================================================
# Join Room Tests
# =============================================================================


class TestJoinRoom:
    """Tests for POST /room/join."""

    def test_join_room(self, initialized_client):
        """Test joining appends a non-host player."""
        code = create(initialized_client)["roomCode"]

        response = initialized_client.post(
            "/api/room/join", json={"roomCode": code, "playerName": "Bob"}
        )

        assert response.status_code == 200
        player_id = response.json()["playerId"]
        room = initialized_client.get(f"/api/room/{code}").json()
        assert room["players"][-1] == {
            "id": player_id,
            "name": "Bob",
            "chips": 100,
            "isHost": False,
        }

    def test_join_lowercase_code(self, initialized_client):
        code = create(initialized_client)["roomCode"]
        response = initialized_client.post(
            "/api/room/join", json={"roomCode": code.lower(), "playerName": "Bob"}
        )
        assert response.status_code == 200

    def test_join_unknown_room(self, initialized_client):
        """Test joining an unknown room returns 404."""
        response = initialized_client.post(
            "/api/room/join", json={"roomCode": "ZZZZ", "playerName": "Eve"}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Room not found"}

    @pytest.mark.parametrize(
        "body",
        [{}, {"roomCode": "ABCD"}, {"playerName": "Eve"}, {"roomCode": "", "playerName": "Eve"}],
    )
    def test_join_missing_fields(self, initialized_client, body):
        response = initialized_client.post("/api/room/join", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Room code and player name are required"}

    def test_join_without_body(self, initialized_client):
        response = initialized_client.post("/api/room/join")

        assert response.status_code == 400
        assert response.json() == {"error": "Room code and player name are required"}

    def test_join_wrong_type(self, initialized_client):
        """Test a numeric room code is a 400 with an error body."""
        response = initialized_client.post(
            "/api/room/join", json={"roomCode": 1234, "playerName": "Eve"}
        )

        assert response.status_code == 400
        assert "roomCode" in response.json()["error"]

    def test_join_full_room(self, initialized_client):
        """Test the eleventh player is turned away."""
        code = create(initialized_client)["roomCode"]
        for i in range(9):
            response = initialized_client.post(
                "/api/room/join", json={"roomCode": code, "playerName": f"P{i}"}
            )
            assert response.status_code == 200

        response = initialized_client.post(
            "/api/room/join", json={"roomCode": code, "playerName": "Eleven"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Room is full"}
        room = initialized_client.get(f"/api/room/{code}").json()
        assert len(room["players"]) == 10


# =============================================================================
# Get Room Tests
# =============================================================================


class TestGetRoom:
    """Tests for GET /room/{code}."""

    def test_get_room_snapshot(self, initialized_client):
        """Test the snapshot uses camelCase keys."""
        code = create(initialized_client)["roomCode"]

        response = initialized_client.get(f"/api/room/{code}")

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == code
        for key in ("currentBets", "currentRoundBets", "minBet", "currentTurn", "gameStarted"):
            assert key in data
        assert data["minBet"] == 10

    def test_get_unknown_room(self, initialized_client):
        response = initialized_client.get("/api/room/NOPE")

        assert response.status_code == 404
        assert response.json() == {"error": "Room not found"}


# =============================================================================
# Store Failure Tests
# =============================================================================


class TestStoreFailure:
    """Tests for storage errors surfacing through the API."""

    def test_store_error_returns_503(self, app):
        """Test a failing store renders a 503 error body."""
        store = InMemoryRoomStore()
        store.get = AsyncMock(side_effect=RoomStoreError("down"))
        init_dependencies(RoomHub(store=store))
        try:
            response = TestClient(app).get("/api/room/ABCD")
        finally:
            init_dependencies(None)

        assert response.status_code == 503
        assert response.json() == {"error": "Room storage unavailable"}
