"""Pydantic models for room state and events."""

from .room import CamelModel, Player, Room
from .events import (
    # Server to client
    RoomUpdateEvent,
    ErrorEvent,
    PongEvent,
    # Client to server
    RoomMessage,
    JoinRoomMessage,
    StartGameMessage,
    PlaceBetMessage,
    DecideWinnerMessage,
    AddChipsMessage,
    PingMessage,
    INBOUND_MESSAGES,
)
from .api import (
    CreateRoomRequest,
    CreateRoomResponse,
    JoinRoomRequest,
    JoinRoomResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Room models
    "CamelModel",
    "Player",
    "Room",
    # Events
    "RoomUpdateEvent",
    "ErrorEvent",
    "PongEvent",
    "RoomMessage",
    "JoinRoomMessage",
    "StartGameMessage",
    "PlaceBetMessage",
    "DecideWinnerMessage",
    "AddChipsMessage",
    "PingMessage",
    "INBOUND_MESSAGES",
    # API
    "CreateRoomRequest",
    "CreateRoomResponse",
    "JoinRoomRequest",
    "JoinRoomResponse",
    "ErrorResponse",
    "HealthResponse",
]
