"""API request/response models."""

from typing import Optional

from .room import CamelModel


class CreateRoomRequest(CamelModel):
    """Request to open a new room."""

    # Optional at the schema level; blank or missing names are rejected
    # with a 400 by the admission layer.
    player_name: Optional[str] = None


class CreateRoomResponse(CamelModel):
    """Response after creating a room."""

    room_code: str
    player_id: str


class JoinRoomRequest(CamelModel):
    """Request to join an existing room."""

    room_code: Optional[str] = None
    player_name: Optional[str] = None


class JoinRoomResponse(CamelModel):
    """Response after joining a room."""

    player_id: str


class ErrorResponse(CamelModel):
    """Admission failure body."""

    error: str


class HealthResponse(CamelModel):
    """Health check response."""

    status: str
    active_rooms: int
    active_connections: int
