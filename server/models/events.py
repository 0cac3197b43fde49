"""WebSocket event models."""

from typing import Literal
from pydantic import field_validator

from .room import CamelModel, Room


# =============================================================================
# Server to Client Events
# =============================================================================


class RoomUpdateEvent(CamelModel):
    """Full room snapshot, sent after every mutation and on join."""

    type: Literal["roomUpdate"] = "roomUpdate"
    room: Room


class ErrorEvent(CamelModel):
    """Protocol error (unparseable or unknown frame)."""

    type: Literal["error"] = "error"
    code: str
    message: str


class PongEvent(CamelModel):
    """Keep-alive reply."""

    type: Literal["pong"] = "pong"


# =============================================================================
# Client to Server Messages
# =============================================================================


class RoomMessage(CamelModel):
    """Message addressed to one room."""

    room_code: str

    @field_validator("room_code")
    @classmethod
    def normalize_room_code(cls, value: str) -> str:
        return value.strip().upper()


class JoinRoomMessage(RoomMessage):
    """Bind this connection to a player in a room."""

    type: Literal["joinRoom"] = "joinRoom"
    player_id: str


class StartGameMessage(RoomMessage):
    """Host starts the game."""

    type: Literal["startGame"] = "startGame"


class PlaceBetMessage(RoomMessage):
    """Move chips from a player into the pot."""

    type: Literal["placeBet"] = "placeBet"
    player_id: str
    amount: int


class DecideWinnerMessage(RoomMessage):
    """Host awards the pot."""

    type: Literal["decideWinner"] = "decideWinner"
    winner_id: str


class AddChipsMessage(RoomMessage):
    """Host adjusts a player's balance."""

    type: Literal["addChips"] = "addChips"
    player_id: str
    amount: int


class PingMessage(CamelModel):
    """Keep-alive ping."""

    type: Literal["ping"] = "ping"


INBOUND_MESSAGES: dict[str, type[CamelModel]] = {
    "joinRoom": JoinRoomMessage,
    "startGame": StartGameMessage,
    "placeBet": PlaceBetMessage,
    "decideWinner": DecideWinnerMessage,
    "addChips": AddChipsMessage,
    "ping": PingMessage,
}
