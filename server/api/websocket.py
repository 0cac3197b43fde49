"""WebSocket endpoint handler."""

import json
import logging
from typing import Optional
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PayloadError

from ..errors import RoomStoreError
from ..models.events import (
    INBOUND_MESSAGES,
    AddChipsMessage,
    DecideWinnerMessage,
    ErrorEvent,
    JoinRoomMessage,
    PingMessage,
    PlaceBetMessage,
    PongEvent,
    StartGameMessage,
)
from ..rooms import Outcome, RoomHub

logger = logging.getLogger(__name__)


async def handle_message(hub: RoomHub, connection_id: str, data: str) -> Optional[Outcome]:
    """Parse one inbound frame and apply it.

    Malformed frames get an ``error`` event back; well-formed events that
    the state machine rejects are dropped silently.
    """
    connections = hub.connections
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        await connections.send_event(
            connection_id,
            ErrorEvent(code="invalid_json", message="Invalid JSON message"),
        )
        return None

    msg_type = payload.get("type") if isinstance(payload, dict) else None
    model = INBOUND_MESSAGES.get(msg_type) if isinstance(msg_type, str) else None
    if model is None:
        await connections.send_event(
            connection_id,
            ErrorEvent(code="unknown_message", message=f"Unknown message type: {msg_type}"),
        )
        return None

    try:
        message = model.model_validate(payload)
    except PayloadError as e:
        await connections.send_event(
            connection_id,
            ErrorEvent(
                code="invalid_message",
                message=f"Invalid {msg_type} message: {e.error_count()} error(s)",
            ),
        )
        return None

    machine = hub.state_machine

    if isinstance(message, PingMessage):
        await connections.send_event(connection_id, PongEvent())
        return None

    if isinstance(message, JoinRoomMessage):
        return await machine.join(message.room_code, message.player_id, connection_id)

    if isinstance(message, PlaceBetMessage):
        return await machine.place_bet(message.room_code, message.player_id, message.amount)

    # Host actions act as the player this connection joined as.
    actor = machine.acting_player(connection_id, message.room_code)

    if isinstance(message, StartGameMessage):
        return await machine.start_game(message.room_code, actor)

    if isinstance(message, DecideWinnerMessage):
        return await machine.decide_winner(message.room_code, actor, message.winner_id)

    if isinstance(message, AddChipsMessage):
        return await machine.add_chips(message.room_code, actor, message.player_id, message.amount)

    return None


async def websocket_endpoint(websocket: WebSocket, hub: RoomHub):
    """Serve one client connection until it closes."""
    connection_id = await hub.connections.connect(websocket)
    logger.info("New client connected: %s", connection_id)

    try:
        while True:
            data = await websocket.receive_text()
            try:
                await handle_message(hub, connection_id, data)
            except RoomStoreError:
                logger.exception("Room store failed while handling a message from %s", connection_id)

    except WebSocketDisconnect:
        pass
    finally:
        try:
            await hub.state_machine.disconnect(connection_id)
        except RoomStoreError:
            logger.exception("Room store failed during disconnect of %s", connection_id)
        await hub.connections.disconnect(connection_id)
        logger.info("Client disconnected: %s", connection_id)
