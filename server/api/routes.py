"""REST API routes."""

from typing import Optional
from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..errors import AdmissionError, RoomStoreError
from ..models.api import (
    CreateRoomRequest,
    CreateRoomResponse,
    ErrorResponse,
    JoinRoomRequest,
    JoinRoomResponse,
    HealthResponse,
)
from ..models.room import Room
from ..rooms import RoomHub

router = APIRouter()

# Global room hub (will be initialized in main.py)
hub: Optional[RoomHub] = None


def init_dependencies(room_hub: Optional[RoomHub]):
    """Initialize route dependencies."""
    global hub
    hub = room_hub


def _require_hub() -> RoomHub:
    if hub is None:
        raise HTTPException(status_code=500, detail="Server not initialized")
    return hub


async def admission_error_handler(request: Request, exc: AdmissionError) -> JSONResponse:
    """Render admission failures as ``{"error": message}``."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def store_error_handler(request: Request, exc: RoomStoreError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": "Room storage unavailable"})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render unparseable bodies with the same 400 ``{"error": ...}`` shape."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {field or 'body'} {first.get('msg', 'is invalid')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@router.post(
    "/room/create",
    response_model=CreateRoomResponse,
    responses={400: {"model": ErrorResponse}},
)
async def create_room(request: Optional[CreateRoomRequest] = None):
    """Create a new room with the caller as host."""
    room_hub = _require_hub()
    request = request or CreateRoomRequest()
    room_code, player_id = await room_hub.admission.create_room(request.player_name)
    return CreateRoomResponse(room_code=room_code, player_id=player_id)


@router.post(
    "/room/join",
    response_model=JoinRoomResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def join_room(request: Optional[JoinRoomRequest] = None):
    """Join an existing room as a regular player."""
    room_hub = _require_hub()
    request = request or JoinRoomRequest()
    player_id = await room_hub.admission.join_room(request.room_code, request.player_name)
    return JoinRoomResponse(player_id=player_id)


@router.get("/room/{room_code}", response_model=Room, responses={404: {"model": ErrorResponse}})
async def get_room(room_code: str):
    """Current room snapshot."""
    room_hub = _require_hub()
    return await room_hub.admission.get_room(room_code)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    if hub is None:
        return HealthResponse(status="healthy", active_rooms=0, active_connections=0)

    return HealthResponse(
        status="healthy",
        active_rooms=await hub.active_room_count(),
        active_connections=hub.connections.connection_count,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the ``{"error": ...}`` handlers on an application."""
    app.add_exception_handler(AdmissionError, admission_error_handler)
    app.add_exception_handler(RoomStoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
