"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .api.routes import router as api_router, init_dependencies, register_exception_handlers
from .api.websocket import websocket_endpoint
from .rooms import RoomHub
from .store import KVRoomStore


logger = logging.getLogger(__name__)

# Global instances
hub: RoomHub = None


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global hub

    # Startup
    configure_logging()
    hub = RoomHub()
    init_dependencies(hub)

    if isinstance(hub.store, KVRoomStore):
        if await hub.store.check_connection():
            logger.info("Connected to KV store at %s", hub.store.url)
        else:
            logger.warning("Cannot reach KV store at %s", hub.store.url)

    yield

    # Shutdown
    await hub.cleanup()
    init_dependencies(None)


# Create FastAPI app
app = FastAPI(
    title="Chip Tracker API",
    description="Shared poker chip rooms with real-time pot and balance sync",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router, prefix="/api")
register_exception_handlers(app)


# WebSocket endpoint
@app.websocket("/ws")
async def ws_endpoint(websocket: WebSocket):
    """Real-time room channel."""
    await websocket_endpoint(websocket, hub)


def main():
    """Run the server."""
    import uvicorn

    uvicorn.run(
        "server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
