"""API routes and WebSocket handlers."""

from .routes import router, init_dependencies, register_exception_handlers
from .websocket import handle_message, websocket_endpoint

__all__ = [
    "router",
    "init_dependencies",
    "register_exception_handlers",
    "handle_message",
    "websocket_endpoint",
]
