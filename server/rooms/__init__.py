"""Room lifecycle: admission, bindings and the real-time state machine."""

from .admission import PlayerIdFactory, RoomAdmission
from .locks import RoomLocks
from .registry import Binding, SessionRegistry
from .state_machine import Outcome, Rejection, RoomStateMachine
from .hub import RoomHub, build_store

__all__ = [
    "PlayerIdFactory",
    "RoomAdmission",
    "RoomLocks",
    "Binding",
    "SessionRegistry",
    "Outcome",
    "Rejection",
    "RoomStateMachine",
    "RoomHub",
    "build_store",
]
