"""Admission and storage errors.

Admission errors are raised by the request/response operations and turned
into ``{"error": message}`` responses by the API layer. Real-time events
never raise; see ``server.rooms.state_machine.Outcome``.
"""


class ChipTrackerError(Exception):
    """Base class for all server errors."""


class AdmissionError(ChipTrackerError):
    """Create/join request could not be admitted."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(AdmissionError):
    """A required field is missing or blank."""

    status_code = 400


class NotFoundError(AdmissionError):
    """No room matches the given code."""

    status_code = 404

    def __init__(self, room_code: str):
        self.room_code = room_code
        super().__init__("Room not found")


class RoomFullError(AdmissionError):
    """Room already holds the maximum number of players."""

    status_code = 400

    def __init__(self, room_code: str):
        self.room_code = room_code
        super().__init__("Room is full")


class RoomStoreError(ChipTrackerError):
    """Backing room store failed."""
