"""Connection to player bindings."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Binding:
    """The room and player a connection speaks for."""

    room_code: str
    player_id: str


class SessionRegistry:
    """Maps each live connection id to the (room, player) it joined as."""

    def __init__(self):
        self._bindings: dict[str, Binding] = {}

    def bind(self, connection_id: str, room_code: str, player_id: str) -> Optional[Binding]:
        """Bind a connection, returning the binding it replaced (if any)."""
        previous = self._bindings.get(connection_id)
        self._bindings[connection_id] = Binding(room_code, player_id)
        return previous

    def lookup(self, connection_id: str) -> Optional[Binding]:
        return self._bindings.get(connection_id)

    def unbind(self, connection_id: str) -> Optional[Binding]:
        """Remove and return a connection's binding.

        Returns None if the connection was never bound or was already
        unbound, so cleanup keyed on the result runs at most once.
        """
        return self._bindings.pop(connection_id, None)

    def player_id_for(self, connection_id: str, room_code: str) -> Optional[str]:
        """Player the connection is bound as within ``room_code``."""
        binding = self._bindings.get(connection_id)
        if binding is None or binding.room_code != room_code:
            return None
        return binding.player_id

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._bindings
