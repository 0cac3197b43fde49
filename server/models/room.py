"""Room and player state models."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Player(CamelModel):
    """Occupant of a room."""

    id: str
    name: str
    chips: int = 100
    is_host: bool = False


class Room(CamelModel):
    """Authoritative state of one game session."""

    code: str
    players: list[Player] = Field(default_factory=list)
    pot: int = 0
    current_bets: dict[str, int] = Field(default_factory=dict)
    # Mirrors current_bets; kept for clients that track betting rounds.
    current_round_bets: dict[str, int] = Field(default_factory=dict)
    min_bet: int = 10
    current_turn: Optional[str] = None
    game_started: bool = False

    def find_player(self, player_id: Optional[str]) -> Optional[Player]:
        """Return the player with the given id, if present."""
        if player_id is None:
            return None
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    @property
    def host(self) -> Optional[Player]:
        for player in self.players:
            if player.is_host:
                return player
        return None

    @property
    def is_empty(self) -> bool:
        return not self.players
