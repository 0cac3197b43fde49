"""Server configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_prefix="CHIPS_")

    # Server
    host: str = "0.0.0.0"
    port: int = 5001
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # Room defaults
    starting_chips: int = 100
    max_players: int = 10
    min_bet: int = 10
    room_code_length: int = 4

    # Optional durable room storage (Redis-over-REST key-value API)
    kv_url: Optional[str] = None
    kv_token: Optional[str] = None
    kv_timeout: float = 5.0


settings = Settings()
