"""Room store backed by a Redis-over-REST key-value service."""

import json
import logging
from typing import Any, Optional

import httpx

from ..config import settings
from ..errors import RoomStoreError
from ..models.room import Room
from .base import RoomStore

logger = logging.getLogger(__name__)


KEY_PREFIX = "room:"


class KVRoomStore(RoomStore):
    """Stores each room as a JSON string under ``room:<CODE>``.

    Speaks the REST command API of hosted Redis services
    (``GET /get/<key>``, ``POST /set/<key>``, ``GET /del/<key>``, ...),
    authenticated with a bearer token.
    """

    def __init__(
        self,
        url: Optional[str] = settings.kv_url,
        token: Optional[str] = settings.kv_token,
        timeout: float = settings.kv_timeout,
    ):
        if not url:
            raise ValueError("KV store URL is required")
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout

    @staticmethod
    def _key(code: str) -> str:
        return f"{KEY_PREFIX}{code}"

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _command(self, method: str, path: str, content: Optional[str] = None) -> Any:
        """Run one REST command and return its ``result`` field."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if method == "POST":
                    response = await client.post(
                        f"{self.url}/{path}",
                        content=content,
                        headers=self._headers(),
                    )
                else:
                    response = await client.get(
                        f"{self.url}/{path}",
                        headers=self._headers(),
                    )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RoomStoreError(f"KV command {path!r} failed: {e}") from e

        if "error" in data:
            raise RoomStoreError(f"KV command {path!r} failed: {data['error']}")
        return data.get("result")

    async def get(self, code: str) -> Optional[Room]:
        raw = await self._command("GET", f"get/{self._key(code)}")
        if raw is None:
            return None
        try:
            return Room.model_validate(json.loads(raw))
        except ValueError as e:
            raise RoomStoreError(f"Corrupt room data under {code!r}: {e}") from e

    async def set(self, room: Room) -> None:
        await self._command(
            "POST",
            f"set/{self._key(room.code)}",
            content=room.model_dump_json(by_alias=True),
        )

    async def delete(self, code: str) -> None:
        await self._command("GET", f"del/{self._key(code)}")

    async def exists(self, code: str) -> bool:
        result = await self._command("GET", f"exists/{self._key(code)}")
        return bool(result)

    async def count(self) -> int:
        result = await self._command("GET", f"keys/{KEY_PREFIX}*")
        return len(result or [])

    async def check_connection(self) -> bool:
        """Check if the KV service is reachable."""
        try:
            await self._command("GET", "ping")
            return True
        except RoomStoreError:
            logger.warning("KV store at %s is not reachable", self.url)
            return False
