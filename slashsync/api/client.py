"""Discord REST API wrapper for application commands."""
import logging
from typing import Any

import httpx

from slashsync.exceptions import TransportError

logger = logging.getLogger(__name__)


class DiscordAPI:
    """Minimal async client for the Discord HTTP API."""

    BASE_URL = "https://discord.com/api/v10"

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize API client.

        Args:
            token: Bot token used for the Authorization header
            base_url: API root, defaults to Discord's v10 API
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bot {self.token}"}

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method
            path: Path relative to base_url
            body: Optional JSON body

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            TransportError: On connection failure or a non-2xx status
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug(f"{method} {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method,
                    url,
                    headers=self.headers,
                    json=body,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TransportError(
                f"{method} {path} returned HTTP {status}: {e.response.text}",
                status=status,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, body: dict[str, Any]) -> Any:
        return await self.request("POST", path, body)

    async def patch(self, path: str, body: dict[str, Any]) -> Any:
        return await self.request("PATCH", path, body)

    async def delete(self, path: str) -> None:
        await self.request("DELETE", path)
