"""Reusable async HTTP client for the storefront REST API.

All remote cart, wishlist, wallet, order and auth calls go through one shared
``ApiClient`` so the session cookie set at login is sent on every request.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)


class ApiClient:
    """Cookie-session JSON client bound to the storefront API base URL.

    ``transport`` lets tests route requests to an in-process ASGI app.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: Path relative to the base URL (e.g. "/cart/12").
            json: Optional JSON body.
            params: Optional query parameters.

        Returns:
            The decoded JSON body, or None for an empty response.

        Raises:
            httpx.HTTPStatusError on non-2xx responses.
            httpx.RequestError on connection failures.
        """
        response = await self._client.request(method, path, json=json, params=params)
        logger.debug("%s %s -> %d", method, path, response.status_code)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        """Convenience wrapper for GET requests."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        """Convenience wrapper for POST requests."""
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        """Convenience wrapper for PUT requests."""
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        """Convenience wrapper for DELETE requests."""
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
