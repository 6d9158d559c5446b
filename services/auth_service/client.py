"""Remote auth client."""

from typing import Optional

import httpx
from libs.auth.models import User
from libs.common.api_client import ApiClient


class AuthClient:
    def __init__(self, api: ApiClient):
        self.api = api

    async def current_user(self) -> Optional[User]:
        """Return the user behind the session cookie, or None when signed out."""
        try:
            data = await self.api.get("/auth/me")
        except httpx.HTTPStatusError as e:
            if e.response.status_code in (401, 403):
                return None
            raise
        if not data:
            return None
        return User.model_validate(data)

    async def logout(self) -> None:
        """Ask the server to drop the session cookie."""
        await self.api.post("/logout")
