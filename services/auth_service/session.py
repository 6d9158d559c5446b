"""Authentication boundary: startup check, login, logout, focus refresh.

A successful login runs the guest sync exactly once before the session is
marked ready.
"""

from typing import Optional

import httpx
from libs.auth.models import LoginResponse, User
from libs.common.logging import get_logger
from pydantic import ValidationError
from services.auth_service.client import AuthClient
from services.auth_service.state import AppState
from services.cart_service.client import CartClient, WishlistClient
from services.cart_service.sync import SyncReport, sync_guest_data
from services.guest_store.store import LocalStore

logger = get_logger(__name__)


class AuthError(Exception):
    """Login response could not be turned into a session."""


class AuthSession:
    def __init__(
        self,
        state: AppState,
        auth_client: AuthClient,
        store: LocalStore,
        cart_client: CartClient,
        wishlist_client: WishlistClient,
    ):
        self.state = state
        self.auth_client = auth_client
        self.store = store
        self.cart_client = cart_client
        self.wishlist_client = wishlist_client

    async def initialize(self) -> None:
        """Startup: resolve the current user and the cart badge."""
        await self._check_auth()
        self.state.mark_loaded()
        self.state.mark_ready()

    async def refresh(self) -> None:
        """App came back to the foreground."""
        await self._check_auth()

    async def _check_auth(self) -> None:
        user: Optional[User]
        try:
            user = await self.auth_client.current_user()
        except (httpx.HTTPError, ValidationError) as e:
            # Treat any error as unauthenticated
            logger.debug("Not authenticated: %s", e)
            user = None
        self.state.set_user(user)
        await self.refresh_cart_count()

    async def login(self, response: LoginResponse) -> SyncReport:
        """Adopt the user from a verified OTP response and merge guest data."""
        if response.user is None:
            logger.error("Failed to process login: no user data in response")
            raise AuthError("No user data in response")

        self.state.mark_ready(False)
        self.state.set_user(response.user)

        try:
            report = await sync_guest_data(
                self.store, self.cart_client, self.wishlist_client
            )
        except ValidationError as e:
            logger.error("Guest sync failed during login: %s", e)
            report = SyncReport(skipped=True)
        finally:
            await self.refresh_cart_count()
            self.state.mark_ready()
        return report

    async def logout(self) -> None:
        """End the server session; errors propagate to the caller."""
        try:
            await self.auth_client.logout()
        except httpx.HTTPError as e:
            logger.error("Failed to logout: %s", e)
            raise
        self.state.reset()

    async def refresh_cart_count(self) -> None:
        """Server cart size when signed in, guest cart size otherwise."""
        if self.state.is_authenticated:
            try:
                items = await self.cart_client.list_items()
            except (httpx.HTTPError, ValidationError) as e:
                logger.warning("Could not refresh cart count: %s", e)
                return
            self.state.set_cart_count(len(items))
        else:
            items = await self.store.get_cart_items()
            self.state.set_cart_count(len(items))
