"""Application state shared by every screen.

Replaces a process-wide "current user" / "cart badge" context with one
explicit object that screens read, subscribe to and update.

Lifecycle:
- created at startup with ``is_loading=True``;
- ``AuthSession.initialize()`` fills in the user and cart count, then clears
  ``is_loading``;
- refreshed on auth transitions (login/logout) and when the app regains focus;
- ``reset()`` on logout drops the user and the cart count.
"""

from typing import Callable, Optional

from libs.auth.models import User
from libs.common.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[["AppState"], None]


class AppState:
    def __init__(self):
        self.user: Optional[User] = None
        self.cart_count: int = 0
        self.is_loading: bool = True
        self.is_ready: bool = False
        self._listeners: list[Listener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_user(self, user: Optional[User]) -> None:
        if user == self.user:
            return
        self.user = user
        self._notify()

    def set_cart_count(self, count: int) -> None:
        count = max(0, count)
        if count == self.cart_count:
            return
        self.cart_count = count
        self._notify()

    def mark_loaded(self) -> None:
        if not self.is_loading:
            return
        self.is_loading = False
        self._notify()

    def mark_ready(self, ready: bool = True) -> None:
        if ready == self.is_ready:
            return
        self.is_ready = ready
        self._notify()

    def reset(self) -> None:
        """Back to the signed-out state (logout)."""
        self.user = None
        self.cart_count = 0
        self.is_ready = True
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("App state listener %r failed", listener)
