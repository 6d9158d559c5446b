import httpx
import pytest
import pytest_asyncio

from libs.common.api_client import ApiClient
from libs.db.config import build_engine, build_session_factory
from services.auth_service.client import AuthClient
from services.auth_service.session import AuthSession
from services.auth_service.state import AppState
from services.cart_service.client import CartClient, WishlistClient
from services.checkout_service.client import OrdersClient
from services.guest_store.store import LocalStore
from services.wallet_service.client import WalletClient
from tests.stubs import FakeStorefront, create_app


@pytest_asyncio.fixture
async def local_store(tmp_path):
    """
    Yield a LocalStore backed by a throwaway sqlite file.
    Each test gets its own file, so there is nothing to roll back.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'local_store.sqlite3'}")
    store = LocalStore(engine=engine, session_factory=build_session_factory(engine))
    await store.init_schema()

    yield store

    await engine.dispose()


@pytest.fixture
def storefront() -> FakeStorefront:
    """In-memory server state behind the fake API."""
    return FakeStorefront()


@pytest_asyncio.fixture
async def api_client(storefront):
    """
    Yield an ApiClient routed to the in-process fake storefront app
    instead of the real API base URL.
    """
    client = ApiClient(
        base_url="http://test/api",
        transport=httpx.ASGITransport(app=create_app(storefront)),
    )
    async with client:
        yield client


@pytest.fixture
def cart_client(api_client) -> CartClient:
    return CartClient(api_client)


@pytest.fixture
def wishlist_client(api_client) -> WishlistClient:
    return WishlistClient(api_client)


@pytest.fixture
def wallet_client(api_client) -> WalletClient:
    return WalletClient(api_client)


@pytest.fixture
def orders_client(api_client) -> OrdersClient:
    return OrdersClient(api_client)


@pytest.fixture
def auth_client(api_client) -> AuthClient:
    return AuthClient(api_client)


@pytest.fixture
def app_state() -> AppState:
    return AppState()


@pytest.fixture
def auth_session(app_state, auth_client, local_store, cart_client, wishlist_client):
    return AuthSession(app_state, auth_client, local_store, cart_client, wishlist_client)
