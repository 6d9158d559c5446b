from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from libs.common.config import get_settings

settings = get_settings()


def build_engine(url: str) -> AsyncEngine:
    """Create an async engine for the on-device store at ``url``."""
    return create_async_engine(url, echo=False, future=True)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


# Create async engine
engine = build_engine(settings.LOCAL_STORE_URL)

# Create async session factory
AsyncSessionLocal = build_session_factory(engine)
