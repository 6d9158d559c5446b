from sqlalchemy.ext.asyncio import AsyncEngine

from libs.db.base import Base


async def create_all(engine: AsyncEngine) -> None:
    """Create every storage table that does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
