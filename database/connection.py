"""
Database connection
"""
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database.models import Base


def _is_memory_url(url: str) -> bool:
    parsed = make_url(url)
    return parsed.drivername.startswith("sqlite") and parsed.database in (None, "", ":memory:")


class Database:
    """Async engine and session factory for the ticket registry"""

    def __init__(self, url: str):
        if _is_memory_url(url):
            # one shared connection, otherwise every session sees an empty database
            self.engine = create_async_engine(url, echo=False, poolclass=StaticPool)
        else:
            self.engine = create_async_engine(url, echo=False)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def init_db(self):
        """Create tables"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self):
        """Dispose of the engine"""
        await self.engine.dispose()
