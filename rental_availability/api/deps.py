from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from rental_availability.config import get_settings
from rental_availability.infrastructure.db.engine import build_engine, build_sessionmaker

settings = get_settings()

# Falls back to in-memory SQLite when DATABASE_URL is not set
engine = build_engine(settings)
AsyncSessionLocal = build_sessionmaker(engine)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
