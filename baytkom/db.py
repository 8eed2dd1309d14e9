from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from baytkom.core.config import settings
from baytkom.models.base import Base

DATABASE_URL = settings.database_url
if not DATABASE_URL:
    raise ValueError("❌ DATABASE_URL is not set!")

# SQLite connections are not shared across event loops (tests, scripts)
_engine_kwargs = {"poolclass": NullPool} if DATABASE_URL.startswith("sqlite") else {"pool_pre_ping": True}

# Create engine
engine = create_async_engine(DATABASE_URL, echo=settings.sql_echo, **_engine_kwargs)

# Async session maker
async_session = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Dependency
async def get_db():
    async with async_session() as session:
        yield session


async def create_db_and_tables():
    import baytkom.models  # registers every table on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db_and_tables():
    import baytkom.models

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# Reusable engine getter
def get_async_engine():
    return engine
