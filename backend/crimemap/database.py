"""Database setup with SQLAlchemy async for the case-management store."""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from crimemap.config import get_settings

settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get a read-only database session."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def check_db_ready() -> None:
    """
    Verify database connectivity and expected schema.

    The tables are owned by the case-management system, so a missing table
    means this service is pointed at the wrong database.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

        tables = await conn.execute(
            text(
                "SELECT "
                "to_regclass('public.crime_case') AS crime_case, "
                "to_regclass('public.location') AS location, "
                "to_regclass('public.\"crime-type\"') AS crime_type"
            )
        )
        row = tables.first()
        if row is None or any(value is None for value in row):
            missing = []
            if row is None or row.crime_case is None:
                missing.append("crime_case")
            if row is None or row.location is None:
                missing.append("location")
            if row is None or row.crime_type is None:
                missing.append("crime-type")

            raise RuntimeError(
                f"Database schema is missing tables: {', '.join(missing)} "
                "(check DATABASE_URL points at the case-management database)."
            )
