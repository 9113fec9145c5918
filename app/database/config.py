from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase


# Base class for models
class Base(DeclarativeBase):
    pass


def create_engine(database_url: str) -> AsyncEngine:
    """Create the process-wide async engine (and its connection pool)."""
    return create_async_engine(
        database_url,
        echo=False,
        future=True,
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create the issues and comments tables if they do not exist yet."""
    # Import for side effect: registers the tables on Base.metadata
    from app.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Dependency to get DB session
async def get_db(request: Request):
    async with request.app.state.sessionmaker() as session:
        yield session


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker
