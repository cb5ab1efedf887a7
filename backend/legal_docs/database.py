# @TASK P0-T0.3 - SQLAlchemy 2.x async engine and session factory

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from legal_docs.config import get_settings

settings = get_settings()

engine = create_async_engine(
    settings.async_database_url,
    echo=False,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency returning the session factory.

    Scans open their own short-lived sessions so that the metadata and
    content phases can run concurrently::

        @router.get("/items")
        async def list_items(factory=Depends(get_session_factory)):
            async with factory() as session:
                ...
    """
    return async_session_factory
