"""
Store handle for the accessor layer.

The engine and session factory are built explicitly (``build_engine`` /
``build_session_factory``) and owned by the application lifespan in
``jobly.main``, which parks them on ``app.state``.  Nothing here opens a
connection at import time.
"""
from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from jobly.config import settings
from jobly.middleware import install_statement_counter


class Base(DeclarativeBase):
    pass


def build_engine(url: str | None = None) -> AsyncEngine:
    """Create an async engine with the per-request statement counter attached."""
    engine = create_async_engine(
        url or settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
    )
    install_statement_counter(engine)
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request):
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
