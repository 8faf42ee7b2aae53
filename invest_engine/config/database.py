"""
Database engine and session factory.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from invest_engine.config.settings import settings


def create_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    """
    Create async engine.

    Args:
        url: Database URL (defaults to settings)
        echo: SQL echo flag (defaults to settings)

    Returns:
        AsyncEngine
    """
    url = url or settings.async_database_url
    kwargs = {"echo": settings.database_echo if echo is None else echo}
    if not url.startswith("sqlite"):
        kwargs.update(pool_size=10, max_overflow=20, pool_pre_ping=True)
    return create_async_engine(url, **kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to an engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = create_engine()
async_session_maker = create_session_maker(engine)
