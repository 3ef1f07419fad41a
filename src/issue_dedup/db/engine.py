"""Process-wide async engine for the issues database.

The URL comes from ``ISSUE_DEDUP_DATABASE_URL``; SQL echo follows
``ISSUE_DEDUP_LOG_LEVEL=DEBUG``.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from issue_dedup.config.settings import get_settings

_engine: AsyncEngine | None = None


def get_engine() -> AsyncEngine:
    """Create the issues engine on first use and reuse it afterwards."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            echo=settings.log_level.upper() == "DEBUG",
            pool_pre_ping=True,
        )
    return _engine
