"""
Database Connection Pool Manager

One pooled SQLAlchemy engine (pymysql driver) shared by the repositories.
The batch orchestrator's worker count is derived from the same pool size,
so parallel tank fetches never queue on connections.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import QueuePool

from fuel_runway.config import DATABASE, DatabaseConfig

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None


def create_db_engine(db_config: DatabaseConfig = DATABASE, verify: bool = True) -> Engine:
    """
    Build a pooled engine for the monitoring database.

    Pool Configuration:
    - pool_size: DatabaseConfig.POOL_SIZE persistent connections
    - max_overflow: extra connections under load
    - pool_recycle: recycle connections before MySQL's wait_timeout
    - pool_pre_ping: test connection before use (detect stale connections)

    Args:
        db_config: Connection settings
        verify: Run SELECT 1 before returning

    Returns:
        SQLAlchemy Engine
    """
    logger.info(
        f"Creating SQLAlchemy engine for {db_config.HOST}:{db_config.PORT}/{db_config.DATABASE}"
    )

    engine = create_engine(
        db_config.url,
        poolclass=QueuePool,
        pool_size=db_config.POOL_SIZE,
        max_overflow=db_config.MAX_OVERFLOW,
        pool_timeout=db_config.POOL_TIMEOUT,
        pool_recycle=db_config.POOL_RECYCLE,
        pool_pre_ping=True,
        echo=False,
    )

    if verify:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info(
                f"Database pool ready | Pool size: {db_config.POOL_SIZE} | "
                f"Max overflow: {db_config.MAX_OVERFLOW}"
            )
        except Exception as e:
            logger.error(f"Failed to connect to MySQL: {e}")
            engine.dispose()
            raise

    return engine


def get_engine() -> Engine:
    """Get or create the process-wide engine."""
    global _engine

    if _engine is None:
        _engine = create_db_engine()

    return _engine


def dispose_engine() -> None:
    """Close all pooled connections (call on shutdown)."""
    global _engine

    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Database pool disposed")


@contextmanager
def get_connection(engine: Engine) -> Generator[Connection, None, None]:
    """
    Transactional connection scope.

    Commits on success, rolls back on error.

    Usage:
        with get_connection(engine) as conn:
            conn.execute(text("UPDATE ..."), params)
    """
    with engine.connect() as conn:
        trans = conn.begin()
        try:
            yield conn
            trans.commit()
        except Exception as e:
            trans.rollback()
            logger.error(f"Database transaction error: {e}")
            raise


def utc_now_naive() -> datetime:
    """Current UTC time without tzinfo (MySQL DATETIME columns are naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
