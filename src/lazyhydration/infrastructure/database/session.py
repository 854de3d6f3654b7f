"""
Database Session Factory
Creates sync SQLAlchemy sessions for iterators built without an explicit session
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from lazyhydration.config import get_settings
from lazyhydration.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)


class DatabaseSessionFactory:
    """
    Factory for creating database sessions.

    Manages the engine and session maker.
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
    ) -> None:
        """
        Initialize session factory with database connection.

        Args:
            database_url: SQLAlchemy connection string
            echo: Whether to log SQL statements (debug mode)
            pool_size: Connection pool size (ignored for SQLite)
            max_overflow: Max overflow connections beyond pool_size (ignored for SQLite)
            pool_pre_ping: Verify connections before using
        """
        self.database_url = database_url
        self.echo = echo

        engine_kwargs: dict[str, Any] = {"echo": echo, "pool_pre_ping": pool_pre_ping}
        if make_url(database_url).get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )

        self.engine: Engine = create_engine(database_url, **engine_kwargs)

        self.session_factory: sessionmaker[Session] = sessionmaker(
            self.engine,
            expire_on_commit=False,
            autoflush=False,
        )

        logger.info("Database session factory initialized", backend=self.engine.dialect.name)

    def create_session(self) -> Session:
        """Create a new session. The caller owns and closes it."""
        return self.session_factory()

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """
        Context manager for sessions.

        Usage:
            with factory.get_session() as session:
                ...
        """
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            session.rollback()
            logger.error("Session error, rolled back", error=str(e))
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """Close all connections and dispose of the engine."""
        self.engine.dispose()
        logger.info("Database engine disposed")


_session_factory: Optional[DatabaseSessionFactory] = None


def get_session_factory() -> DatabaseSessionFactory:
    """Default factory, built from settings on first use."""
    global _session_factory
    if _session_factory is None:
        settings = get_settings()
        _session_factory = DatabaseSessionFactory(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_pre_ping=settings.DATABASE_POOL_PRE_PING,
        )
    return _session_factory


def set_session_factory(factory: DatabaseSessionFactory) -> None:
    """Install ``factory`` as the default."""
    global _session_factory
    _session_factory = factory


def reset_session_factory() -> None:
    """Dispose of the default factory, if any, so the next use rebuilds it."""
    global _session_factory
    if _session_factory is not None:
        _session_factory.dispose()
    _session_factory = None
