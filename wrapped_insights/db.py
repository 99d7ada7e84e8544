"""Database connection and session management"""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from wrapped_insights.models.db import Base

logger = logging.getLogger(__name__)


class Database:
    """Database connection and session manager for the summary cache"""

    def __init__(self):
        """Initialize database manager state"""
        self._engine = None
        self._SessionLocal = None

    def init(self, url: str) -> None:
        """
        Initialize database connection and create tables.

        Args:
            url: SQLAlchemy connection URL, e.g. sqlite:///wrapped.db
        """
        try:
            kwargs = {}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # Keep one connection so every session sees the same in-memory database
                kwargs = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
            self._engine = create_engine(url, **kwargs)
            Base.metadata.create_all(self._engine)
            self._SessionLocal = sessionmaker(bind=self._engine)
            logger.info("Database initialized successfully")

        except SQLAlchemyError as e:
            logger.error(f"Database initialization failed: {e}")
            raise

    @property
    def initialized(self) -> bool:
        return self._SessionLocal is not None

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations"""
        if not self._SessionLocal:
            raise RuntimeError("Database not initialized. Call init() first.")

        session = self._SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        """Get a new database session"""
        if not self._SessionLocal:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._SessionLocal()

    def dispose(self) -> None:
        """
        Clean up database connections.
        Should be called during application shutdown.
        """
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._SessionLocal = None


# Global database instance
db = Database()
