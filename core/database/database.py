"""
Database connection and session management.
"""
import re
from contextlib import contextmanager
from typing import Generator, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from core.config import settings
from utils.logger import get_logger

logger = get_logger(__name__)


def mask_database_url(url: str) -> str:
    """Hide credentials in a database URL before logging it."""
    return re.sub(r"//[^/@]*@", "//***:***@", url)


class DatabaseManager:
    """Manager for database connections and sessions."""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url
        self.engine: Optional[Engine] = None
        self.SessionLocal: Optional[sessionmaker] = None
        # Connections the engine can hand out at once
        self.pool_capacity: Optional[int] = None

    def initialize(self):
        """Initialize database engine and session factory."""
        if self.engine is None:
            url = self.database_url or settings.database_url
            logger.info(f"Connecting to database: {mask_database_url(url)}")

            if url.startswith("sqlite"):
                # Queries run from worker threads, so the connection may not be pinned to one
                connect_args = {"check_same_thread": False, "timeout": 20}
                if ":memory:" in url or url == "sqlite://":
                    self.engine = create_engine(
                        url,
                        connect_args=connect_args,
                        poolclass=StaticPool,
                        echo=settings.debug,
                    )
                    # One connection shared by every session
                    self.pool_capacity = 1
                else:
                    self.engine = create_engine(
                        url,
                        connect_args=connect_args,
                        pool_size=settings.database_pool_size,
                        max_overflow=settings.database_max_overflow,
                        echo=settings.debug,
                    )
                    self.pool_capacity = settings.database_pool_size + settings.database_max_overflow
            else:
                # PostgreSQL configuration for production
                self.engine = create_engine(
                    url,
                    pool_size=settings.database_pool_size,
                    max_overflow=settings.database_max_overflow,
                    pool_pre_ping=True,
                    echo=settings.debug,
                )
                self.pool_capacity = settings.database_pool_size + settings.database_max_overflow

            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.engine
            )

    def create_tables(self):
        """Create all database tables."""
        if self.engine is None:
            self.initialize()

        from .models import Base
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        """Close pooled connections and forget the engine."""
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None
        self.pool_capacity = None

    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session."""
        if self.engine is None:
            self.initialize()

        session = self.SessionLocal()  # type: ignore
        try:
            yield session
        finally:
            session.close()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Short-lived session for a single unit of work; commits on success."""
        if self.engine is None:
            self.initialize()

        session = self.SessionLocal()  # type: ignore
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Global database manager instance
db_manager = DatabaseManager()


def get_db_session() -> Generator[Session, None, None]:
    """Dependency function to get database session."""
    yield from db_manager.get_session()


def get_db_manager() -> DatabaseManager:
    """Dependency function returning the process-wide database manager."""
    return db_manager


def initialize_database():
    """Initialize database and create tables."""
    db_manager.initialize()
    db_manager.create_tables()
