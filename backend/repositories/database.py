"""
Database configuration with connection pooling.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, QueuePool

from models.config import settings


def enable_sqlite_pragmas(dbapi_conn, connection_record) -> None:  # type: ignore[no-untyped-def]
    """
    Turn on foreign key enforcement and a busy timeout for SQLite connections.

    PRAGMAs are per-connection, so this runs on every new pooled connection.
    The busy timeout keeps concurrent writers waiting for the lock instead of
    failing immediately with "database is locked".
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def create_db_engine():
    """
    Create database engine with appropriate configuration.

    Uses QueuePool for PostgreSQL/production and NullPool for SQLite.
    NullPool creates a new connection per request, avoiding concurrency issues.
    """
    is_sqlite = "sqlite" in settings.DATABASE_URL

    if is_sqlite:
        db_engine = create_engine(
            settings.DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
        event.listen(db_engine, "connect", enable_sqlite_pragmas)
        return db_engine

    return create_engine(
        settings.DATABASE_URL,
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,  # Verify connections before use
    )


engine = create_db_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Get database session with automatic cleanup."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
