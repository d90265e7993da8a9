"""Database engine, bounded connection pool and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from mybank.core.config import Settings, settings

SQLITE_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:  # type: ignore[no-untyped-def]
    # SQLite ignores FOREIGN KEY / ON DELETE CASCADE unless enabled per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(config: Settings) -> Engine:
    """
    Create the engine for DATABASE_URL.

    Postgres gets a fixed-size pool (no overflow) so callers queue for a
    connection and fail with a pool TimeoutError after DB_POOL_TIMEOUT_SEC.
    SQLite connections get foreign key enforcement; an in-memory database is
    shared across threads through a single connection.
    """
    url = config.DATABASE_URL
    if url.startswith("sqlite"):
        sqlite_kwargs: dict[str, Any] = {}
        if url in SQLITE_MEMORY_URLS:
            sqlite_kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=config.DEBUG,
            **sqlite_kwargs,
        )
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    connect_args: dict[str, Any] = {"sslmode": config.DB_SSL_MODE}
    return create_engine(
        url,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=0,
        pool_timeout=config.DB_POOL_TIMEOUT_SEC,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=config.DEBUG,
    )


engine = build_engine(settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
