"""Database engine/session setup for SQLAlchemy."""

from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from testdrive_desk.core.config import DATABASE_URL, DB_LOCK_TIMEOUT_SECONDS


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _install_sqlite_locking(sqlite_engine: Engine) -> None:
    """Make every SQLite transaction take the write lock up front.

    pysqlite's own BEGIN handling is disabled so that ``BEGIN IMMEDIATE`` is
    emitted instead; a read-then-write sequence inside one transaction is then
    serialized against other writers, waiting at most the driver timeout.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sqlite_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str = DATABASE_URL) -> Engine:
    if _is_sqlite(url):
        # check_same_thread is required for SQLite with FastAPI; timeout bounds lock waits.
        new_engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": DB_LOCK_TIMEOUT_SECONDS},
            pool_pre_ping=True,
        )
        _install_sqlite_locking(new_engine)
        return new_engine

    return create_engine(url, pool_pre_ping=True)


# Engine is shared across requests.
engine = build_engine()

# Session factory used by request-scoped dependencies.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, class_=Session)

# Declarative base class for ORM models.
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Provide a DB session per request and ensure it is closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
