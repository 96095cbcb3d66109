"""Relational store connection pool and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from mediagate.core.config import Settings, settings


def _engine_kwargs(cfg: Settings) -> dict[str, Any]:
    """
    Pool options for the configured URL.

    Server databases get a bounded QueuePool: at most DB_POOL_SIZE + DB_MAX_OVERFLOW
    connections, extra callers wait up to DB_POOL_TIMEOUT seconds for a free one.
    SQLite (dev/tests) shares one connection so in-memory databases survive.
    """
    if cfg.DATABASE_URL.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_pre_ping": True,
        "pool_size": cfg.DB_POOL_SIZE,
        "max_overflow": cfg.DB_MAX_OVERFLOW,
        "pool_timeout": cfg.DB_POOL_TIMEOUT,
    }


engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG, **_engine_kwargs(settings))

if engine.dialect.name == "sqlite":

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


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
    except Exception:
        return False
