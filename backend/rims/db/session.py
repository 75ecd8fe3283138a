"""Database session management."""

from collections.abc import Generator
from typing import Annotated, Any, Dict

from fastapi import Depends
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from rims.core.config import settings


def build_engine(database_url: str, echo: bool = False, **engine_options: Any) -> Engine:
    """Create an engine, handling SQLite specially.

    ``engine_options`` override the pool defaults (tests pass a StaticPool).
    """
    connect_args: Dict[str, Any] = {}
    pool_config: Dict[str, Any] = {}

    if database_url.startswith("sqlite"):
        # Writers wait for the database lock instead of failing straight away
        connect_args = {"check_same_thread": False, "timeout": 15}
        pool_config = {"pool_pre_ping": True}
    else:
        # PostgreSQL/MySQL connection pooling configuration
        pool_config = {
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }
    pool_config.update(engine_options)

    engine = create_engine(database_url, connect_args=connect_args, echo=echo, **pool_config)

    # Enable foreign key enforcement (and ON DELETE CASCADE) for SQLite
    if database_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.database_url, echo=settings.log_level == "DEBUG")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Type alias for dependency injection
DbSession = Annotated[Session, Depends(get_db)]
