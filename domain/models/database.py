"""
Database configuration and session management.

The engine is never created at import time: the application builds one at
startup with ``create_store_engine`` and hands a session factory to the
ledger and directory instances it constructs.
"""

import logging
import math
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger("lunchledger.database")

# Create SQLAlchemy Base
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_store_engine(
    database_url: str, timeout_sec: float = 5.0, echo: bool = False
) -> Engine:
    """
    Create the engine backing the ledger.

    Every store round trip is bounded by ``timeout_sec``: SQLite waits at most
    that long on a locked database, PostgreSQL gets a connect timeout and a
    statement timeout, and pooled backends give up checking out a connection
    after the same delay.

    Args:
        database_url: SQLAlchemy URL (sqlite or postgresql+psycopg2)
        timeout_sec: bound applied to each store round trip
        echo: log emitted SQL

    Returns:
        Engine: configured engine
    """
    kwargs = {"echo": echo, "future": True}

    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"timeout": timeout_sec, "check_same_thread": False}
    else:
        kwargs["connect_args"] = {
            "connect_timeout": max(1, math.ceil(timeout_sec)),
            "options": f"-c statement_timeout={int(timeout_sec * 1000)}",
        }
        kwargs["pool_timeout"] = timeout_sec
        kwargs["pool_pre_ping"] = True

    engine = create_engine(database_url, **kwargs)

    if engine.dialect.name == "sqlite":
        # Student references are enforced by the store, SQLite needs it per connection
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    logger.debug("Store engine created for dialect %s", engine.dialect.name)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to the given engine"""
    return sessionmaker(bind=engine, future=True, expire_on_commit=False)


def init_database(engine: Engine, drop_existing: bool = False):
    """Initialize database schema"""
    with engine.begin() as conn:
        if drop_existing:
            Base.metadata.drop_all(bind=conn)
            logger.info("Existing tables dropped")
        Base.metadata.create_all(bind=conn)
        logger.info("Database tables created successfully")
