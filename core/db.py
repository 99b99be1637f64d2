"""
core/db.py -- Engine construction and error translation shared by all stores.

Both auth/store.py and alerts/store.py talk to the same durable backend
through SQLAlchemy Core. Swapping SQLite for PostgreSQL is a DATABASE_URL
change, not a rewrite.

store_errors() is the single place where backend failures become domain
errors: stores wrap every statement in it so route handlers never see a raw
SQLAlchemy exception or its text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import SingletonThreadPool

from core.errors import AlertServiceError, UpstreamError

logger = logging.getLogger("alertservice.db")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL (Write-Ahead Logging) allows readers to proceed without blocking
    during writes. Set per-connection because SQLite PRAGMAs are not
    inherited by new connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _is_sqlite_memory(db_url: str) -> bool:
    if not db_url.startswith("sqlite"):
        return False
    return ":memory:" in db_url or "mode=memory" in db_url or db_url in ("sqlite://", "sqlite:///")


def make_engine(db_url: str) -> Engine:
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        # Route handlers run in FastAPI's thread pool, so a pooled SQLite
        # connection may be used from a thread other than the one that opened it.
        connect_args["check_same_thread"] = False
    engine_args: dict = {}
    if _is_sqlite_memory(db_url):
        # One connection per thread keeps an in-memory database alive for the
        # life of the engine.
        engine_args["poolclass"] = SingletonThreadPool
    engine = create_engine(db_url, connect_args=connect_args, **engine_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Turn any SQLAlchemy failure inside the block into UpstreamError.

    Domain errors raised inside the block pass through untouched. Stores that
    need a more specific mapping (IntegrityError -> DuplicateIdentity) catch
    it inside the block first.
    """
    try:
        yield
    except AlertServiceError:
        raise
    except SQLAlchemyError as exc:
        logger.error("Store failure during %s: %s", operation, exc.__class__.__name__)
        raise UpstreamError() from exc
