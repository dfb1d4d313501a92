"""
Async engine construction for paged list queries.

The page statement and the count statement must read the same snapshot.
PostgreSQL/MySQL get that from ``REPEATABLE READ``. SQLite only gets it if a
real ``BEGIN`` is issued before the first read, which pysqlite skips by
default, and from WAL journaling on file databases so that other writers can
commit while a reader is still inside its transaction.
"""

import structlog
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from .config import Settings, get_settings

logger = structlog.get_logger()

_engine: AsyncEngine | None = None


def create_engine(settings: Settings | None = None) -> AsyncEngine:
    settings = settings or get_settings()
    url = make_url(settings.database_url)
    is_sqlite = url.get_backend_name() == "sqlite"

    kwargs = {"echo": settings.echo_sql}
    if settings.isolation_level:
        kwargs["isolation_level"] = settings.isolation_level
    elif not is_sqlite:
        kwargs["isolation_level"] = "REPEATABLE READ"
    if not is_sqlite:
        kwargs["pool_pre_ping"] = True

    engine = create_async_engine(url, **kwargs)
    if is_sqlite:
        _install_sqlite_transactions(engine, in_memory=url.database in (None, "", ":memory:"))

    logger.info("pagedquery.engine_created", backend=url.get_backend_name(), driver=url.get_driver_name())
    return engine


def _install_sqlite_transactions(engine: AsyncEngine, in_memory: bool) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        # stop the driver from managing transactions; "begin" below does it
        dbapi_connection.isolation_level = None
        if not in_memory:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def get_engine() -> AsyncEngine:
    """Process-wide engine, created on first use. Usable as a FastAPI dependency."""
    global _engine
    if _engine is None:
        _engine = create_engine()
    return _engine


async def dispose_engine() -> None:
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
