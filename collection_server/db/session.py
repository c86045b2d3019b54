"""Database session and engine setup using SQLAlchemy's async API."""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from collection_server.config import DATABASE_URL

# Опции соединения для транзакций, которые меняют счётчик
WRITE_LOCK_OPTIONS = {"sqlite_begin_immediate": True}


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine with explicit BEGIN handling for SQLite.

    Transactions whose connection carries :data:`WRITE_LOCK_OPTIONS` start
    with BEGIN IMMEDIATE and take the write lock before their first statement,
    so concurrent ledger transactions queue on the busy handler instead of
    failing to upgrade a read lock. Everything else uses a deferred BEGIN and
    reads without waiting for writers.
    """
    engine = create_async_engine(url, echo=False, **kwargs)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _disable_driver_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine.sync_engine, "begin")
        def _begin(conn):
            if conn.get_execution_options().get("sqlite_begin_immediate"):
                conn.exec_driver_sql("BEGIN IMMEDIATE")
            else:
                conn.exec_driver_sql("BEGIN")

    return engine


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


engine = build_engine(DATABASE_URL)
SessionLocal = build_sessionmaker(engine)
