from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ..errors import CardsError, StorageError
from ..observability.logging import get_logger
from ..settings import settings
from .schema import metadata

log = get_logger("db")


def engine_options(url: URL) -> dict[str, Any]:
    opts: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_recycle": settings.db_pool_recycle_seconds,
        "echo": False,
    }
    if url.get_backend_name() == "mysql":
        opts["pool_size"] = settings.db_pool_size
        opts["max_overflow"] = settings.db_max_overflow
        # Only MySQL drivers understand connect_timeout.
        opts["connect_args"] = {"connect_timeout": settings.db_connect_timeout_seconds}
    return opts


@lru_cache(maxsize=1)
def _pooled_engine() -> Engine:
    # The pool replaces a connection-per-request; `connection()` still hands
    # out exactly one connection per operation and always returns it.
    url = settings.sqlalchemy_url()
    return create_engine(url, **engine_options(url))


def get_engine() -> Engine:
    return _pooled_engine()


def dispose_engine() -> None:
    if _pooled_engine.cache_info().currsize:
        _pooled_engine().dispose()
    _pooled_engine.cache_clear()


def _storage_error(operation: str, exc: Exception, *, message: str) -> StorageError:
    log.error("storage_error", operation=operation, error_type=type(exc).__name__, exc_info=exc)
    return StorageError(message=message, operation=operation, cause=exc)


@contextmanager
def connection(operation: str, *, message: str = "Server error") -> Iterator[Connection]:
    """
    Borrow one pooled connection inside a transaction.

    Commits on success, rolls back on error and returns the connection to the
    pool on every exit path. Any SQLAlchemy/driver failure (connect, syntax,
    constraint) is re-raised as ``StorageError`` carrying ``message``, the
    client-facing text for this operation.
    """
    try:
        with get_engine().begin() as conn:
            yield conn
    except CardsError:
        raise
    except SQLAlchemyError as e:
        raise _storage_error(operation, e, message=message) from e


def create_tables() -> None:
    with connection("create_tables", message="Server error: cannot create tables") as conn:
        metadata.create_all(conn, checkfirst=True)
