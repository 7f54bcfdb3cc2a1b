"""
SQLAlchemy engine, sessions and the declarative base.

SQLite is the default backend (a file under ./data); any other URL, such as
PostgreSQL on a hosted install, gets a pooled engine with pre-ping.
"""
import logging
import random
import time
from contextlib import contextmanager
from functools import wraps

from sqlalchemy import create_engine, event
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

logger = logging.getLogger("jobtrack.database")

Base = declarative_base()

MAX_RETRY_DELAY = 2.0


def _sqlite_pragmas(url: str) -> list:
    pragmas = ["busy_timeout=5000", "foreign_keys=ON"]
    # WAL needs a real file
    if url.rstrip("/") != "sqlite:" and ":memory:" not in url:
        pragmas.insert(0, "journal_mode=WAL")
    return pragmas


def create_app_engine(database_url: str = None, **engine_kwargs):
    """
    Engine for `database_url`, or for the configured database when omitted.

    Keyword arguments are handed to `create_engine` unchanged, which is how
    the tests pin an in-memory SQLite database to a single connection.
    """
    url = database_url or settings.database_url

    if not url.startswith("sqlite"):
        return create_engine(
            url,
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            **engine_kwargs,
        )

    sqlite_engine = create_engine(url, connect_args={"check_same_thread": False}, **engine_kwargs)
    pragmas = _sqlite_pragmas(url)

    @event.listens_for(sqlite_engine, "connect")
    def _on_connect(dbapi_conn, _record):
        cursor = dbapi_conn.cursor()
        for pragma in pragmas:
            cursor.execute(f"PRAGMA {pragma}")
        cursor.close()

    logger.info("SQLite engine ready (%s)", ", ".join(pragmas))
    return sqlite_engine


engine = create_app_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def is_retryable(exc: BaseException) -> bool:
    """Connection drops and lock timeouts are worth another try; constraint violations are not."""
    return isinstance(exc, DBAPIError) and not isinstance(exc, IntegrityError)


def with_retry(func):
    """Re-run a read when it hits a retryable database error, with jittered exponential backoff."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        attempts = max(1, settings.db_retry_max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except DBAPIError as exc:
                if attempt == attempts or not is_retryable(exc):
                    raise
                pause = min(settings.db_retry_base_delay * 2 ** (attempt - 1), MAX_RETRY_DELAY)
                pause += random.uniform(0, pause / 2)
                logger.warning(
                    "%s hit %s (attempt %d of %d), retrying in %.2fs",
                    func.__name__, type(exc).__name__, attempt, attempts, pause
                )
                time.sleep(pause)

    return wrapper


def get_db():
    """Request-scoped session for `Depends(get_db)`."""
    session = SessionLocal()
    try:
        yield session
    except DBAPIError:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def session_scope():
    """A session for startup tasks and scripts: commits on success, rolls back on error."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind=None):
    """Create every table straight from the models. Deployed databases go through Alembic instead."""
    from . import models  # noqa: F401
    from .auth import models as auth_models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
