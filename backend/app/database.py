"""
Engine, session factory and declarative base.

DATABASE_URL selects the backend; SQLite is used when it is unset. Queries
slower than SLOW_QUERY_THRESHOLD_MS are logged on the
"sqlalchemy.query_timing" logger.
"""

import logging
import os
import time

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

query_logger = logging.getLogger("sqlalchemy.query_timing")
query_logger.setLevel(logging.DEBUG if os.getenv("DEBUG_QUERIES") else logging.WARNING)

SLOW_QUERY_THRESHOLD_MS = int(os.getenv("SLOW_QUERY_THRESHOLD_MS", "100"))

# Seconds a SQLite writer waits on a locked database before failing
SQLITE_BUSY_TIMEOUT = int(os.getenv("SQLITE_BUSY_TIMEOUT", "15"))


def normalize_database_url(url: str) -> str:
    """Hosted Postgres hands out postgres:// URLs; SQLAlchemy only accepts postgresql://."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _mark_query_start(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


def _log_slow_query(conn, cursor, statement, parameters, context, executemany):
    start_times = conn.info.get("query_start_time", [])
    if not start_times:
        return
    elapsed_ms = (time.perf_counter() - start_times.pop()) * 1000
    if elapsed_ms > SLOW_QUERY_THRESHOLD_MS:
        params = str(parameters)
        query_logger.warning(
            "SLOW QUERY (%.2fms): %s | params=%s",
            elapsed_ms,
            statement if len(statement) <= 500 else statement[:500] + "...",
            params if len(params) <= 200 else params[:200] + "...",
        )


def build_engine(url: str) -> Engine:
    """
    Create an engine for `url` with slow-query logging attached.

    SQLite connections may be shared across threads (answers for one user
    are serialized in-process) and wait out a locked file instead of
    failing at once. Other backends get a bounded, recycled pool.
    """
    url = normalize_database_url(url)
    if url.startswith("sqlite"):
        new_engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT},
            pool_pre_ping=True,
        )
    else:
        new_engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_recycle=1800,
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
            pool_timeout=30,
        )

    event.listen(new_engine, "before_cursor_execute", _mark_query_start)
    event.listen(new_engine, "after_cursor_execute", _log_slow_query)
    return new_engine


DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL", "sqlite:///./grepandit.db"))

engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for FastAPI routes"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
