"""
Database engine and session factory.

DATABASE_URL selects the backend (SQLite file by default). Queries slower
than SLOW_QUERY_THRESHOLD_MS are logged at WARNING; set DEBUG_QUERIES to
see the timing logger's debug output as well.
"""

import logging
import os
import time

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

query_logger = logging.getLogger("diagramiq.query_timing")
query_logger.setLevel(logging.DEBUG if os.getenv("DEBUG_QUERIES") else logging.WARNING)

SLOW_QUERY_THRESHOLD_MS = int(os.getenv("SLOW_QUERY_THRESHOLD_MS", "100"))
LOGGED_STATEMENT_CHARS = 500
LOGGED_PARAMS_CHARS = 200


def resolve_database_url() -> str:
    url = os.getenv("DATABASE_URL", "sqlite:///./diagramiq.db")
    # SQLAlchemy only accepts the postgresql:// scheme
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # Request threads share the SQLite connection pool
        return create_engine(url, connect_args={"check_same_thread": False}, pool_pre_ping=True)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=1800,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
    )


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


@event.listens_for(Engine, "before_cursor_execute")
def _start_query_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


@event.listens_for(Engine, "after_cursor_execute")
def _log_slow_query(conn, cursor, statement, parameters, context, executemany):
    started = conn.info.get("query_start_time")
    if not started:
        return
    elapsed_ms = (time.perf_counter() - started.pop()) * 1000
    if elapsed_ms <= SLOW_QUERY_THRESHOLD_MS:
        return
    query_logger.warning(
        "Slow query (%.2fms): %s | params=%s",
        elapsed_ms,
        _clip(statement, LOGGED_STATEMENT_CHARS),
        _clip(str(parameters), LOGGED_PARAMS_CHARS),
    )


DATABASE_URL = resolve_database_url()
engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Request-scoped session for FastAPI dependencies"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
