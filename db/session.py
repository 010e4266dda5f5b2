"""
db/session.py

SQLAlchemy engine and session factory.

The factory is thread-safe; ingestion chunks running on worker threads each
open their own session from it.
"""

from __future__ import annotations

import threading
from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import get_database_pool_settings, resolve_database_url

_init_lock = threading.Lock()
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def create_db_engine() -> Engine:
    database_url = resolve_database_url()
    if not database_url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported.")

    pool = get_database_pool_settings()
    return create_engine(
        database_url,
        echo=pool.echo,
        pool_pre_ping=True,
        pool_recycle=pool.pool_recycle,
        pool_size=pool.pool_size,
        max_overflow=pool.max_overflow,
    )


def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    global _engine
    with _init_lock:
        if _engine is None:
            _engine = create_db_engine()
        return _engine


def get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    engine = get_engine()
    with _init_lock:
        if _session_factory is None:
            _session_factory = sessionmaker(
                bind=engine,
                class_=Session,
                autoflush=False,
                expire_on_commit=False,
            )
        return _session_factory


def SessionLocal() -> Session:
    """Lazy session factory. Drop-in replacement for a sessionmaker() call."""
    return get_session_factory()()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
