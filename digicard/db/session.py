"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from digicard.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine():
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured.")
    # SQLite connections are shared across the threadpool that serves sync routes.
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


@lru_cache
def _get_sessionmaker():
    # Repositories hand entities back after the session closes.
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def get_session() -> Session:
    session: Session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


def reset_engine() -> None:
    """Dispose the cached engine so the next call re-reads DATABASE_URL."""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    _get_sessionmaker.cache_clear()
    get_engine.cache_clear()
