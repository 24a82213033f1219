"""Database engine and session management with connection pooling"""

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from finance_tracker.config import Settings


def build_engine(settings: Settings) -> Engine:
    """Create the process-wide engine from settings"""
    url = settings.database_url
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.endswith("://"):
            # In-memory SQLite must share a single connection across threads
            options["poolclass"] = StaticPool
        return create_engine(url, **options)

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """Dependency injection for database sessions"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
