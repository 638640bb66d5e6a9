"""
Database session management.

Provides SQLModel engine and session creation.
"""

from typing import Any, Generator

from sqlmodel import Session, create_engine

from academy.core.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return { "connect_args": { "check_same_thread": False } }
    return { "pool_pre_ping": True,  # Verify connections before using
             "pool_size": 5,  # Connection pool size
             "max_overflow": 10,  # Max connections beyond pool_size
             }


engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG, **_engine_options(settings.DATABASE_URL))


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI endpoints to get database session.

    Yields:
        SQLModel Session instance
    """
    with Session(engine) as session:
        yield session
