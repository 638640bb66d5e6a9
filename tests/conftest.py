"""Shared fixtures: an in-memory SQLite database per test."""

import os

# Must be set before academy.core.config is imported anywhere.
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import academy.db.base  # noqa: F401


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session
