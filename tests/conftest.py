"""
Shared fixtures for the vrdb tests.

The package builds its engine from DATABASE_URL at import time, so point it
at SQLite before anything from vrdb is imported. Each test gets a fresh
SQLite file with the schema created from the ORM metadata.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker

from vrdb.db.base import Base
import vrdb.models  # noqa: F401


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'vr.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def count_rows(session_factory):
    """Count committed rows of a model in a separate session."""
    def _count(model) -> int:
        with session_factory() as s:
            return s.execute(select(func.count()).select_from(model)).scalar_one()
    return _count


@pytest.fixture
def client(session_factory, monkeypatch):
    from vrdb.api.routes import clouds, findings, health, snapshots

    for module in (clouds, findings, health, snapshots):
        monkeypatch.setattr(module, "SessionLocal", session_factory)

    from vrdb.main import app

    with TestClient(app) as test_client:
        yield test_client
