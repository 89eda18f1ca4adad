"""Shared fixtures: a fresh SQLite database per test, services wired to it, and a
Flask test client for the HTTP surface."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app import create_app
from config import Settings
from models import Base
from repositories import TodoRepository, UserRepository
from services.session_flow import SessionFlow
from services.token_service import TokenService


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr("services.credential_store.BCRYPT_ROUNDS", 4)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret="test-secret-" * 8,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        default_list_limit=20,
        log_level="WARNING",
    )


@pytest.fixture
def session(settings):
    engine = create_engine(settings.database_url, future=True)
    Base.metadata.create_all(engine)
    db = sessionmaker(bind=engine, autoflush=False)()
    yield db
    db.close()
    engine.dispose()


@pytest.fixture
def users(session):
    return UserRepository(session)


@pytest.fixture
def items(session):
    return TodoRepository(session)


@pytest.fixture
def tokens(settings):
    return TokenService(settings)


@pytest.fixture
def flow(session, tokens):
    return SessionFlow.for_session(session, tokens)


@pytest.fixture
def clock(monkeypatch):
    """Deterministic, strictly increasing timestamps for item mutations."""
    state = {"now": datetime(2024, 1, 1, 12, 0, 0)}

    def tick():
        state["now"] += timedelta(seconds=1)
        return state["now"]

    monkeypatch.setattr("services.item_lifecycle.utcnow", tick)
    return state


@pytest.fixture
def app(settings):
    application = create_app(settings)
    application.config["TESTING"] = True
    yield application
    application.extensions["db_engine"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()
