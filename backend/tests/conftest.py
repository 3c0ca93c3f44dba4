"""Pytest configuration and shared fixtures."""

import os

# Settings and the global engine are built at import time; point them at a
# throwaway database before any app module is imported.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///./.pytest_app.db")

from collections.abc import Callable, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from app.db.base import create_all, drop_all  # noqa: E402
from app.db.engine import create_db_engine  # noqa: E402
from app.models.question import Category, Difficulty, Question  # noqa: E402
from tests.helpers.seed import create_category, create_questions  # noqa: E402

# Set TEST_DATABASE_URL to run against PostgreSQL instead of a per-test SQLite file
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")


@pytest.fixture(scope="function")
def engine(tmp_path) -> Generator[Engine, None, None]:
    """Engine over a fresh schema for each test."""
    url = TEST_DATABASE_URL or f"sqlite:///{tmp_path / 'test.db'}"
    test_engine = create_db_engine(url)
    create_all(test_engine)
    try:
        yield test_engine
    finally:
        drop_all(test_engine)
        test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    """Database session for the test body."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def other_db(session_factory) -> Generator[Session, None, None]:
    """Second independent session, used to interleave competing requests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def category(db) -> Category:
    return create_category(db, "General Knowledge")


@pytest.fixture
def easy_questions(db, category) -> list[Question]:
    """10 EASY questions with no usage history."""
    questions = create_questions(db, category, count=10, difficulty=Difficulty.EASY)
    db.commit()
    return questions


@pytest.fixture
def mixed_questions(db, category) -> dict[Difficulty, list[Question]]:
    """4 questions per difficulty tier."""
    by_difficulty = {
        difficulty: create_questions(db, category, count=4, difficulty=difficulty)
        for difficulty in Difficulty
    }
    db.commit()
    return by_difficulty


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """FastAPI test client; every request gets its own session, like production."""
    from app.db.session import get_db
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def count_rows(db) -> Callable[[type], int]:
    from sqlalchemy import func, select

    def _count(model: type) -> int:
        db.expire_all()
        return db.execute(select(func.count()).select_from(model)).scalar_one()

    return _count
