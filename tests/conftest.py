"""Pytest configuration and fixtures."""

import os
import random

# Deterministic engine and a throwaway database for the app under test
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("RECOMMENDATION_JITTER", "false")
os.environ.setdefault("EXPLORATION_NOISE", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pancake_assistant import models  # noqa: F401
from pancake_assistant.database import Base, get_db
from pancake_assistant.main import app
from pancake_assistant.services.locks import KeyedLocks
from pancake_assistant.services.recipe_service import RecipeService
from pancake_assistant.services.recommendation_engine import RecommendationEngine

SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"]

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def rec_engine(db):
    """Recommendation engine without jitter or exploration noise."""
    return RecommendationEngine(
        db,
        rng=random.Random(1234),
        jitter=False,
        exploration_noise=False,
        locks=KeyedLocks(),
    )


@pytest.fixture
def recipe_service(db, rec_engine):
    """Recipe service sharing the deterministic engine."""
    return RecipeService(db, rec_engine)


@pytest.fixture
def default_recipe(recipe_service):
    """The built-in default recipe."""
    return recipe_service.ensure_default_recipe()
