"""Database configuration and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from pancake_assistant.config import get_settings

settings = get_settings()

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create all tables and bring pre-recipe databases up to date."""
    # Import all models here so they are registered with Base.metadata
    from pancake_assistant import models  # noqa: F401
    from pancake_assistant.services.legacy_migration import upgrade_legacy_schema

    bind = bind if bind is not None else engine
    with bind.begin() as connection:
        # The legacy upgrade must see the old history layout before create_all runs
        upgrade_legacy_schema(connection)
        Base.metadata.create_all(bind=connection)
