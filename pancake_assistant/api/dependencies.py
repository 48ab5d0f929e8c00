"""FastAPI dependencies for database-backed services."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from pancake_assistant.database import get_db
from pancake_assistant.services.locks import KeyedLocks
from pancake_assistant.services.recipe_service import RecipeService
from pancake_assistant.services.recommendation_engine import RecommendationEngine
from pancake_assistant.services.statistics import StatisticsService
from pancake_assistant.services.store import PancakeStore


def get_key_locks(request: Request) -> KeyedLocks:
    """Get the application-wide per-recipe locks."""
    locks = getattr(request.app.state, "key_locks", None)
    if locks is None:
        locks = KeyedLocks()
        request.app.state.key_locks = locks
    return locks


def get_store(
    db: Annotated[Session, Depends(get_db)],
) -> PancakeStore:
    """Get store bound to the request session."""
    return PancakeStore(db)


def get_engine(
    db: Annotated[Session, Depends(get_db)],
    locks: Annotated[KeyedLocks, Depends(get_key_locks)],
) -> RecommendationEngine:
    """Get recommendation engine sharing the application locks."""
    return RecommendationEngine(db, locks=locks)


def get_recipe_service(
    db: Annotated[Session, Depends(get_db)],
    engine: Annotated[RecommendationEngine, Depends(get_engine)],
) -> RecipeService:
    """Get recipe service with dependencies."""
    return RecipeService(db, engine)


def get_statistics_service(
    db: Annotated[Session, Depends(get_db)],
) -> StatisticsService:
    """Get statistics service."""
    return StatisticsService(db)
