"""Pydantic schemas for API requests and responses."""

from pancake_assistant.schemas.history import HistoryResponse, RatingCreate, RatingResponse
from pancake_assistant.schemas.preference import PreferenceValue
from pancake_assistant.schemas.recipe import (
    CurrentRecipeUpdate,
    RecipeCreate,
    RecipeResponse,
    RecipeUpdate,
)
from pancake_assistant.schemas.recommendation import RecommendationResponse, StageResponse
from pancake_assistant.schemas.statistics import StatisticsResponse

__all__ = [
    "RecipeCreate",
    "RecipeUpdate",
    "RecipeResponse",
    "CurrentRecipeUpdate",
    "HistoryResponse",
    "RatingCreate",
    "RatingResponse",
    "RecommendationResponse",
    "StageResponse",
    "StatisticsResponse",
    "PreferenceValue",
]
