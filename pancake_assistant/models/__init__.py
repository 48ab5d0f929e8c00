"""SQLAlchemy models."""

from pancake_assistant.models.history import PancakeRecord
from pancake_assistant.models.preference import Preference
from pancake_assistant.models.recipe import Recipe
from pancake_assistant.models.recommendation import Recommendation

__all__ = [
    "Recipe",
    "PancakeRecord",
    "Recommendation",
    "Preference",
]
