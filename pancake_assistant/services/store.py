"""Persistent store for recipes, history, recommendations and preferences.

The store is a thin keyed-record layer over the SQLAlchemy session. It holds
no business rules: cascades, default-recipe protection and learning live in
the services that call it.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pancake_assistant.exceptions import ConstraintViolation, StoreUnavailable
from pancake_assistant.models.history import PancakeRecord
from pancake_assistant.models.preference import Preference
from pancake_assistant.models.recipe import Recipe
from pancake_assistant.models.recommendation import Recommendation

logger = logging.getLogger(__name__)

CURRENT_RECIPE_KEY = "currentRecipeId"


class PancakeStore:
    """Keyed CRUD and indexed queries over the four record families."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        """Translate database failures into domain errors, rolling back first."""
        try:
            yield
        except IntegrityError as exc:
            self.db.rollback()
            raise ConstraintViolation(f"Cannot {action}: conflicting record exists") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Store failure during '{action}': {exc}")
            raise StoreUnavailable(f"Storage failed during '{action}'") from exc

    def commit(self) -> None:
        with self._guard("commit"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    # --- Recipes ---

    def add_recipe(self, recipe: Recipe) -> Recipe:
        with self._guard("add recipe"):
            self.db.add(recipe)
            self.db.flush()
        return recipe

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        with self._guard("get recipe"):
            return self.db.get(Recipe, recipe_id)

    def list_recipes(self) -> list[Recipe]:
        with self._guard("list recipes"):
            return self.db.query(Recipe).order_by(Recipe.id).all()

    def get_default_recipe(self) -> Recipe | None:
        with self._guard("get default recipe"):
            return self.db.query(Recipe).filter(Recipe.is_default.is_(True)).first()

    def update_recipe(self, recipe: Recipe, **fields: Any) -> Recipe:
        """Write the given fields onto the recipe row."""
        with self._guard("update recipe"):
            for name, value in fields.items():
                setattr(recipe, name, value)
            self.db.flush()
        return recipe

    def delete_recipe(self, recipe: Recipe) -> None:
        """Delete the recipe row only; dependent rows must already be gone."""
        with self._guard("delete recipe"):
            self.db.query(Recipe).filter(Recipe.id == recipe.id).delete()
            self.db.flush()

    # --- History ---

    def add_history(
        self,
        recipe_id: int,
        temperature: int,
        first_side_time: int,
        second_side_time: int,
        rating: str,
        timestamp: datetime | None = None,
    ) -> PancakeRecord:
        record = PancakeRecord(
            recipe_id=recipe_id,
            temperature=temperature,
            first_side_time=first_side_time,
            second_side_time=second_side_time,
            rating=rating,
            timestamp=timestamp or datetime.now(UTC),
        )
        with self._guard("add history record"):
            self.db.add(record)
            self.db.flush()
        return record

    def get_history_record(self, history_id: int) -> PancakeRecord | None:
        with self._guard("get history record"):
            return self.db.get(PancakeRecord, history_id)

    def delete_history(self, record: PancakeRecord) -> None:
        with self._guard("delete history record"):
            self.db.delete(record)
            self.db.flush()

    def get_recent_history(self, recipe_id: int, limit: int = 10) -> list[PancakeRecord]:
        """Most recent records for a recipe, newest first."""
        with self._guard("get recent history"):
            return (
                self.db.query(PancakeRecord)
                .filter(PancakeRecord.recipe_id == recipe_id)
                .order_by(PancakeRecord.timestamp.desc(), PancakeRecord.id.desc())
                .limit(limit)
                .all()
            )

    def get_all_history(self, recipe_id: int | None = None) -> list[PancakeRecord]:
        """All records, optionally restricted to one recipe, oldest first."""
        with self._guard("get history"):
            query = self.db.query(PancakeRecord)
            if recipe_id is not None:
                query = query.filter(PancakeRecord.recipe_id == recipe_id)
            return query.order_by(PancakeRecord.timestamp, PancakeRecord.id).all()

    def get_history_by_temperature(self, temperature: int, recipe_id: int) -> list[PancakeRecord]:
        with self._guard("get history by temperature"):
            return (
                self.db.query(PancakeRecord)
                .filter(
                    PancakeRecord.temperature == temperature,
                    PancakeRecord.recipe_id == recipe_id,
                )
                .order_by(PancakeRecord.timestamp, PancakeRecord.id)
                .all()
            )

    def delete_history_for_recipe(self, recipe_id: int) -> int:
        """Delete every history record of a recipe; returns the number removed."""
        with self._guard("delete recipe history"):
            count = (
                self.db.query(PancakeRecord).filter(PancakeRecord.recipe_id == recipe_id).delete()
            )
            self.db.flush()
        return count

    # --- Recommendations ---

    def get_recommendation(self, recipe_id: int, temperature: int) -> Recommendation | None:
        with self._guard("get recommendation"):
            return self.db.get(Recommendation, (recipe_id, temperature))

    def save_recommendation(
        self,
        recipe_id: int,
        temperature: int,
        first_side_time: int,
        second_side_time: int,
        confidence: float = 0.0,
        data_points: float = 0.0,
    ) -> Recommendation:
        """Insert or fully replace the row for (recipe_id, temperature).

        Every column is written on each save so no field from an earlier
        version of the row survives.
        """
        with self._guard("save recommendation"):
            row = self.db.get(Recommendation, (recipe_id, temperature))
            if row is None:
                row = Recommendation(recipe_id=recipe_id, temperature=temperature)
                self.db.add(row)
            row.first_side_time = first_side_time
            row.second_side_time = second_side_time
            row.confidence = confidence or 0.0
            row.data_points = data_points or 0.0
            row.last_updated = datetime.now(UTC)
            self.db.flush()
        return row

    def list_recommendations(self, recipe_id: int) -> list[Recommendation]:
        with self._guard("list recommendations"):
            return (
                self.db.query(Recommendation)
                .filter(Recommendation.recipe_id == recipe_id)
                .order_by(Recommendation.temperature)
                .all()
            )

    def clear_recommendations(self, recipe_id: int) -> int:
        """Delete every stored recommendation of a recipe; returns the number removed."""
        with self._guard("clear recommendations"):
            count = (
                self.db.query(Recommendation)
                .filter(Recommendation.recipe_id == recipe_id)
                .delete()
            )
            self.db.flush()
        return count

    # --- Preferences ---

    def get_preference(self, key: str, default: Any = None) -> Any:
        with self._guard("get preference"):
            preference = self.db.get(Preference, key)
        if preference is None or preference.value is None:
            return default
        return preference.value

    def set_preference(self, key: str, value: Any) -> None:
        with self._guard("save preference"):
            preference = self.db.get(Preference, key)
            if preference is None:
                preference = Preference(key=key)
                self.db.add(preference)
            preference.value = value
            self.db.flush()
