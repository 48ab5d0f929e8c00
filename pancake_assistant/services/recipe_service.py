"""Recipe service for batter profiles, the current recipe and rated cooks."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from pancake_assistant.exceptions import ConstraintViolation, InvalidInput, NotFound
from pancake_assistant.models.enums import BatterThickness
from pancake_assistant.models.history import PancakeRecord
from pancake_assistant.models.recipe import Recipe
from pancake_assistant.services.recommendation_engine import (
    RecommendationData,
    RecommendationEngine,
    coerce_rating,
    thickness_profile,
    validate_temperature,
)
from pancake_assistant.services.store import CURRENT_RECIPE_KEY, PancakeStore

logger = logging.getLogger(__name__)

DEFAULT_RECIPE_NAME = "Basic Pancakes"
DEFAULT_RECIPE_DESCRIPTION = "Standard pancake batter recipe"


@dataclass
class RatingResult:
    """Outcome of recording one rated pancake."""

    record: PancakeRecord
    recommendation: RecommendationData | None


def profile_fields(thickness: BatterThickness) -> dict:
    """Recipe column values for a batter thickness."""
    profile = thickness_profile(thickness.value)
    return {
        "batter_thickness": thickness.value,
        "default_base_time": profile.base_time,
        "temp_scale_factor": profile.temp_scale_factor,
        "second_side_ratio": profile.second_side_ratio,
    }


def new_recipe_fields(thickness: BatterThickness) -> dict:
    """Column values for a newly created recipe.

    Regular batter starts without explicit profile columns, so neighbor
    spreading uses its built-in scale until the recipe is edited.
    """
    if thickness == BatterThickness.REGULAR:
        return {"batter_thickness": thickness.value}
    return profile_fields(thickness)


def _coerce_thickness(value: BatterThickness | str) -> BatterThickness:
    try:
        return BatterThickness(value)
    except ValueError as exc:
        raise InvalidInput(f"Unknown batter thickness {value!r}") from exc


class RecipeService:
    """Service for recipe lifecycle and rating operations."""

    def __init__(self, db: Session, engine: RecommendationEngine | None = None):
        self.db = db
        self.store = PancakeStore(db)
        self.engine = engine or RecommendationEngine(db)

    # --- Recipes ---

    def get_recipe(self, recipe_id: int) -> Recipe:
        recipe = self.store.get_recipe(recipe_id)
        if recipe is None:
            raise NotFound(f"Recipe {recipe_id} not found")
        return recipe

    def list_recipes(self) -> list[Recipe]:
        return self.store.list_recipes()

    def ensure_default_recipe(self) -> Recipe:
        """Return the default recipe, creating it on first run."""
        recipe = self.store.get_default_recipe()
        if recipe is not None:
            return recipe

        recipe = Recipe(
            name=DEFAULT_RECIPE_NAME,
            description=DEFAULT_RECIPE_DESCRIPTION,
            is_default=True,
            has_data=False,
            **new_recipe_fields(BatterThickness.REGULAR),
        )
        self.store.add_recipe(recipe)
        if self.store.get_preference(CURRENT_RECIPE_KEY) is None:
            self.store.set_preference(CURRENT_RECIPE_KEY, recipe.id)
        self.store.commit()
        logger.info(f"Created default recipe {recipe.id}")
        return recipe

    def get_current_recipe_id(self) -> int:
        """Resolve the current recipe: preference, default, first, or a new default."""
        current_id = self.store.get_preference(CURRENT_RECIPE_KEY)
        if current_id is not None and self.store.get_recipe(current_id) is not None:
            return current_id

        recipe = self.store.get_default_recipe()
        if recipe is None:
            recipes = self.store.list_recipes()
            recipe = recipes[0] if recipes else self.ensure_default_recipe()

        self.store.set_preference(CURRENT_RECIPE_KEY, recipe.id)
        self.store.commit()
        return recipe.id

    def set_current_recipe(self, recipe_id: int) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        self.store.set_preference(CURRENT_RECIPE_KEY, recipe.id)
        self.store.commit()
        return recipe

    def create_recipe(
        self,
        name: str,
        description: str | None = None,
        batter_thickness: BatterThickness | str = BatterThickness.REGULAR,
    ) -> Recipe:
        """Create a recipe, seed its default recommendations and make it current."""
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Recipe name must not be empty")
        thickness = _coerce_thickness(batter_thickness)

        recipe = Recipe(
            name=name,
            description=description,
            is_default=False,
            has_data=False,
            **new_recipe_fields(thickness),
        )
        self.store.add_recipe(recipe)
        self.store.set_preference(CURRENT_RECIPE_KEY, recipe.id)

        # Commits the recipe, the preference and the seeded rows together
        self.engine.reset_recipe_recommendations(recipe.id)

        logger.info(f"Created recipe {recipe.id} ({thickness.value})")
        return recipe

    def update_recipe(
        self,
        recipe_id: int,
        name: str | None = None,
        description: str | None = None,
        batter_thickness: BatterThickness | str | None = None,
    ) -> Recipe:
        """Edit a recipe's name, description or thickness profile."""
        recipe = self.get_recipe(recipe_id)
        if recipe.is_default:
            raise ConstraintViolation("The default recipe cannot be edited")

        fields: dict = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise InvalidInput("Recipe name must not be empty")
            fields["name"] = name
        if description is not None:
            fields["description"] = description
        if batter_thickness is not None:
            fields.update(profile_fields(_coerce_thickness(batter_thickness)))

        self.store.update_recipe(recipe, **fields)
        self.store.commit()
        return recipe

    def delete_recipe(self, recipe_id: int) -> None:
        """Delete a recipe with its history and recommendations.

        The whole cascade is one transaction: if any step fails nothing is
        removed, leaving the recipe and its data intact.
        """
        recipe = self.get_recipe(recipe_id)
        if recipe.is_default:
            raise ConstraintViolation("The default recipe cannot be deleted")

        with self.engine.locks.hold(recipe_id):
            try:
                if self.store.get_preference(CURRENT_RECIPE_KEY) == recipe_id:
                    replacement = self.store.get_default_recipe()
                    if replacement is None:
                        replacement = next(
                            (r for r in self.store.list_recipes() if r.id != recipe_id), None
                        )
                    self.store.set_preference(
                        CURRENT_RECIPE_KEY, replacement.id if replacement else None
                    )

                history_count = self.store.delete_history_for_recipe(recipe_id)
                recommendation_count = self.store.clear_recommendations(recipe_id)
                self.store.delete_recipe(recipe)
                self.store.commit()
            except Exception:
                self.store.rollback()
                logger.error(f"Deleting recipe {recipe_id} failed; nothing was removed")
                raise

        logger.info(
            f"Deleted recipe {recipe_id} with {history_count} history records "
            f"and {recommendation_count} recommendations"
        )

    # --- Ratings and history ---

    def record_rating(
        self,
        recipe_id: int,
        temperature: int,
        first_side_time: int,
        second_side_time: int,
        rating: str,
    ) -> RatingResult:
        """Store a rated pancake and learn from it.

        Learning only runs when the first side was actually timed.
        """
        validate_temperature(temperature)
        rating = coerce_rating(rating)
        if first_side_time < 0 or second_side_time < 0:
            raise InvalidInput("Side times must not be negative")
        self.get_recipe(recipe_id)

        record = self.store.add_history(
            recipe_id=recipe_id,
            temperature=temperature,
            first_side_time=first_side_time,
            second_side_time=second_side_time,
            rating=rating.value,
        )

        recommendation = None
        if first_side_time > 0:
            recommendation = self.engine.update_recommendation(
                temperature, first_side_time, second_side_time, rating, recipe_id
            )
        else:
            self.store.commit()

        return RatingResult(record=record, recommendation=recommendation)

    def get_history(self, recipe_id: int, limit: int = 20) -> list[PancakeRecord]:
        self.get_recipe(recipe_id)
        return self.store.get_recent_history(recipe_id, limit)

    def delete_history_record(self, history_id: int) -> None:
        record = self.store.get_history_record(history_id)
        if record is None:
            raise NotFound(f"History record {history_id} not found")
        self.store.delete_history(record)
        self.store.commit()

    def clear_history(self, recipe_id: int) -> list[RecommendationData]:
        """Remove all history of a recipe and reseed its default recommendations."""
        self.get_recipe(recipe_id)
        with self.engine.locks.hold(recipe_id):
            count = self.store.delete_history_for_recipe(recipe_id)
            recommendations = self.engine.reset_recipe_recommendations(recipe_id)
        logger.info(f"Cleared {count} history records for recipe {recipe_id}")
        return recommendations
