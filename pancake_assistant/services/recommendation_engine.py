"""Adaptive cook-time recommendation engine.

Learns per-recipe, per-temperature side times from bad/mid/good ratings with a
simple exponential-adjustment rule, then spreads a damped share of each good or
mid rating to temperatures up to three steps away.
"""

import logging
import math
import random
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from pancake_assistant.config import get_settings
from pancake_assistant.exceptions import InvalidInput, NotFound
from pancake_assistant.models.enums import BatterThickness, PancakeStage, Rating
from pancake_assistant.models.recipe import Recipe
from pancake_assistant.models.recommendation import Recommendation
from pancake_assistant.services.locks import KeyedLocks
from pancake_assistant.services.store import PancakeStore

logger = logging.getLogger(__name__)

MIN_TEMPERATURE = 1
MAX_TEMPERATURE = 9
REFERENCE_TEMPERATURE = 5

# Fallback cook time bounds in seconds
MIN_COOK_TIME = 30
MAX_COOK_TIME = 240

LEARNING_RATES = {
    "initial": 0.4,
    "confident": 0.2,
    "finetuning": 0.07,
}
CONFIDENCE_THRESHOLD = 3  # good ratings before switching to the confident rate
FINETUNING_THRESHOLD = 4

HISTORY_WINDOW = 50
CONFIDENCE_WINDOW = 10

# Influence of a rating on temperatures 1, 2 and 3 steps away
TEMPERATURE_SIMILARITY = {1: 0.6, 2: 0.3, 3: 0.1}
NEIGHBOR_RADIUS = 3
NEIGHBOR_TEMP_SCALE = 7  # seconds per level when the recipe has no scale factor
NEIGHBOR_CONFIDENCE_STEP = 0.05

# Adjustment tuning
BAD_CLOSE_THRESHOLD = 15
BAD_CLOSE_MULTIPLIER = 0.4
BAD_FAR_MULTIPLIER = 0.9
MID_FAR_THRESHOLD = 25
MID_FAR_MULTIPLIER = 0.6
MID_CLOSE_MULTIPLIER = 0.2
EXPLORATION_NOISE = 0.2
DEFAULT_JITTER = 0.05


@dataclass(frozen=True)
class ThicknessProfile:
    """Timing defaults for one batter thickness."""

    base_time: int
    temp_scale_factor: float
    second_side_ratio: float


THICKNESS_PROFILES = {
    BatterThickness.REGULAR: ThicknessProfile(90, 10, 0.8),
    BatterThickness.THIN: ThicknessProfile(70, 7, 0.9),
    BatterThickness.THICK: ThicknessProfile(110, 15, 0.75),
}


@dataclass
class RecommendationData:
    """Plain recommendation record handed to callers."""

    recipe_id: int
    temperature: int
    first_side_time: int
    second_side_time: int
    confidence: float = 0.0
    data_points: float = 0.0
    last_updated: datetime | None = None
    persisted: bool = False

    @classmethod
    def from_row(cls, row: Recommendation) -> "RecommendationData":
        return cls(
            recipe_id=row.recipe_id,
            temperature=row.temperature,
            first_side_time=row.first_side_time,
            second_side_time=row.second_side_time,
            confidence=row.confidence or 0.0,
            data_points=row.data_points or 0.0,
            last_updated=row.last_updated,
            persisted=True,
        )


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side, like Math.round."""
    return math.floor(value + 0.5)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def thickness_profile(thickness: str | None) -> ThicknessProfile:
    """Profile for a thickness value; unknown or missing values count as regular."""
    try:
        return THICKNESS_PROFILES[BatterThickness(thickness)]
    except ValueError:
        return THICKNESS_PROFILES[BatterThickness.REGULAR]


def cook_time_bounds(recipe: Recipe | None) -> tuple[int, int]:
    """Recipe-specific [min, max] cook time, falling back to 30-240s."""
    if recipe is None:
        return MIN_COOK_TIME, MAX_COOK_TIME
    return recipe.min_cook_time or MIN_COOK_TIME, recipe.max_cook_time or MAX_COOK_TIME


def learning_rate_for(good_count: int) -> float:
    """Pick the learning rate from the number of recent good ratings."""
    if good_count >= FINETUNING_THRESHOLD:
        return LEARNING_RATES["finetuning"]
    if good_count >= CONFIDENCE_THRESHOLD:
        return LEARNING_RATES["confident"]
    return LEARNING_RATES["initial"]


def get_pancake_stage(elapsed_seconds: float, recommended_seconds: float) -> PancakeStage:
    """Doneness stage from the percentage of the recommended time elapsed."""
    if recommended_seconds <= 0:
        return PancakeStage.BURNT if elapsed_seconds > 0 else PancakeStage.RAW

    percentage = elapsed_seconds / recommended_seconds * 100
    if percentage < 20:
        return PancakeStage.RAW
    if percentage < 45:
        return PancakeStage.COOKING
    if percentage < 75:
        return PancakeStage.MEDIUM
    if percentage < 95:
        return PancakeStage.COOKED
    return PancakeStage.BURNT


def validate_temperature(temperature: int) -> int:
    if isinstance(temperature, bool) or not isinstance(temperature, int):
        raise InvalidInput(f"Temperature must be an integer, got {temperature!r}")
    if not MIN_TEMPERATURE <= temperature <= MAX_TEMPERATURE:
        raise InvalidInput(
            f"Temperature must be between {MIN_TEMPERATURE} and {MAX_TEMPERATURE}, "
            f"got {temperature}"
        )
    return temperature


def coerce_rating(rating: Rating | str) -> Rating:
    try:
        return Rating(rating)
    except ValueError as exc:
        raise InvalidInput(f"Unknown rating {rating!r}") from exc


class RecommendationEngine:
    """Reads and learns cook time recommendations for one store."""

    def __init__(
        self,
        db: Session,
        *,
        rng: random.Random | None = None,
        jitter: bool | None = None,
        exploration_noise: bool | None = None,
        locks: KeyedLocks | None = None,
    ):
        settings = get_settings()
        self.store = PancakeStore(db)
        self.rng = rng or random.Random(settings.random_seed)
        self.jitter = settings.recommendation_jitter if jitter is None else jitter
        self.exploration_noise = (
            settings.exploration_noise if exploration_noise is None else exploration_noise
        )
        self.locks = locks or KeyedLocks()

    # --- Defaults ---

    def default_first_side_time(self, temperature: int, recipe: Recipe | None = None) -> int:
        """Unlearned first side time for a temperature and batter profile."""
        profile = thickness_profile(recipe.batter_thickness if recipe is not None else None)
        seconds = round_half_up(
            profile.base_time - (temperature - REFERENCE_TEMPERATURE) * profile.temp_scale_factor
        )
        if self.jitter and not (recipe is not None and recipe.has_data):
            # Spread initial suggestions so new recipes do not all look identical
            seconds = round_half_up(seconds + seconds * DEFAULT_JITTER * self.rng.uniform(-1, 1))
        return int(clamp(seconds, *cook_time_bounds(recipe)))

    def default_second_side_time(self, temperature: int, recipe: Recipe | None = None) -> int:
        return self._second_side_from(self.default_first_side_time(temperature, recipe), recipe)

    def default_times(self, temperature: int, recipe: Recipe | None = None) -> tuple[int, int]:
        """First and second side defaults derived from a single first side draw."""
        first = self.default_first_side_time(temperature, recipe)
        return first, self._second_side_from(first, recipe)

    def _second_side_from(self, first_side_time: int, recipe: Recipe | None) -> int:
        profile = thickness_profile(recipe.batter_thickness if recipe is not None else None)
        ratio = profile.second_side_ratio
        if recipe is not None and recipe.second_side_ratio:
            ratio = recipe.second_side_ratio
        return int(clamp(round_half_up(first_side_time * ratio), *cook_time_bounds(recipe)))

    # --- Reads ---

    def get_recommendation(self, recipe_id: int, temperature: int) -> RecommendationData:
        """Stored recommendation, or an unsaved default when none exists yet."""
        validate_temperature(temperature)
        row = self.store.get_recommendation(recipe_id, temperature)
        if row is not None:
            return RecommendationData.from_row(row)
        return self._synthesize(recipe_id, temperature, self.store.get_recipe(recipe_id))

    def get_recipe_recommendations(self, recipe_id: int) -> list[RecommendationData]:
        """Effective recommendation for every temperature level of a recipe."""
        stored = {row.temperature: row for row in self.store.list_recommendations(recipe_id)}
        recipe = None
        if len(stored) < MAX_TEMPERATURE - MIN_TEMPERATURE + 1:
            recipe = self.store.get_recipe(recipe_id)

        result = []
        for temperature in range(MIN_TEMPERATURE, MAX_TEMPERATURE + 1):
            if temperature in stored:
                result.append(RecommendationData.from_row(stored[temperature]))
            else:
                result.append(self._synthesize(recipe_id, temperature, recipe))
        return result

    def _synthesize(
        self, recipe_id: int, temperature: int, recipe: Recipe | None
    ) -> RecommendationData:
        first, second = self.default_times(temperature, recipe)
        return RecommendationData(
            recipe_id=recipe_id,
            temperature=temperature,
            first_side_time=first,
            second_side_time=second,
        )

    def _current(
        self, recipe_id: int, temperature: int, recipe: Recipe | None
    ) -> RecommendationData:
        row = self.store.get_recommendation(recipe_id, temperature)
        if row is not None:
            return RecommendationData.from_row(row)
        return self._synthesize(recipe_id, temperature, recipe)

    # --- Learning ---

    def calculate_adjustment(
        self,
        actual: float,
        recommended: float,
        rating_factor: int,
        rate: float,
    ) -> float:
        """Signed change to apply to a recommended side time.

        Good pulls toward the observed time. Bad pushes away from it, gently
        when the observation was close to the recommendation. Mid nudges toward
        it, harder when the gap is large.
        """
        diff = actual - recommended

        if rating_factor > 0:
            adjustment = diff * rate
        elif rating_factor < 0:
            if abs(diff) < BAD_CLOSE_THRESHOLD:
                adjustment = -diff * rate * BAD_CLOSE_MULTIPLIER
            else:
                adjustment = -diff * rate * BAD_FAR_MULTIPLIER
        else:
            if abs(diff) > MID_FAR_THRESHOLD:
                adjustment = diff * rate * MID_FAR_MULTIPLIER
            else:
                adjustment = diff * rate * MID_CLOSE_MULTIPLIER

        if self.exploration_noise:
            adjustment += rate * EXPLORATION_NOISE * self.rng.uniform(-1, 1)

        return adjustment

    def update_recommendation(
        self,
        temperature: int,
        first_side_time: int,
        second_side_time: int,
        rating: Rating | str,
        recipe_id: int,
    ) -> RecommendationData:
        """Learn from one rated cook and persist the result.

        Updates the rated temperature, marks the recipe as having real data,
        then propagates to neighboring temperatures. Everything is committed
        as one unit.
        """
        validate_temperature(temperature)
        rating = coerce_rating(rating)
        if first_side_time < 0 or second_side_time < 0:
            raise InvalidInput("Side times must not be negative")

        with self.locks.hold(recipe_id):
            recipe = self.store.get_recipe(recipe_id)
            if recipe is None:
                raise NotFound(f"Recipe {recipe_id} not found")

            current = self._current(recipe_id, temperature, recipe)

            history = self.store.get_recent_history(recipe_id, HISTORY_WINDOW)
            at_temperature = [item for item in history if item.temperature == temperature]
            recent = at_temperature[:CONFIDENCE_WINDOW]
            good_count = sum(1 for item in recent if item.rating == Rating.GOOD.value)

            confidence = good_count / len(recent) if recent else 0.0
            rate = learning_rate_for(good_count)
            min_time, max_time = cook_time_bounds(recipe)

            first_adjustment = self.calculate_adjustment(
                first_side_time, current.first_side_time, rating.factor, rate
            )
            second_adjustment = self.calculate_adjustment(
                second_side_time, current.second_side_time, rating.factor, rate
            )
            new_first = round_half_up(
                clamp(current.first_side_time + first_adjustment, min_time, max_time)
            )
            new_second = round_half_up(
                clamp(current.second_side_time + second_adjustment, min_time, max_time)
            )

            if not recipe.has_data:
                self.store.update_recipe(recipe, has_data=True)

            row = self.store.save_recommendation(
                recipe_id,
                temperature,
                first_side_time=new_first,
                second_side_time=new_second,
                confidence=confidence,
                data_points=(current.data_points or 0) + 1,
            )
            result = RecommendationData.from_row(row)

            self.update_neighboring_temperatures(
                recipe_id, temperature, first_side_time, second_side_time, rating, recipe
            )
            self.store.commit()

        logger.info(
            f"Recipe {recipe_id} temp {temperature} rated {rating.value}: "
            f"{current.first_side_time}/{current.second_side_time}s -> "
            f"{new_first}/{new_second}s (rate {rate}, confidence {confidence:.2f})"
        )
        return result

    def update_neighboring_temperatures(
        self,
        recipe_id: int,
        rated_temperature: int,
        first_side_time: int,
        second_side_time: int,
        rating: Rating | str,
        recipe: Recipe | None,
    ) -> list[RecommendationData]:
        """Spread a damped share of a good or mid rating to nearby temperatures.

        Bad ratings are not propagated. Does not commit.
        """
        rating = coerce_rating(rating)
        if rating not in (Rating.GOOD, Rating.MID):
            return []

        scale = NEIGHBOR_TEMP_SCALE
        if recipe is not None and recipe.temp_scale_factor:
            scale = recipe.temp_scale_factor
        min_time, max_time = cook_time_bounds(recipe)
        rating_weight = 1.0 if rating == Rating.GOOD else 0.5

        low = max(MIN_TEMPERATURE, rated_temperature - NEIGHBOR_RADIUS)
        high = min(MAX_TEMPERATURE, rated_temperature + NEIGHBOR_RADIUS)

        updated = []
        for temperature in range(low, high + 1):
            if temperature == rated_temperature:
                continue

            weight = TEMPERATURE_SIMILARITY[abs(rated_temperature - temperature)]
            neighbor = self._current(recipe_id, temperature, recipe)
            scaled_rate = rating_weight * weight * LEARNING_RATES["initial"]

            # Higher temperature needs less time
            temp_adjustment = (temperature - rated_temperature) * scale
            target_first = first_side_time - temp_adjustment
            target_second = second_side_time - temp_adjustment * 0.8

            first_adjustment = (target_first - neighbor.first_side_time) * scaled_rate * weight
            second_adjustment = (target_second - neighbor.second_side_time) * scaled_rate * weight

            new_first = round_half_up(
                clamp(neighbor.first_side_time + first_adjustment, min_time, max_time)
            )
            new_second = round_half_up(
                clamp(neighbor.second_side_time + second_adjustment, min_time, max_time)
            )

            # A level with no real observations must stay unobserved
            data_points = neighbor.data_points + weight if neighbor.data_points > 0 else 0.0
            confidence = min(1.0, neighbor.confidence + weight * NEIGHBOR_CONFIDENCE_STEP)

            row = self.store.save_recommendation(
                recipe_id,
                temperature,
                first_side_time=new_first,
                second_side_time=new_second,
                confidence=confidence,
                data_points=data_points,
            )
            logger.debug(
                f"Neighbor temp {temperature} (w={weight}): "
                f"{neighbor.first_side_time}->{new_first}s, "
                f"{neighbor.second_side_time}->{new_second}s"
            )
            updated.append(RecommendationData.from_row(row))

        return updated

    def reset_recipe_recommendations(self, recipe_id: int) -> list[RecommendationData]:
        """Replace every stored recommendation of a recipe with fresh defaults."""
        with self.locks.hold(recipe_id):
            recipe = self.store.get_recipe(recipe_id)
            if recipe is None:
                raise NotFound(f"Recipe {recipe_id} not found")

            self.store.clear_recommendations(recipe_id)

            rows = []
            for temperature in range(MIN_TEMPERATURE, MAX_TEMPERATURE + 1):
                first, second = self.default_times(temperature, recipe)
                row = self.store.save_recommendation(
                    recipe_id,
                    temperature,
                    first_side_time=first,
                    second_side_time=second,
                    confidence=0.0,
                    data_points=0.0,
                )
                rows.append(RecommendationData.from_row(row))
            self.store.commit()

        logger.info(f"Reset recommendations for recipe {recipe_id}")
        return rows

    @staticmethod
    def get_pancake_stage(elapsed_seconds: float, recommended_seconds: float) -> PancakeStage:
        return get_pancake_stage(elapsed_seconds, recommended_seconds)
