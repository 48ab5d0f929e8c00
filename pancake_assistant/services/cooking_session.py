"""Cooking session controller.

Drives one pancake at a time through the phases

    READY -> FIRST_SIDE -> FLIP -> SECOND_SIDE -> DONE -> (rated) READY

measuring each side with a CookingTimer and handing the rated result to the
recipe service, which stores it and updates the recommendations.
"""

import logging

from pancake_assistant.exceptions import SessionStateError
from pancake_assistant.models.enums import CookingPhase, PancakeStage, Rating
from pancake_assistant.services.recipe_service import RatingResult, RecipeService
from pancake_assistant.services.recommendation_engine import (
    REFERENCE_TEMPERATURE,
    RecommendationData,
    RecommendationEngine,
    validate_temperature,
)
from pancake_assistant.services.timer import CookingTimer

logger = logging.getLogger(__name__)


class CookingSession:
    """State machine for cooking and rating a single pancake."""

    def __init__(
        self,
        recipe_service: RecipeService,
        engine: RecommendationEngine | None = None,
        timer: CookingTimer | None = None,
        recipe_id: int | None = None,
        temperature: int = REFERENCE_TEMPERATURE,
        auto_flip: bool = True,
    ):
        self.recipe_service = recipe_service
        self.engine = engine or recipe_service.engine
        self.timer = timer or CookingTimer()
        self.recipe_id = (
            recipe_id if recipe_id is not None else recipe_service.get_current_recipe_id()
        )
        self.temperature = validate_temperature(temperature)
        self.auto_flip = auto_flip

        self.phase = CookingPhase.READY
        self.first_side_time = 0
        self.second_side_time = 0
        self.stage = PancakeStage.RAW
        self.recommendation: RecommendationData = self.load_recommendation()

    def _require(self, *phases: CookingPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(phase.value for phase in phases)
            raise SessionStateError(f"Not allowed in phase '{self.phase.value}' (needs {allowed})")

    # --- Setup while READY ---

    def set_temperature(self, temperature: int) -> RecommendationData:
        self._require(CookingPhase.READY)
        self.temperature = validate_temperature(temperature)
        return self.load_recommendation()

    def select_recipe(self, recipe_id: int) -> RecommendationData:
        self._require(CookingPhase.READY)
        self.recipe_service.set_current_recipe(recipe_id)
        self.recipe_id = recipe_id
        return self.load_recommendation()

    def load_recommendation(self) -> RecommendationData:
        self.recommendation = self.engine.get_recommendation(self.recipe_id, self.temperature)
        return self.recommendation

    # --- Cooking ---

    def start_cooking(self) -> None:
        self._require(CookingPhase.READY)
        self.first_side_time = 0
        self.second_side_time = 0
        self.stage = PancakeStage.RAW
        self.phase = CookingPhase.FIRST_SIDE
        self.timer.reset()
        self.timer.start(self._on_tick)

    def flip(self) -> int:
        """Record the first side time and pause for the flip."""
        self._require(CookingPhase.FIRST_SIDE)
        self.first_side_time = self.timer.get_elapsed_seconds()
        self.timer.pause()
        self.phase = CookingPhase.FLIP
        return self.first_side_time

    def complete_flip(self) -> None:
        """Start timing the second side."""
        self._require(CookingPhase.FLIP)
        self.stage = PancakeStage.RAW
        self.timer.reset()
        self.phase = CookingPhase.SECOND_SIDE
        self.timer.start(self._on_tick)

    def finish_cooking(self) -> int:
        self._require(CookingPhase.SECOND_SIDE)
        self.second_side_time = self.timer.get_elapsed_seconds()
        self.timer.pause()
        self.phase = CookingPhase.DONE
        return self.second_side_time

    def advance(self) -> CookingPhase:
        """Single action button: start, flip or finish depending on the phase.

        Does nothing while flipping or waiting for a rating.
        """
        if self.phase == CookingPhase.READY:
            self.start_cooking()
        elif self.phase == CookingPhase.FIRST_SIDE:
            self.flip()
        elif self.phase == CookingPhase.SECOND_SIDE:
            self.finish_cooking()
        return self.phase

    def rate(self, rating: Rating | str) -> RatingResult:
        """Store the rated pancake and return to READY.

        If saving fails the session stays in DONE so the rating can be retried.
        """
        self._require(CookingPhase.DONE)
        result = self.recipe_service.record_rating(
            self.recipe_id,
            self.temperature,
            self.first_side_time,
            self.second_side_time,
            rating,
        )
        self.load_recommendation()
        self.phase = CookingPhase.READY
        logger.info(
            f"Rated pancake for recipe {self.recipe_id} at temp {self.temperature}: "
            f"{self.first_side_time}/{self.second_side_time}s"
        )
        return result

    # --- Progress ---

    def recommended_time(self) -> int:
        if self.phase in (CookingPhase.SECOND_SIDE, CookingPhase.DONE):
            return self.recommendation.second_side_time
        return self.recommendation.first_side_time

    def current_stage(self) -> PancakeStage:
        if self.phase not in (CookingPhase.FIRST_SIDE, CookingPhase.SECOND_SIDE):
            return self.stage
        return self.engine.get_pancake_stage(
            self.timer.get_elapsed_seconds(), self.recommended_time()
        )

    def should_flip(self) -> bool:
        """Whether to prompt for the flip: first side has reached its recommended time."""
        return (
            self.auto_flip
            and self.phase == CookingPhase.FIRST_SIDE
            and self.timer.get_elapsed_seconds() >= self.recommendation.first_side_time
        )

    def _on_tick(self, elapsed_ms: int) -> None:
        if self.phase in (CookingPhase.FIRST_SIDE, CookingPhase.SECOND_SIDE):
            self.stage = self.engine.get_pancake_stage(elapsed_ms // 1000, self.recommended_time())
