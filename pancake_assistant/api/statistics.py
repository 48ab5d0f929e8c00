"""Statistics and pancake stage endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from pancake_assistant.api.dependencies import get_recipe_service, get_statistics_service
from pancake_assistant.schemas.recommendation import StageResponse
from pancake_assistant.schemas.statistics import StatisticsResponse
from pancake_assistant.services.recipe_service import RecipeService
from pancake_assistant.services.recommendation_engine import get_pancake_stage
from pancake_assistant.services.statistics import StatisticsService

router = APIRouter(prefix="/api/v1", tags=["statistics"])


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    statistics: Annotated[StatisticsService, Depends(get_statistics_service)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
    recipe_id: int | None = None,
):
    """Statistics for one recipe, or across all recipes when recipe_id is omitted."""
    if recipe_id is not None:
        service.get_recipe(recipe_id)
    return statistics.get_statistics(recipe_id)


@router.get("/stage", response_model=StageResponse)
async def get_stage(
    elapsed: Annotated[float, Query(ge=0)],
    recommended: Annotated[float, Query()],
):
    """Doneness stage for an elapsed time against a recommended time."""
    return StageResponse(
        elapsed=elapsed,
        recommended=recommended,
        stage=get_pancake_stage(elapsed, recommended).value,
    )
