"""Recommendation API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from pancake_assistant.api.dependencies import get_engine, get_recipe_service
from pancake_assistant.schemas.recommendation import RecommendationResponse
from pancake_assistant.services.recipe_service import RecipeService
from pancake_assistant.services.recommendation_engine import RecommendationEngine

router = APIRouter(
    prefix="/api/v1/recipes/{recipe_id}/recommendations", tags=["recommendations"]
)


@router.get("", response_model=list[RecommendationResponse])
async def list_recommendations(
    recipe_id: int,
    service: Annotated[RecipeService, Depends(get_recipe_service)],
    engine: Annotated[RecommendationEngine, Depends(get_engine)],
):
    """Get the effective recommendation for every temperature."""
    service.get_recipe(recipe_id)
    return engine.get_recipe_recommendations(recipe_id)


@router.post("/reset", response_model=list[RecommendationResponse])
async def reset_recommendations(
    recipe_id: int,
    engine: Annotated[RecommendationEngine, Depends(get_engine)],
):
    """Discard learned times and reseed defaults for all temperatures."""
    return engine.reset_recipe_recommendations(recipe_id)


@router.get("/{temperature}", response_model=RecommendationResponse)
async def get_recommendation(
    recipe_id: int,
    temperature: Annotated[int, Path(ge=1, le=9)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
    engine: Annotated[RecommendationEngine, Depends(get_engine)],
):
    """Get the recommendation for one temperature."""
    service.get_recipe(recipe_id)
    return engine.get_recommendation(recipe_id, temperature)
