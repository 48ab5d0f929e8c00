"""Recipe API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from pancake_assistant.api.dependencies import get_recipe_service
from pancake_assistant.config import get_settings
from pancake_assistant.schemas.history import HistoryResponse, RatingCreate, RatingResponse
from pancake_assistant.schemas.recipe import (
    CurrentRecipeUpdate,
    RecipeCreate,
    RecipeResponse,
    RecipeUpdate,
)
from pancake_assistant.schemas.recommendation import RecommendationResponse
from pancake_assistant.services.recipe_service import RecipeService

settings = get_settings()

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])

RecipeServiceDep = Annotated[RecipeService, Depends(get_recipe_service)]


# --- Static routes first (before /{recipe_id}) ---


@router.get("", response_model=list[RecipeResponse])
async def list_recipes(service: RecipeServiceDep):
    """List all recipes."""
    service.ensure_default_recipe()
    return service.list_recipes()


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(recipe_data: RecipeCreate, service: RecipeServiceDep):
    """Create a recipe and make it the current one."""
    return service.create_recipe(
        name=recipe_data.name,
        description=recipe_data.description,
        batter_thickness=recipe_data.batter_thickness,
    )


@router.get("/current", response_model=RecipeResponse)
async def get_current_recipe(service: RecipeServiceDep):
    """Get the recipe currently selected for cooking."""
    return service.get_recipe(service.get_current_recipe_id())


@router.put("/current", response_model=RecipeResponse)
async def set_current_recipe(data: CurrentRecipeUpdate, service: RecipeServiceDep):
    """Select the recipe to cook with."""
    return service.set_current_recipe(data.recipe_id)


# --- Single recipe ---


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(recipe_id: int, service: RecipeServiceDep):
    """Get a specific recipe."""
    return service.get_recipe(recipe_id)


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(recipe_id: int, recipe_data: RecipeUpdate, service: RecipeServiceDep):
    """Update a recipe. The default recipe cannot be edited."""
    return service.update_recipe(
        recipe_id,
        name=recipe_data.name,
        description=recipe_data.description,
        batter_thickness=recipe_data.batter_thickness,
    )


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(recipe_id: int, service: RecipeServiceDep):
    """Delete a recipe with its history and recommendations."""
    service.delete_recipe(recipe_id)


# --- History and ratings ---


@router.get("/{recipe_id}/history", response_model=list[HistoryResponse])
async def list_history(
    recipe_id: int,
    service: RecipeServiceDep,
    limit: Annotated[int, Query(ge=1, le=500)] = settings.history_page_size,
):
    """List the most recent pancakes of a recipe, newest first."""
    return service.get_history(recipe_id, limit)


@router.delete("/{recipe_id}/history", response_model=list[RecommendationResponse])
async def clear_history(recipe_id: int, service: RecipeServiceDep):
    """Delete all history of a recipe and reset its recommendations."""
    return service.clear_history(recipe_id)


@router.post(
    "/{recipe_id}/ratings", response_model=RatingResponse, status_code=status.HTTP_201_CREATED
)
async def rate_pancake(recipe_id: int, rating_data: RatingCreate, service: RecipeServiceDep):
    """Record a rated pancake and learn from it."""
    result = service.record_rating(
        recipe_id,
        rating_data.temperature,
        rating_data.first_side_time,
        rating_data.second_side_time,
        rating_data.rating,
    )
    recommendation = None
    if result.recommendation is not None:
        recommendation = RecommendationResponse.model_validate(result.recommendation)
    return RatingResponse(
        record=HistoryResponse.model_validate(result.record),
        recommendation=recommendation,
    )
