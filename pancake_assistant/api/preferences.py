"""Preference API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from pancake_assistant.api.dependencies import get_recipe_service, get_store
from pancake_assistant.exceptions import InvalidInput
from pancake_assistant.schemas.preference import PreferenceValue
from pancake_assistant.services.recipe_service import RecipeService
from pancake_assistant.services.store import CURRENT_RECIPE_KEY, PancakeStore

router = APIRouter(prefix="/api/v1/preferences", tags=["preferences"])


@router.get("/{key}", response_model=PreferenceValue)
async def get_preference(key: str, store: Annotated[PancakeStore, Depends(get_store)]):
    """Get a preference value; unset keys return null."""
    return PreferenceValue(key=key, value=store.get_preference(key))


@router.put("/{key}", response_model=PreferenceValue)
async def set_preference(
    key: str,
    data: PreferenceValue,
    store: Annotated[PancakeStore, Depends(get_store)],
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Set a preference value."""
    if key == CURRENT_RECIPE_KEY:
        if not isinstance(data.value, int) or isinstance(data.value, bool):
            raise InvalidInput("currentRecipeId must be a recipe id")
        # Keep the current recipe pointing at a recipe that exists
        recipe = service.set_current_recipe(data.value)
        return PreferenceValue(key=key, value=recipe.id)

    store.set_preference(key, data.value)
    store.commit()
    return PreferenceValue(key=key, value=data.value)
