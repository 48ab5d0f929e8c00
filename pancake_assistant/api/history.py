"""History API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from pancake_assistant.api.dependencies import get_recipe_service
from pancake_assistant.services.recipe_service import RecipeService

router = APIRouter(prefix="/api/v1/history", tags=["history"])


@router.delete("/{history_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_history_record(
    history_id: int,
    service: Annotated[RecipeService, Depends(get_recipe_service)],
):
    """Delete a single history record. Recommendations are left as they are."""
    service.delete_history_record(history_id)
