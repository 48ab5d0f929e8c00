"""Recipe schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

BatterThicknessValue = Literal["regular", "thin", "thick"]


class RecipeCreate(BaseModel):
    """Create a new recipe."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    batter_thickness: BatterThicknessValue = "regular"


class RecipeUpdate(BaseModel):
    """Update a recipe."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    batter_thickness: BatterThicknessValue | None = None


class RecipeResponse(BaseModel):
    """Recipe response with its timing profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    batter_thickness: str
    default_base_time: int | None
    temp_scale_factor: float | None
    second_side_ratio: float | None
    min_cook_time: int | None
    max_cook_time: int | None
    is_default: bool
    has_data: bool
    created_at: datetime
    updated_at: datetime


class CurrentRecipeUpdate(BaseModel):
    """Select the current recipe."""

    recipe_id: int
