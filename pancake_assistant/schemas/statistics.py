"""Statistics schemas."""

from pydantic import BaseModel, ConfigDict


class StatisticsResponse(BaseModel):
    """History aggregates for one recipe, or all recipes when recipe_id is null."""

    model_config = ConfigDict(from_attributes=True)

    recipe_id: int | None
    total_pancakes: int
    good_pancakes: int
    mid_pancakes: int
    bad_pancakes: int
    average_first_side_time: int
    average_second_side_time: int
    popular_temperature: int
    best_temperature: int
    temperature_counts: dict[int, int]
