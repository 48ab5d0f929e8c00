"""Recommendation schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RecommendationResponse(BaseModel):
    """Effective recommendation for one recipe at one temperature."""

    model_config = ConfigDict(from_attributes=True)

    recipe_id: int
    temperature: int
    first_side_time: int
    second_side_time: int
    confidence: float
    data_points: float
    last_updated: datetime | None
    persisted: bool


class StageResponse(BaseModel):
    """Visual doneness stage for an elapsed time."""

    elapsed: float
    recommended: float
    stage: str
