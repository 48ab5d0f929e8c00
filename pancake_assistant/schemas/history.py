"""History and rating schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pancake_assistant.schemas.recommendation import RecommendationResponse


class HistoryResponse(BaseModel):
    """One rated pancake."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    recipe_id: int
    temperature: int
    first_side_time: int
    second_side_time: int
    rating: str
    timestamp: datetime


class RatingCreate(BaseModel):
    """Rate a cooked pancake."""

    temperature: int = Field(..., ge=1, le=9)
    first_side_time: int = Field(..., ge=0)
    second_side_time: int = Field(0, ge=0)
    rating: Literal["bad", "mid", "good"]


class RatingResponse(BaseModel):
    """Stored record plus the learned recommendation, if learning ran."""

    record: HistoryResponse
    recommendation: RecommendationResponse | None
