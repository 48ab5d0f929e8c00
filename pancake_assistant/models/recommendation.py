"""Per-recipe, per-temperature cook time recommendation model."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from pancake_assistant.database import Base


class Recommendation(Base):
    """Learned (or reset-to-default) side times for one recipe at one temperature."""

    __tablename__ = "recommendations"

    recipe_id = Column(Integer, ForeignKey("recipes.id"), primary_key=True)
    temperature = Column(Integer, primary_key=True)  # 1-9
    first_side_time = Column(Integer, nullable=False)
    second_side_time = Column(Integer, nullable=False)
    confidence = Column(Float, nullable=False, default=0.0)  # share of recent good ratings
    data_points = Column(Float, nullable=False, default=0.0)  # fractional via neighbors
    last_updated = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    # Relationships
    recipe = relationship("Recipe", back_populates="recommendations")
