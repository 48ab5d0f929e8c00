"""Pancake history model."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from pancake_assistant.database import Base


class PancakeRecord(Base):
    """One rated pancake: temperature, both side times and the verdict."""

    __tablename__ = "pancake_history"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    temperature = Column(Integer, nullable=False, index=True)  # 1-9
    first_side_time = Column(Integer, nullable=False)  # seconds
    second_side_time = Column(Integer, nullable=False, default=0)  # seconds
    rating = Column(String(10), nullable=False, index=True)  # bad|mid|good
    timestamp = Column(
        DateTime(timezone=True), nullable=False, index=True, default=lambda: datetime.now(UTC)
    )

    # Relationships
    recipe = relationship("Recipe", back_populates="history")
