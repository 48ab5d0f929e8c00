"""Recipe (batter profile) model."""

from sqlalchemy import Boolean, Column, Float, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from pancake_assistant.database import Base
from pancake_assistant.models.mixins import TimestampMixin


class Recipe(Base, TimestampMixin):
    """Named batter profile with thickness-dependent timing defaults."""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    batter_thickness = Column(String(20), nullable=False, default="regular")  # regular|thin|thick

    # Timing profile (seconds); NULL falls back to built-in constants
    default_base_time = Column(Integer, nullable=True)
    temp_scale_factor = Column(Float, nullable=True)
    second_side_ratio = Column(Float, nullable=True)
    min_cook_time = Column(Integer, nullable=True)
    max_cook_time = Column(Integer, nullable=True)

    is_default = Column(Boolean, nullable=False, default=False)
    has_data = Column(Boolean, nullable=False, default=False)

    # Relationships
    history = relationship("PancakeRecord", back_populates="recipe")
    recommendations = relationship("Recommendation", back_populates="recipe")


# At most one default recipe per store
Index(
    "uq_recipes_single_default",
    Recipe.is_default,
    unique=True,
    sqlite_where=Recipe.is_default.is_(True),
    postgresql_where=Recipe.is_default.is_(True),
)
