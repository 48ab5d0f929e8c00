"""User preference model."""

from sqlalchemy import JSON, Column, String

from pancake_assistant.database import Base
from pancake_assistant.models.mixins import TimestampMixin


class Preference(Base, TimestampMixin):
    """Generic key/value preference, e.g. currentRecipeId."""

    __tablename__ = "preferences"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=True)
