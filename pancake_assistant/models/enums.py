"""Enums for model fields."""

from enum import Enum


class BatterThickness(str, Enum):
    """Batter consistency of a recipe."""

    REGULAR = "regular"
    THIN = "thin"
    THICK = "thick"


class Rating(str, Enum):
    """User verdict on a finished pancake."""

    BAD = "bad"
    MID = "mid"
    GOOD = "good"

    @property
    def factor(self) -> int:
        """Signed weight used by the learning rule."""
        return {Rating.BAD: -1, Rating.MID: 0, Rating.GOOD: 1}[self]


class PancakeStage(str, Enum):
    """Visual doneness stage derived from the share of recommended time elapsed."""

    RAW = "raw"
    COOKING = "cooking"
    MEDIUM = "medium"
    COOKED = "cooked"
    BURNT = "burnt"


class CookingPhase(str, Enum):
    """Phases of a single pancake cooking session."""

    READY = "ready"
    FIRST_SIDE = "firstSide"
    FLIP = "flip"
    SECOND_SIDE = "secondSide"
    DONE = "done"
