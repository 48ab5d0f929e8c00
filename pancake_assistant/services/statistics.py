"""Statistics derived from pancake history.

Nothing here is stored: every figure is recomputed from the history rows,
so results always agree with the records they summarize.
"""

from collections import Counter
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from pancake_assistant.models.enums import Rating
from pancake_assistant.models.history import PancakeRecord
from pancake_assistant.services.recommendation_engine import round_half_up
from pancake_assistant.services.store import PancakeStore

BEST_TEMPERATURE_MIN_RATINGS = 3
NO_TEMPERATURE = 0  # reported when no level qualifies


@dataclass
class PancakeStatistics:
    recipe_id: int | None
    total_pancakes: int = 0
    good_pancakes: int = 0
    mid_pancakes: int = 0
    bad_pancakes: int = 0
    average_first_side_time: int = 0
    average_second_side_time: int = 0
    popular_temperature: int = NO_TEMPERATURE
    best_temperature: int = NO_TEMPERATURE
    temperature_counts: dict[int, int] = field(default_factory=dict)


def popular_temperature(records: list[PancakeRecord]) -> int:
    """Most used temperature; ties go to the lowest level."""
    counts = Counter(record.temperature for record in records)
    if not counts:
        return NO_TEMPERATURE
    return max(sorted(counts), key=lambda temperature: counts[temperature])


def best_temperature(records: list[PancakeRecord]) -> int:
    """Temperature with the highest share of good ratings.

    Only levels with enough ratings count, and a level needs at least one
    good rating to qualify at all. Returns 0 when none does.
    """
    totals: Counter = Counter()
    goods: Counter = Counter()
    for record in records:
        totals[record.temperature] += 1
        if record.rating == Rating.GOOD.value:
            goods[record.temperature] += 1

    best, best_ratio = NO_TEMPERATURE, 0.0
    for temperature in sorted(totals):
        if totals[temperature] < BEST_TEMPERATURE_MIN_RATINGS:
            continue
        ratio = goods[temperature] / totals[temperature]
        if ratio > best_ratio:
            best, best_ratio = temperature, ratio
    return best


def summarize(records: list[PancakeRecord], recipe_id: int | None = None) -> PancakeStatistics:
    if not records:
        return PancakeStatistics(recipe_id=recipe_id)

    ratings = Counter(record.rating for record in records)
    total = len(records)
    return PancakeStatistics(
        recipe_id=recipe_id,
        total_pancakes=total,
        good_pancakes=ratings[Rating.GOOD.value],
        mid_pancakes=ratings[Rating.MID.value],
        bad_pancakes=ratings[Rating.BAD.value],
        average_first_side_time=round_half_up(
            sum(record.first_side_time for record in records) / total
        ),
        average_second_side_time=round_half_up(
            sum(record.second_side_time or 0 for record in records) / total
        ),
        popular_temperature=popular_temperature(records),
        best_temperature=best_temperature(records),
        temperature_counts=dict(sorted(Counter(r.temperature for r in records).items())),
    )


class StatisticsService:
    """Per-recipe and global history aggregates."""

    def __init__(self, db: Session):
        self.store = PancakeStore(db)

    def get_statistics(self, recipe_id: int | None = None) -> PancakeStatistics:
        """Aggregates for one recipe, or across all recipes when recipe_id is None."""
        return summarize(self.store.get_all_history(recipe_id), recipe_id)

    def get_global_statistics(self) -> PancakeStatistics:
        return self.get_statistics(None)
