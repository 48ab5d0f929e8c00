"""Tests for history statistics."""

from pancake_assistant.services.statistics import StatisticsService


def _rate(service, recipe_id, ratings):
    for temperature, first, second, rating in ratings:
        service.record_rating(recipe_id, temperature, first, second, rating)


def test_empty_history(db, default_recipe):
    """Test statistics with no pancakes."""
    stats = StatisticsService(db).get_statistics(default_recipe.id)

    assert stats.total_pancakes == 0
    assert stats.average_first_side_time == 0
    assert stats.popular_temperature == 0
    assert stats.best_temperature == 0


def test_totals_and_averages(db, recipe_service, default_recipe):
    """Test rating totals and rounded side time averages."""
    _rate(
        recipe_service,
        default_recipe.id,
        [(5, 60, 50, "good"), (5, 61, 51, "mid"), (6, 62, 50, "bad")],
    )

    stats = StatisticsService(db).get_statistics(default_recipe.id)

    assert stats.total_pancakes == 3
    assert (stats.good_pancakes, stats.mid_pancakes, stats.bad_pancakes) == (1, 1, 1)
    assert stats.average_first_side_time == 61
    assert stats.average_second_side_time == 50  # 50.33
    assert stats.temperature_counts == {5: 2, 6: 1}


def test_average_rounds_half_up(db, recipe_service, default_recipe):
    """Test that averages ending in .5 round up."""
    _rate(recipe_service, default_recipe.id, [(5, 60, 50, "good"), (5, 61, 51, "good")])

    stats = StatisticsService(db).get_statistics(default_recipe.id)

    assert stats.average_first_side_time == 61
    assert stats.average_second_side_time == 51


def test_popular_temperature_ties_go_to_lowest(db, recipe_service, default_recipe):
    """Test that equally used temperatures resolve to the lowest level."""
    _rate(
        recipe_service,
        default_recipe.id,
        [(7, 60, 50, "good"), (3, 60, 50, "good"), (7, 60, 50, "bad"), (3, 60, 50, "mid")],
    )

    stats = StatisticsService(db).get_statistics(default_recipe.id)

    assert stats.popular_temperature == 3


def test_best_temperature_needs_three_ratings(db, recipe_service, default_recipe):
    """Test that only levels with at least three ratings can be best."""
    _rate(
        recipe_service,
        default_recipe.id,
        [
            (4, 90, 70, "good"),
            (4, 90, 70, "good"),
            (6, 70, 60, "good"),
            (6, 70, 60, "good"),
            (6, 70, 60, "bad"),
        ],
    )

    stats = StatisticsService(db).get_statistics(default_recipe.id)

    assert stats.best_temperature == 6
    assert stats.popular_temperature == 6


def test_no_qualifying_best_temperature(db, recipe_service, default_recipe):
    """Test that levels without any good rating never count as best."""
    _rate(
        recipe_service,
        default_recipe.id,
        [(5, 60, 50, "bad"), (5, 60, 50, "bad"), (5, 60, 50, "mid")],
    )

    stats = StatisticsService(db).get_statistics(default_recipe.id)

    assert stats.best_temperature == 0
    assert stats.popular_temperature == 5


def test_too_few_ratings_for_best_temperature(db, recipe_service, default_recipe):
    """Test that two good ratings at each level do not pick a best temperature."""
    _rate(
        recipe_service,
        default_recipe.id,
        [(4, 90, 70, "good"), (4, 90, 70, "good"), (6, 70, 60, "good"), (6, 70, 60, "good")],
    )

    stats = StatisticsService(db).get_statistics(default_recipe.id)

    assert stats.total_pancakes == 4
    assert stats.best_temperature == 0
    assert stats.popular_temperature == 4


def test_global_statistics_span_recipes(db, recipe_service, default_recipe):
    """Test that global statistics include every recipe."""
    other = recipe_service.create_recipe("Crepes", batter_thickness="thin")
    _rate(recipe_service, default_recipe.id, [(5, 60, 50, "good")])
    _rate(recipe_service, other.id, [(7, 40, 35, "good"), (7, 42, 36, "mid")])

    service = StatisticsService(db)

    assert service.get_statistics(other.id).total_pancakes == 2
    global_stats = service.get_global_statistics()
    assert global_stats.recipe_id is None
    assert global_stats.total_pancakes == 3
    assert global_stats.popular_temperature == 7
