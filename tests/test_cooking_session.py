"""Tests for the cooking session state machine."""

import pytest

from pancake_assistant.exceptions import InvalidInput, SessionStateError, StoreUnavailable
from pancake_assistant.models.enums import CookingPhase, PancakeStage
from pancake_assistant.services.cooking_session import CookingSession
from pancake_assistant.services.timer import CookingTimer


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(recipe_service, default_recipe, clock):
    return CookingSession(recipe_service, timer=CookingTimer(now=clock))


def test_starts_ready_with_current_recipe(session, default_recipe):
    """Test the initial session state."""
    assert session.phase == CookingPhase.READY
    assert session.recipe_id == default_recipe.id
    assert session.temperature == 5
    assert session.recommendation.first_side_time == 90


def test_full_cook_and_rate(db, session, clock):
    """Test a pancake going through every phase and being rated."""
    session.start_cooking()
    assert session.phase == CookingPhase.FIRST_SIDE

    clock.advance(60.4)
    assert session.flip() == 60
    assert session.phase == CookingPhase.FLIP

    clock.advance(3)  # flipping does not count
    session.complete_flip()
    assert session.phase == CookingPhase.SECOND_SIDE

    clock.advance(50)
    assert session.finish_cooking() == 50
    assert session.phase == CookingPhase.DONE

    result = session.rate("good")

    assert session.phase == CookingPhase.READY
    assert result.record.first_side_time == 60
    assert result.record.second_side_time == 50
    assert session.recommendation.first_side_time == 78


def test_advance_drives_single_button(session, clock):
    """Test the single action button through a cook."""
    assert session.advance() == CookingPhase.FIRST_SIDE
    clock.advance(30)
    assert session.advance() == CookingPhase.FLIP
    assert session.advance() == CookingPhase.FLIP  # waiting for the flip to finish
    session.complete_flip()
    clock.advance(20)
    assert session.advance() == CookingPhase.DONE
    assert session.advance() == CookingPhase.DONE  # waiting for a rating


def test_untimed_first_side_does_not_learn(session):
    """Test rating a pancake whose first side was never timed."""
    session.start_cooking()
    session.flip()
    session.complete_flip()
    session.finish_cooking()

    result = session.rate("bad")

    assert result.recommendation is None
    assert session.recommendation.first_side_time == 90


def test_temperature_change_only_when_ready(session):
    """Test that temperature can only change between pancakes."""
    recommendation = session.set_temperature(7)
    assert recommendation.first_side_time == 70

    session.start_cooking()
    with pytest.raises(SessionStateError):
        session.set_temperature(3)
    assert session.temperature == 7


def test_invalid_temperature(session):
    """Test that out-of-range temperatures are rejected."""
    with pytest.raises(InvalidInput):
        session.set_temperature(12)


def test_select_recipe(session, recipe_service, default_recipe):
    """Test switching recipes between pancakes."""
    crepes = recipe_service.create_recipe("Crepes", batter_thickness="thin")
    recipe_service.set_current_recipe(default_recipe.id)

    recommendation = session.select_recipe(crepes.id)

    assert session.recipe_id == crepes.id
    assert recommendation.first_side_time == 70
    assert recipe_service.get_current_recipe_id() == crepes.id


def test_out_of_order_actions(session):
    """Test that actions outside their phase raise."""
    with pytest.raises(SessionStateError):
        session.flip()
    with pytest.raises(SessionStateError):
        session.rate("good")

    session.start_cooking()
    with pytest.raises(SessionStateError):
        session.start_cooking()
    with pytest.raises(SessionStateError):
        session.finish_cooking()
    with pytest.raises(SessionStateError):
        session.select_recipe(session.recipe_id)


def test_failed_rating_stays_done(session, recipe_service, monkeypatch, clock):
    """Test that a failed save keeps the pancake waiting for its rating."""
    session.start_cooking()
    clock.advance(60)
    session.flip()
    session.complete_flip()
    clock.advance(40)
    session.finish_cooking()

    def broken_record(*args, **kwargs):
        raise StoreUnavailable("database is locked")

    monkeypatch.setattr(recipe_service, "record_rating", broken_record)

    with pytest.raises(StoreUnavailable):
        session.rate("good")
    assert session.phase == CookingPhase.DONE


def test_flip_prompt(session, clock):
    """Test the auto-flip prompt at the recommended first side time."""
    assert session.should_flip() is False

    session.start_cooking()
    clock.advance(89)
    assert session.should_flip() is False
    clock.advance(1)
    assert session.should_flip() is True

    session.auto_flip = False
    assert session.should_flip() is False


def test_stage_follows_elapsed_time(session, clock):
    """Test the doneness stage during each side."""
    assert session.current_stage() == PancakeStage.RAW

    session.start_cooking()
    clock.advance(45)
    assert session.current_stage() == PancakeStage.MEDIUM

    session.timer.tick()
    assert session.stage == PancakeStage.MEDIUM

    session.flip()
    session.complete_flip()
    clock.advance(70)  # 72s recommended for the second side
    assert session.current_stage() == PancakeStage.BURNT
