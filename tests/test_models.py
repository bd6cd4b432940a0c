"""Tests for data model classes."""
from datetime import date, datetime

import pytest

from conftest import TODAY, make_plan, make_session
from study_rounds.errors import ValidationError
from study_rounds.models import DailyTask, PlanDifficulty, PlanStatus, ReviewItem, RoundTask, UnitRange


def make_task(**overrides) -> DailyTask:
    fields = dict(
        id="t1", plan_id="plan-1", date=TODAY,
        start_unit=1, end_unit=10, units=10, estimated_duration=60,
    )
    fields.update(overrides)
    return DailyTask(**fields)


def test_plan_defaults():
    plan = make_plan()
    assert plan.unit == "problem"
    assert plan.rounds == 1
    assert plan.target_rounds == 1
    assert plan.difficulty is PlanDifficulty.NORMAL
    assert plan.study_days == (1, 2, 3, 4, 5)
    assert plan.status is PlanStatus.ACTIVE
    assert plan.version == 0


def test_plan_truncates_datetimes_to_days():
    plan = make_plan(deadline=datetime(2026, 11, 30, 18, 45))
    assert plan.deadline == date(2026, 11, 30)


@pytest.mark.parametrize("overrides", [
    {"total_units": 0},
    {"created_at": date(2026, 12, 1)},
    {"study_days": ()},
    {"study_days": (0, 1)},
    {"target_rounds": 0},
])
def test_plan_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        make_plan(**overrides)


def test_unit_range_validation():
    assert UnitRange(5, 14).size == 10
    with pytest.raises(ValidationError):
        UnitRange(10, 5)


def test_plan_unit_range_must_match_total_units():
    assert make_plan(total_units=10, unit_range=UnitRange(5, 14)).unit_range.size == 10
    with pytest.raises(ValidationError):
        make_plan(total_units=100, unit_range=UnitRange(1, 50))


def test_session_range_overrides_units():
    session = make_session(units_completed=3, start_unit=11, end_unit=20)
    assert session.units_completed == 10
    assert session.has_range


@pytest.mark.parametrize("overrides", [
    {"concentration": 1.2},
    {"difficulty": 0},
    {"duration_minutes": -1},
    {"units_completed": -5},
    {"round": 0},
    {"start_unit": 8, "end_unit": 4},
])
def test_session_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        make_session(**overrides)


def test_daily_task_valid():
    task = make_task(round=2)
    assert task.units == 10
    assert task.estimated_hours == 1.0
    assert task.title("Algebra") == "Algebra (R2) U1-10"
    assert make_task().title("Algebra") == "Algebra U1-10"


@pytest.mark.parametrize("overrides", [
    {"units": 0, "end_unit": 0},
    {"start_unit": 0, "units": 11},
    {"start_unit": 5, "end_unit": 4, "units": 1},
    {"estimated_duration": -1},
    {"units": 9},
])
def test_daily_task_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        make_task(**overrides)


def test_daily_task_day_relations():
    task = make_task(date=datetime(2026, 10, 19, 23, 0))
    assert task.is_today(TODAY)
    assert task.is_future(date(2026, 10, 18))
    assert task.is_past(date(2026, 10, 20))


def test_round_task_shifted():
    task = RoundTask(round=2, start_unit=1, end_unit=10, units=10, advice="x")
    moved = task.shifted(20)
    assert (moved.start_unit, moved.end_unit, moved.units, moved.advice) == (21, 30, 10, "x")


def test_review_item_defaults_and_due():
    item = ReviewItem(
        id="r1", user_id="user-1", plan_id="plan-1", unit_number=3,
        last_review_date=datetime(2026, 10, 12, 9), next_review_date=datetime(2026, 10, 19, 9),
    )
    assert item.ease_factor == 2.5
    assert item.repetitions == 0
    assert item.interval_days == 1
    assert item.is_due(TODAY)
    assert not item.is_overdue(TODAY)
    assert item.is_overdue(date(2026, 10, 20))
    assert item.days_until_next_review(date(2026, 10, 17)) == 2


def test_review_item_record_review_and_reset():
    now = datetime(2026, 10, 19, 8, 0)
    item = ReviewItem(
        id="r1", user_id="user-1", plan_id="plan-1", unit_number=3,
        last_review_date=now, next_review_date=now,
    )
    once = item.record_review(4, now)
    twice = once.record_review(4, now)
    assert once.interval_days == 1
    assert twice.interval_days == 6
    assert twice.next_review_date == datetime(2026, 10, 25, 8, 0)
    assert twice.last_review_date == now

    failed = twice.record_review(2, now)
    assert failed.repetitions == 0
    assert failed.interval_days == 1

    fresh = twice.reset(now)
    assert (fresh.ease_factor, fresh.repetitions, fresh.interval_days) == (2.5, 0, 1)


def test_review_item_rejects_invalid_values():
    now = datetime(2026, 10, 19)
    with pytest.raises(ValidationError):
        ReviewItem(id="r", user_id="u", plan_id="p", unit_number=0, last_review_date=now, next_review_date=now)
    with pytest.raises(ValidationError):
        ReviewItem(id="r", user_id="u", plan_id="p", unit_number=1, last_review_date=now,
                   next_review_date=now, ease_factor=1.2)
