from datetime import date, timedelta

from conftest import TODAY, make_plan, make_session
from study_rounds.models import DailyTask, PlanStatus
from study_rounds.status import can_study, generate_status_message, update_status


def task(day: date, start: int = 1, units: int = 10) -> DailyTask:
    return DailyTask(
        id=f"t-{day}-{start}", plan_id="plan-1", date=day,
        start_unit=start, end_unit=start + units - 1, units=units, estimated_duration=units * 6.0,
    )


def test_completed_is_terminal():
    plan = make_plan(status=PlanStatus.COMPLETED)
    assert update_status(plan, [task(TODAY)], [], False, TODAY) is plan


def test_all_rounds_complete_wins():
    for status in (PlanStatus.ACTIVE, PlanStatus.PAUSED, PlanStatus.COMPLETED_TODAY):
        plan = make_plan(status=status)
        assert update_status(plan, [], [], True, TODAY).status is PlanStatus.COMPLETED


def test_completed_today_resets_when_work_is_scheduled_ahead():
    plan = make_plan(status=PlanStatus.COMPLETED_TODAY)
    updated = update_status(plan, [task(TODAY + timedelta(days=1))], [], False, TODAY)
    assert updated.status is PlanStatus.ACTIVE


def test_completed_today_stays_without_future_tasks():
    plan = make_plan(status=PlanStatus.COMPLETED_TODAY)
    assert update_status(plan, [task(TODAY)], [], False, TODAY).status is PlanStatus.COMPLETED_TODAY


def test_quota_met_completes_today():
    plan = make_plan()
    done = [make_session(19, units_completed=6), make_session(19, units_completed=4)]
    updated = update_status(plan, [task(TODAY)], done, False, TODAY)
    assert updated.status is PlanStatus.COMPLETED_TODAY
    assert updated.completed_today_on == TODAY


def test_quota_not_met_stays_active():
    plan = make_plan()
    updated = update_status(plan, [task(TODAY)], [make_session(19, units_completed=5)], False, TODAY)
    assert updated.status is PlanStatus.ACTIVE


def test_no_task_today_stays_active():
    plan = make_plan()
    updated = update_status(plan, [task(TODAY + timedelta(days=2))], [make_session(19)], False, TODAY)
    assert updated.status is PlanStatus.ACTIVE


def test_paused_plan_is_left_alone():
    plan = make_plan(status=PlanStatus.PAUSED)
    assert update_status(plan, [task(TODAY)], [make_session(19)], False, TODAY) is plan


def test_can_study():
    assert can_study(make_plan(), TODAY)
    assert can_study(make_plan(status=PlanStatus.COMPLETED_TODAY), TODAY)
    assert not can_study(make_plan(status=PlanStatus.PAUSED), TODAY)
    assert not can_study(make_plan(status=PlanStatus.COMPLETED), TODAY)
    assert not can_study(make_plan(), date(2026, 12, 1))
    assert can_study(make_plan(), date(2026, 11, 30))


def test_status_messages():
    assert generate_status_message(make_plan(), TODAY) == "Studying"
    assert generate_status_message(make_plan(), date(2026, 12, 1)) == "Overdue"
    assert generate_status_message(make_plan(status=PlanStatus.PAUSED), TODAY) == "Paused"
    assert generate_status_message(make_plan(status=PlanStatus.COMPLETED_TODAY), TODAY) == "Today's tasks done"
    completed = make_plan(status=PlanStatus.COMPLETED)
    assert generate_status_message(completed, date(2026, 12, 1)) == "Plan completed"
