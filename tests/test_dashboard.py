# tests/test_dashboard.py
from datetime import date

from conftest import TODAY, make_plan, make_session
from study_rounds.dashboard import get_achievability_color, get_achievability_label, get_plan_summary
from study_rounds.db import init_db
from study_rounds.models import AchievabilityStatus, PlanStatus
from study_rounds.plans import create_plan
from study_rounds.sessions import create_session


def seed(db_path, plan, sessions):
    init_db(db_path)
    create_plan(db_path, plan)
    for s in sessions:
        create_session(db_path, s)


def test_achievability_label():
    assert get_achievability_label(AchievabilityStatus.ON_TRACK) == "ON TRACK"
    assert get_achievability_label(AchievabilityStatus.AT_RISK) == "AT RISK"
    assert get_achievability_label(AchievabilityStatus.IMPOSSIBLE) == "OUT OF REACH"


def test_achievability_color():
    assert get_achievability_color(AchievabilityStatus.ACHIEVED) == "green"
    assert get_achievability_color(AchievabilityStatus.COMFORTABLE) == "green"
    assert get_achievability_color(AchievabilityStatus.ON_TRACK) == "cyan"
    assert get_achievability_color(AchievabilityStatus.CHALLENGING) == "yellow"
    assert get_achievability_color(AchievabilityStatus.OVERDUE) == "red"


def test_summary_missing_plan(tmp_db):
    init_db(tmp_db)
    assert get_plan_summary(tmp_db, "nope", TODAY) is None


def test_summary_with_sessions(tmp_db):
    seed(tmp_db, make_plan(), [make_session(n) for n in (1, 2, 3)])
    summary = get_plan_summary(tmp_db, "plan-1", TODAY)
    assert summary["completed"] == 30
    assert summary["total"] == 100
    assert summary["percentage"] == 30.0
    assert summary["rounds"] == [{"round": 1, "percentage": 30.0}]
    assert summary["remaining_days"] == 43
    assert summary["achievability"] is AchievabilityStatus.ON_TRACK
    assert summary["label"] == "ON TRACK"
    assert summary["trend"] == "stable"
    assert summary["quality"] == "fair"
    assert summary["status_message"] == "Studying"
    assert summary["can_study"] is True
    assert summary["sessions"] == 3


def test_summary_lists_every_round(tmp_db):
    history = [make_session(n) for n in range(1, 11)] + [make_session(12, round=2, units_completed=25)]
    seed(tmp_db, make_plan(target_rounds=2), history)
    summary = get_plan_summary(tmp_db, "plan-1", TODAY)
    assert summary["total"] == 200
    assert summary["rounds"] == [{"round": 1, "percentage": 100.0}, {"round": 2, "percentage": 25.0}]


def test_summary_of_paused_overdue_plan(tmp_db):
    seed(tmp_db, make_plan(status=PlanStatus.PAUSED), [])
    summary = get_plan_summary(tmp_db, "plan-1", date(2026, 12, 2))
    assert summary["status_message"] == "Paused"
    assert summary["can_study"] is False
    assert summary["achievability"] is AchievabilityStatus.OVERDUE
    assert summary["remaining_days"] == 0
