from datetime import date, datetime

import pytest

from study_rounds.models import StudyPlan, StudySession

TODAY = date(2026, 10, 19)  # a Monday


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_study_rounds.db")
    return db_path


def make_plan(**overrides) -> StudyPlan:
    fields = dict(
        id="plan-1",
        user_id="user-1",
        title="Algebra drills",
        total_units=100,
        created_at=date(2026, 10, 1),
        deadline=date(2026, 11, 30),
        estimated_time_per_unit=6.0,
    )
    fields.update(overrides)
    return StudyPlan(**fields)


def make_session(n: int = 1, **overrides) -> StudySession:
    fields = dict(
        id=f"s{n}",
        user_id="user-1",
        plan_id="plan-1",
        date=datetime(2026, 10, n, 9, 0),
        units_completed=10,
        duration_minutes=60,
        concentration=0.8,
        difficulty=3,
        round=1,
    )
    fields.update(overrides)
    return StudySession(**fields)
