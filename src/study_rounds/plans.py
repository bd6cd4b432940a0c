"""Study plan lifecycle rules and plan storage.

A plan is an immutable ``StudyPlan``; every transition returns a new value.
"""
import json
from dataclasses import replace
from datetime import date
from typing import Optional

from loguru import logger

from study_rounds.db import get_connection
from study_rounds.errors import ConflictError, NotFoundError
from study_rounds.models import PlanDifficulty, PlanStatus, StudyPlan, UnitRange, to_date
from study_rounds.values import DateRange


def period(plan: StudyPlan) -> DateRange:
    return DateRange(plan.created_at, plan.deadline)


def effective_rounds(plan: StudyPlan) -> int:
    """The larger of rounds done and rounds targeted."""
    return max(plan.rounds, plan.target_rounds)


def unit_bounds(plan: StudyPlan) -> tuple[int, int]:
    """Absolute (start, end) unit numbers the plan covers."""
    if plan.unit_range is not None:
        return plan.unit_range.start, plan.unit_range.end
    return 1, plan.total_units


def is_study_day(plan: StudyPlan, weekday: int) -> bool:
    return weekday in plan.study_days


def is_overdue(plan: StudyPlan, today: date) -> bool:
    return to_date(today) > plan.deadline


def remaining_days(plan: StudyPlan, today: date) -> int:
    return period(plan).remaining_days(today)


def elapsed_days(plan: StudyPlan, today: date) -> int:
    return period(plan).elapsed_days(today)


def time_progress_ratio(plan: StudyPlan, today: date) -> float:
    return period(plan).progress_ratio(today)


def pause(plan: StudyPlan) -> StudyPlan:
    return replace(plan, status=PlanStatus.PAUSED)


def resume(plan: StudyPlan) -> StudyPlan:
    return replace(plan, status=PlanStatus.ACTIVE)


def complete(plan: StudyPlan) -> StudyPlan:
    return replace(plan, status=PlanStatus.COMPLETED)


def complete_today(plan: StudyPlan, today: Optional[date] = None) -> StudyPlan:
    """Mark today's work done, remembering the day it was marked."""
    return replace(plan, status=PlanStatus.COMPLETED_TODAY, completed_today_on=today)


def reset_today_completion(plan: StudyPlan) -> StudyPlan:
    if plan.status is PlanStatus.COMPLETED_TODAY:
        return replace(plan, status=PlanStatus.ACTIVE, completed_today_on=None)
    return plan


def with_daily_quota(plan: StudyPlan, quota: float) -> StudyPlan:
    return replace(plan, daily_quota=quota)


def with_dynamic_deadline(plan: StudyPlan, deadline: date) -> StudyPlan:
    return replace(plan, dynamic_deadline=deadline)


def increment_target_rounds(plan: StudyPlan) -> StudyPlan:
    return replace(plan, target_rounds=plan.target_rounds + 1)


# --- Storage ---


def _plan_params(plan: StudyPlan) -> dict:
    return {
        "id": plan.id,
        "user_id": plan.user_id,
        "title": plan.title,
        "total_units": plan.total_units,
        "unit": plan.unit,
        "range_start": plan.unit_range.start if plan.unit_range else None,
        "range_end": plan.unit_range.end if plan.unit_range else None,
        "created_at": plan.created_at.isoformat(),
        "deadline": plan.deadline.isoformat(),
        "rounds": plan.rounds,
        "target_rounds": plan.target_rounds,
        "estimated_time_per_unit": plan.estimated_time_per_unit,
        "difficulty": plan.difficulty.value,
        "study_days": json.dumps(list(plan.study_days)),
        "status": plan.status.value,
        "daily_quota": plan.daily_quota,
        "dynamic_deadline": plan.dynamic_deadline.isoformat() if plan.dynamic_deadline else None,
        "completed_today_on": plan.completed_today_on.isoformat() if plan.completed_today_on else None,
        "version": plan.version,
    }


def row_to_plan(row) -> StudyPlan:
    unit_range = None
    if row["range_start"] is not None:
        unit_range = UnitRange(row["range_start"], row["range_end"])
    return StudyPlan(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        total_units=row["total_units"],
        unit=row["unit"],
        unit_range=unit_range,
        created_at=date.fromisoformat(row["created_at"]),
        deadline=date.fromisoformat(row["deadline"]),
        rounds=row["rounds"],
        target_rounds=row["target_rounds"],
        estimated_time_per_unit=row["estimated_time_per_unit"],
        difficulty=PlanDifficulty(row["difficulty"]),
        study_days=tuple(json.loads(row["study_days"])),
        status=PlanStatus(row["status"]),
        daily_quota=row["daily_quota"],
        dynamic_deadline=date.fromisoformat(row["dynamic_deadline"]) if row["dynamic_deadline"] else None,
        completed_today_on=(
            date.fromisoformat(row["completed_today_on"]) if row["completed_today_on"] else None
        ),
        version=row["version"],
    )


def create_plan(db_path: str, plan: StudyPlan) -> StudyPlan:
    params = _plan_params(plan)
    columns = ", ".join(params)
    placeholders = ", ".join(f":{k}" for k in params)
    conn = get_connection(db_path)
    conn.execute(f"INSERT INTO study_plans ({columns}) VALUES ({placeholders})", params)
    conn.commit()
    conn.close()
    logger.info("Created plan {} ({} units, {} rounds)", plan.id, plan.total_units, plan.target_rounds)
    return plan


def get_plan(db_path: str, plan_id: str) -> Optional[StudyPlan]:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM study_plans WHERE id = ?", (plan_id,)).fetchone()
    conn.close()
    return row_to_plan(row) if row else None


def list_plans(db_path: str, user_id: str) -> list[StudyPlan]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM study_plans WHERE user_id = ? ORDER BY created_at, id", (user_id,)
    ).fetchall()
    conn.close()
    return [row_to_plan(r) for r in rows]


def update_plan(db_path: str, plan: StudyPlan) -> StudyPlan:
    """Store ``plan`` if nobody else changed it since it was read.

    Returns the stored plan carrying the bumped version.
    """
    params = _plan_params(plan)
    params["new_version"] = plan.version + 1
    assignments = ", ".join(f"{k} = :{k}" for k in params if k not in ("id", "version", "new_version"))
    conn = get_connection(db_path)
    cursor = conn.execute(
        f"UPDATE study_plans SET {assignments}, version = :new_version "
        "WHERE id = :id AND version = :version",
        params,
    )
    if cursor.rowcount == 0:
        row = conn.execute("SELECT version FROM study_plans WHERE id = ?", (plan.id,)).fetchone()
        conn.close()
        if row is None:
            raise NotFoundError("Plan", plan.id)
        raise ConflictError("Plan", plan.id, plan.version, row["version"])
    conn.commit()
    conn.close()
    logger.info("Updated plan {} to version {} ({})", plan.id, plan.version + 1, plan.status.value)
    return replace(plan, version=plan.version + 1)


def delete_plan(db_path: str, plan_id: str) -> None:
    conn = get_connection(db_path)
    deleted = conn.execute("DELETE FROM study_plans WHERE id = ?", (plan_id,)).rowcount
    conn.commit()
    conn.close()
    if deleted == 0:
        raise NotFoundError("Plan", plan_id)
