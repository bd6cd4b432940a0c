"""Plan summary scoring for the dashboard."""
from datetime import date, datetime, time
from typing import Optional

from study_rounds.models import AchievabilityStatus
from study_rounds.plans import effective_rounds, get_plan, remaining_days
from study_rounds.progress import (
    analyze_recent_trend, calculate_average_performance, calculate_progress,
    calculate_round_progress, evaluate_achievability,
)
from study_rounds.sessions import get_sessions_for_plan
from study_rounds.status import can_study, generate_status_message

ACHIEVABILITY_LABELS = {
    AchievabilityStatus.ACHIEVED: "ACHIEVED",
    AchievabilityStatus.COMFORTABLE: "COMFORTABLE",
    AchievabilityStatus.ON_TRACK: "ON TRACK",
    AchievabilityStatus.CHALLENGING: "CHALLENGING",
    AchievabilityStatus.AT_RISK: "AT RISK",
    AchievabilityStatus.OVERDUE: "OVERDUE",
    AchievabilityStatus.IMPOSSIBLE: "OUT OF REACH",
}


def get_achievability_label(status: AchievabilityStatus) -> str:
    return ACHIEVABILITY_LABELS[status]


def get_achievability_color(status: AchievabilityStatus) -> str:
    if status in (AchievabilityStatus.ACHIEVED, AchievabilityStatus.COMFORTABLE):
        return "green"
    elif status is AchievabilityStatus.ON_TRACK:
        return "cyan"
    elif status is AchievabilityStatus.CHALLENGING:
        return "yellow"
    elif status is AchievabilityStatus.AT_RISK:
        return "dark_orange"
    return "red"


def get_plan_summary(db_path: str, plan_id: str, today: date) -> Optional[dict]:
    plan = get_plan(db_path, plan_id)
    if plan is None:
        return None
    sessions = get_sessions_for_plan(db_path, plan_id)
    progress = calculate_progress(plan, sessions)
    achievability = evaluate_achievability(plan, sessions, today)
    performance = calculate_average_performance(sessions)
    now = datetime.combine(today, time.max)
    return {
        "plan_id": plan.id,
        "title": plan.title,
        "status": plan.status.value,
        "status_message": generate_status_message(plan, today),
        "can_study": can_study(plan, today),
        "completed": progress.completed,
        "total": progress.total,
        "percentage": round(progress.percentage * 100, 1),
        "rounds": [
            {
                "round": r,
                "percentage": round(calculate_round_progress(plan, sessions, r).percentage * 100, 1),
            }
            for r in range(1, effective_rounds(plan) + 1)
        ],
        "remaining_days": remaining_days(plan, today),
        "achievability": achievability,
        "label": get_achievability_label(achievability),
        "trend": analyze_recent_trend(sessions, now).value,
        "quality": performance.quality_level.value,
        "sessions": len(sessions),
    }
