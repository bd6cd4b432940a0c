"""Dynamic daily quota: pace the remaining units onto the study days left."""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from loguru import logger

from study_rounds.models import StudyPlan, StudySession, to_date
from study_rounds.plans import effective_rounds, unit_bounds

# (6 - 3) * 3: difficulty 3 at concentration 3
NEUTRAL_PERFORMANCE_FACTOR = 9.0
MIN_MINUTES_PER_UNIT = 1 / 60


@dataclass(frozen=True)
class QuotaResult:
    adjusted_minutes_per_unit: float
    provisional_deadline: date
    recommended_daily_quota: float


def average_performance_factor(sessions: Sequence[StudySession]) -> float:
    if not sessions:
        return NEUTRAL_PERFORMANCE_FACTOR
    factors = [(6 - s.difficulty) * s.concentration for s in sessions]
    return sum(factors) / len(factors)


def effective_deadline(plan: StudyPlan) -> date:
    return plan.dynamic_deadline or plan.deadline


def count_study_days(plan: StudyPlan, start: date, end: date) -> int:
    """Days from ``start`` to ``end`` inclusive that fall on the plan's study weekdays."""
    count = 0
    day = start
    while day <= end:
        if day.isoweekday() in plan.study_days:
            count += 1
        day += timedelta(days=1)
    return count


def calculate_quota(plan: StudyPlan, sessions: Sequence[StudySession], today: date) -> QuotaResult:
    """Recommend units per study day and the time each unit should take.

    ``sessions`` should be the sessions logged before today. The quota is
    never below one unit. When no study day is left before the deadline the
    remaining calendar days (at least one) are used instead.
    """
    today = to_date(today)
    start, end = unit_bounds(plan)
    target = (end - start + 1) * effective_rounds(plan)
    remaining = max(0, target - sum(s.units_completed for s in sessions))

    rate = average_performance_factor(sessions) / NEUTRAL_PERFORMANCE_FACTOR or 1.0
    adjusted = max(MIN_MINUTES_PER_UNIT, plan.estimated_time_per_unit / rate)

    deadline = effective_deadline(plan)
    days = count_study_days(plan, today, deadline)
    if days <= 0:
        days = max(1, (deadline - today).days)

    quota = max(1.0, remaining / days)
    logger.debug(
        "Plan {}: {} units left over {} days, quota {:.2f}, {:.1f} min/unit",
        plan.id, remaining, days, quota, adjusted,
    )
    return QuotaResult(
        adjusted_minutes_per_unit=adjusted,
        provisional_deadline=deadline,
        recommended_daily_quota=quota,
    )
