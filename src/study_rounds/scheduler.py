"""Daily task allocation across the study days left before the deadline."""
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from loguru import logger

from study_rounds.models import DailyTask, RoundTask, StudyPlan, StudySession, to_date
from study_rounds.quota import calculate_quota, effective_deadline
from study_rounds.rounds import plan_round_tasks

MAX_PLANNED_DAYS = 366
FALLBACK_DAYS = 30
DEFAULT_ADVICE = "Keep going!"


@dataclass(frozen=True)
class PlanResult:
    daily_tasks: list
    round_tasks: list
    daily_quota: float
    provisional_deadline: date


@dataclass
class _Segment:
    round: int
    start: int
    end: int
    advice: Optional[str]

    @property
    def units(self) -> int:
        return self.end - self.start + 1


def completed_in_round_tasks(sessions: Sequence[StudySession], round_tasks: Sequence[RoundTask]) -> int:
    """Units logged by sessions that belong to one of ``round_tasks``.

    A ranged session counts when a task of the same round contains its
    range. A session without a range counts when its round is planned.
    """
    total = 0
    rounds = {t.round for t in round_tasks}
    for s in sessions:
        if s.has_range:
            if any(t.round == s.round and t.start_unit <= s.start_unit and s.end_unit <= t.end_unit
                   for t in round_tasks):
                total += s.units_completed
        elif s.round in rounds:
            total += s.units_completed
    return total


def remaining_segments(round_tasks: Sequence[RoundTask], completed: int) -> list[_Segment]:
    """Round tasks with ``completed`` units consumed from the front."""
    segments = [_Segment(t.round, t.start_unit, t.end_unit, t.advice) for t in round_tasks]
    while completed > 0 and segments:
        head = segments[0]
        if completed >= head.units:
            completed -= head.units
            segments.pop(0)
        else:
            head.start += completed
            completed = 0
    return segments


def study_dates(plan: StudyPlan, today: date) -> list[date]:
    deadline = effective_deadline(plan)
    dates = []
    day = today
    while day <= deadline and len(dates) < MAX_PLANNED_DAYS:
        if day.isoweekday() in plan.study_days:
            dates.append(day)
        day += timedelta(days=1)
    if not dates:
        dates = [today + timedelta(days=i) for i in range(FALLBACK_DAYS)]
    return dates


def allocate_daily_tasks(
    plan: StudyPlan,
    segments: list[_Segment],
    dates: Sequence[date],
    daily_quota: float,
    minutes_per_unit: float,
) -> list[DailyTask]:
    """Hand out segments in order, at least ``daily_quota`` units per date.

    A day that crosses a segment boundary gets one task per segment so each
    task stays a contiguous range.
    """
    remaining = sum(s.units for s in segments)
    if remaining == 0:
        return []
    per_day = max(math.ceil(daily_quota), math.ceil(remaining / len(dates)))

    tasks = []
    for day in dates:
        if not segments:
            break
        budget = per_day
        while budget > 0 and segments:
            seg = segments[0]
            take = min(budget, seg.units)
            start, end = seg.start, seg.start + take - 1
            tasks.append(DailyTask(
                id=f"{plan.id}-{day.isoformat()}-r{seg.round}-u{start}",
                plan_id=plan.id,
                date=day,
                start_unit=start,
                end_unit=end,
                units=take,
                estimated_duration=minutes_per_unit * take,
                round=seg.round,
                advice=seg.advice or DEFAULT_ADVICE,
            ))
            seg.start += take
            if seg.start > seg.end:
                segments.pop(0)
            budget -= take
    return tasks


def generate_plan(
    plan: StudyPlan,
    sessions: Sequence[StudySession],
    today: date,
    daily_quota_override: Optional[float] = None,
) -> PlanResult:
    """Plan the round tasks and the dated daily tasks for ``plan`` from ``today`` on."""
    today = to_date(today)
    quota = calculate_quota(plan, sessions, today)
    daily_quota = quota.recommended_daily_quota if daily_quota_override is None else daily_quota_override

    round_tasks = plan_round_tasks(plan, sessions)
    segments = remaining_segments(round_tasks, completed_in_round_tasks(sessions, round_tasks))
    daily_tasks = allocate_daily_tasks(
        plan, segments, study_dates(plan, today), daily_quota, quota.adjusted_minutes_per_unit,
    )
    logger.debug("Plan {}: {} daily tasks from {}", plan.id, len(daily_tasks), today)
    return PlanResult(
        daily_tasks=daily_tasks,
        round_tasks=round_tasks,
        daily_quota=daily_quota,
        provisional_deadline=quota.provisional_deadline,
    )
