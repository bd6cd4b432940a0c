"""Progress analysis: completion, performance, trend and achievability of a plan."""
import math
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from study_rounds.config import get_settings
from study_rounds.models import AchievabilityStatus, PerformanceTrend, StudyPlan, StudySession
from study_rounds.plans import effective_rounds, is_overdue, remaining_days, time_progress_ratio
from study_rounds.values import PerformanceMetrics, Progress

NEUTRAL_CONCENTRATION = 0.7
NEUTRAL_DIFFICULTY = 3
TREND_BAND = 0.1


def session_metrics(session: StudySession) -> PerformanceMetrics:
    return PerformanceMetrics(
        concentration=session.concentration,
        difficulty=session.difficulty,
        duration_minutes=session.duration_minutes,
        units_completed=session.units_completed,
    )


def _units_done(sessions: Iterable[StudySession]) -> int:
    # units_completed already equals the range length for ranged sessions
    return sum(s.units_completed for s in sessions)


def calculate_progress(plan: StudyPlan, sessions: Iterable[StudySession]) -> Progress:
    """Units done across all rounds against total_units * effective rounds."""
    target = plan.total_units * effective_rounds(plan)
    return Progress(min(_units_done(sessions), target), target)


def calculate_round_progress(plan: StudyPlan, sessions: Iterable[StudySession], round_number: int) -> Progress:
    done = _units_done(s for s in sessions if s.round == round_number)
    return Progress(min(done, plan.total_units), plan.total_units)


def calculate_average_performance(sessions: Sequence[StudySession]) -> PerformanceMetrics:
    """Mean concentration and difficulty with summed duration and units.

    With no sessions the neutral metrics (0.7 concentration, difficulty 3)
    are returned.
    """
    if not sessions:
        return PerformanceMetrics(NEUTRAL_CONCENTRATION, NEUTRAL_DIFFICULTY, 0, 0)
    count = len(sessions)
    avg_difficulty = sum(s.difficulty for s in sessions) / count
    return PerformanceMetrics(
        concentration=sum(s.concentration for s in sessions) / count,
        difficulty=math.floor(avg_difficulty + 0.5),
        duration_minutes=sum(s.duration_minutes for s in sessions),
        units_completed=_units_done(sessions),
    )


def analyze_recent_trend(
    sessions: Iterable[StudySession],
    now: datetime,
    recent_days: Optional[int] = None,
) -> PerformanceTrend:
    """Compare efficiency of the later half of recent sessions with the earlier half."""
    if recent_days is None:
        recent_days = get_settings().recent_trend_days
    cutoff = now - timedelta(days=recent_days)
    recent = sorted((s for s in sessions if s.date > cutoff), key=lambda s: s.date)
    if len(recent) < 3:
        return PerformanceTrend.STABLE

    mid = len(recent) // 2
    first = calculate_average_performance(recent[:mid])
    second = calculate_average_performance(recent[mid:])
    diff = second.efficiency_score - first.efficiency_score

    if diff > TREND_BAND:
        return PerformanceTrend.IMPROVING
    elif diff < -TREND_BAND:
        return PerformanceTrend.DECLINING
    return PerformanceTrend.STABLE


def estimate_remaining_minutes(plan: StudyPlan, sessions: Sequence[StudySession]) -> float:
    progress = calculate_progress(plan, sessions)
    if progress.is_complete:
        return 0.0
    if not sessions:
        return progress.remaining * plan.estimated_time_per_unit
    avg = calculate_average_performance(sessions)
    return progress.remaining * avg.average_time_per_unit


def evaluate_achievability(
    plan: StudyPlan,
    sessions: Sequence[StudySession],
    today,
    hours_per_day: Optional[float] = None,
) -> AchievabilityStatus:
    """Judge whether the remaining work fits before the deadline.

    Unit progress is compared with elapsed time first; only when the plan
    lags by more than 10% is the estimated remaining time weighed against
    the study hours left.
    """
    if hours_per_day is None:
        hours_per_day = get_settings().study_hours_per_day

    progress = calculate_progress(plan, sessions)
    if progress.is_complete:
        return AchievabilityStatus.ACHIEVED
    if is_overdue(plan, today):
        return AchievabilityStatus.OVERDUE

    lead = progress.percentage - time_progress_ratio(plan, today)
    if lead >= 0.2:
        return AchievabilityStatus.COMFORTABLE
    if lead >= -0.1:
        return AchievabilityStatus.ON_TRACK

    available = remaining_days(plan, today) * hours_per_day * 60
    if available <= 0:
        return AchievabilityStatus.IMPOSSIBLE
    ratio = estimate_remaining_minutes(plan, sessions) / available
    if ratio <= 1.2:
        return AchievabilityStatus.CHALLENGING
    elif ratio <= 1.5:
        return AchievabilityStatus.AT_RISK
    return AchievabilityStatus.IMPOSSIBLE
