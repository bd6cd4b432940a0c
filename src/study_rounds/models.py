"""Data classes for the study planning domain model."""
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from study_rounds.errors import ValidationError
from study_rounds.sm2 import sm2_update


def to_date(value: date) -> date:
    """Truncate a datetime to its calendar day; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


class PlanStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    COMPLETED_TODAY = "completedToday"


class PlanDifficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class QualityLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class PerformanceTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class AchievabilityStatus(str, Enum):
    ACHIEVED = "achieved"
    COMFORTABLE = "comfortable"
    ON_TRACK = "onTrack"
    CHALLENGING = "challenging"
    AT_RISK = "atRisk"
    OVERDUE = "overdue"
    IMPOSSIBLE = "impossible"


@dataclass(frozen=True)
class UnitRange:
    start: int
    end: int

    def __post_init__(self):
        if self.start <= 0 or self.end < self.start:
            raise ValidationError(f"Invalid unit range {self.start}-{self.end}")

    @property
    def size(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class StudyPlan:
    id: str
    user_id: str
    title: str
    total_units: int
    created_at: date
    deadline: date
    estimated_time_per_unit: float  # minutes
    unit: str = "problem"
    unit_range: Optional[UnitRange] = None
    rounds: int = 1
    target_rounds: int = 1
    difficulty: PlanDifficulty = PlanDifficulty.NORMAL
    study_days: tuple = (1, 2, 3, 4, 5)  # 1=Mon .. 7=Sun
    status: PlanStatus = PlanStatus.ACTIVE
    daily_quota: Optional[float] = None
    dynamic_deadline: Optional[date] = None
    completed_today_on: Optional[date] = None
    version: int = 0

    def __post_init__(self):
        object.__setattr__(self, "created_at", to_date(self.created_at))
        object.__setattr__(self, "deadline", to_date(self.deadline))
        object.__setattr__(self, "study_days", tuple(self.study_days))
        if self.dynamic_deadline is not None:
            object.__setattr__(self, "dynamic_deadline", to_date(self.dynamic_deadline))
        if self.completed_today_on is not None:
            object.__setattr__(self, "completed_today_on", to_date(self.completed_today_on))
        if self.total_units <= 0:
            raise ValidationError("Total units must be positive")
        if self.unit_range is not None and self.unit_range.size != self.total_units:
            raise ValidationError("Unit range size must equal total units")
        if self.created_at > self.deadline:
            raise ValidationError("Deadline must not be before the creation date")
        if not self.study_days:
            raise ValidationError("At least one study day is required")
        if any(d < 1 or d > 7 for d in self.study_days):
            raise ValidationError("Study days must be weekday numbers 1-7")
        if self.rounds < 1 or self.target_rounds < 1:
            raise ValidationError("Rounds must be at least 1")
        if self.estimated_time_per_unit < 0:
            raise ValidationError("Estimated time per unit must be non-negative")


@dataclass(frozen=True)
class StudySession:
    id: str
    user_id: str
    plan_id: str
    date: datetime
    units_completed: int
    duration_minutes: float
    concentration: float
    difficulty: int
    round: int = 1
    start_unit: Optional[int] = None
    end_unit: Optional[int] = None

    def __post_init__(self):
        if self.start_unit is not None and self.end_unit is not None:
            if self.start_unit <= 0 or self.end_unit < self.start_unit:
                raise ValidationError("Session unit range is inconsistent")
            # An explicit range is authoritative for the unit count
            object.__setattr__(self, "units_completed", self.end_unit - self.start_unit + 1)
        if self.units_completed < 0:
            raise ValidationError("Units completed must be non-negative")
        if self.duration_minutes < 0:
            raise ValidationError("Duration must be non-negative")
        if not 0.0 <= self.concentration <= 1.0:
            raise ValidationError("Concentration must be between 0.0 and 1.0")
        if not 1 <= self.difficulty <= 5:
            raise ValidationError("Difficulty must be between 1 and 5")
        if self.round < 1:
            raise ValidationError("Round must be at least 1")

    @property
    def has_range(self) -> bool:
        return self.start_unit is not None and self.end_unit is not None


def _check_unit_span(start_unit: int, end_unit: int, units: int) -> None:
    if units <= 0:
        raise ValidationError("Units must be positive")
    if start_unit <= 0:
        raise ValidationError("Start unit must be positive")
    if end_unit < start_unit:
        raise ValidationError("End unit must not precede start unit")
    if end_unit - start_unit + 1 != units:
        raise ValidationError(
            f"Units {units} does not match range {start_unit}-{end_unit}"
        )


@dataclass(frozen=True)
class RoundTask:
    round: int
    start_unit: int
    end_unit: int
    units: int
    advice: Optional[str] = None

    def __post_init__(self):
        _check_unit_span(self.start_unit, self.end_unit, self.units)

    def shifted(self, offset: int) -> "RoundTask":
        return replace(self, start_unit=self.start_unit + offset, end_unit=self.end_unit + offset)


@dataclass(frozen=True)
class DailyTask:
    id: str
    plan_id: str
    date: date
    start_unit: int
    end_unit: int
    units: int
    estimated_duration: float  # minutes
    round: int = 1
    advice: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "date", to_date(self.date))
        _check_unit_span(self.start_unit, self.end_unit, self.units)
        if self.estimated_duration < 0:
            raise ValidationError("Estimated duration must be non-negative")

    def is_today(self, today: date) -> bool:
        return self.date == to_date(today)

    def is_past(self, today: date) -> bool:
        return self.date < to_date(today)

    def is_future(self, today: date) -> bool:
        return self.date > to_date(today)

    @property
    def estimated_hours(self) -> float:
        return self.estimated_duration / 60.0

    def title(self, plan_title: str) -> str:
        if self.round > 1:
            return f"{plan_title} (R{self.round}) U{self.start_unit}-{self.end_unit}"
        return f"{plan_title} U{self.start_unit}-{self.end_unit}"


@dataclass(frozen=True)
class DifficultyChunk:
    chunk_index: int
    start_unit: int
    end_unit: int
    average_difficulty: float
    is_hard: bool

    @property
    def units(self) -> int:
        return self.end_unit - self.start_unit + 1


@dataclass(frozen=True)
class ReviewItem:
    id: str
    user_id: str
    plan_id: str
    unit_number: int
    last_review_date: datetime
    next_review_date: datetime
    ease_factor: float = 2.5
    repetitions: int = 0
    interval_days: int = 1

    def __post_init__(self):
        if self.unit_number <= 0:
            raise ValidationError("Unit number must be positive")
        if self.ease_factor < 1.3:
            raise ValidationError("Ease factor must be at least 1.3")
        if self.repetitions < 0:
            raise ValidationError("Repetitions must be non-negative")
        if self.interval_days < 0:
            raise ValidationError("Interval must be non-negative")

    def days_until_next_review(self, today: date) -> int:
        return (to_date(self.next_review_date) - to_date(today)).days

    def is_overdue(self, today: date) -> bool:
        return to_date(today) > to_date(self.next_review_date)

    def is_due(self, today: date) -> bool:
        return to_date(today) >= to_date(self.next_review_date)

    def record_review(self, quality: int, now: datetime) -> "ReviewItem":
        """Return the item rescheduled by SM-2 for a review graded ``quality`` (0-5)."""
        updated = sm2_update(
            quality=quality,
            repetitions=self.repetitions,
            ease_factor=self.ease_factor,
            interval=self.interval_days,
        )
        return replace(
            self,
            last_review_date=now,
            next_review_date=now + timedelta(days=updated["interval"]),
            ease_factor=updated["ease_factor"],
            repetitions=updated["repetitions"],
            interval_days=updated["interval"],
        )

    def reset(self, now: datetime) -> "ReviewItem":
        return replace(
            self,
            last_review_date=now,
            next_review_date=now + timedelta(days=1),
            ease_factor=2.5,
            repetitions=0,
            interval_days=1,
        )
