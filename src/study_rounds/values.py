"""Immutable value objects: performance metrics, progress and date ranges."""
from dataclasses import dataclass, field, replace
from datetime import date

from study_rounds.config import get_settings
from study_rounds.errors import ValidationError
from study_rounds.models import QualityLevel, to_date


def _max_difficulty() -> int:
    return get_settings().max_difficulty


def _quality_thresholds() -> tuple[float, float, float]:
    s = get_settings()
    return (s.excellent_threshold, s.good_threshold, s.fair_threshold)


@dataclass(frozen=True)
class PerformanceMetrics:
    concentration: float
    difficulty: int
    duration_minutes: float
    units_completed: int
    max_difficulty: int = field(default_factory=_max_difficulty, compare=False, repr=False)
    # (excellent, good, fair) lower bounds on performance_factor
    thresholds: tuple = field(default_factory=_quality_thresholds, compare=False, repr=False)

    def __post_init__(self):
        if not 0.0 <= self.concentration <= 1.0:
            raise ValidationError("Concentration must be between 0.0 and 1.0")
        if self.max_difficulty < 1:
            raise ValidationError("Maximum difficulty must be at least 1")
        if not 1 <= self.difficulty <= self.max_difficulty:
            raise ValidationError(f"Difficulty must be between 1 and {self.max_difficulty}")
        if self.duration_minutes < 0:
            raise ValidationError("Duration must be non-negative")
        if self.units_completed < 0:
            raise ValidationError("Units completed must be non-negative")

    @property
    def performance_factor(self) -> float:
        """concentration * difficulty normalised by the maximum difficulty, clamped to [0, 1]."""
        raw = self.concentration * self.difficulty / self.max_difficulty
        return max(0.0, min(1.0, raw))

    @property
    def average_time_per_unit(self) -> float:
        if self.units_completed == 0:
            return 0.0
        return self.duration_minutes / self.units_completed

    @property
    def efficiency_score(self) -> float:
        if self.duration_minutes == 0:
            return 0.0
        units_per_hour = self.units_completed / self.duration_minutes * 60
        return self.performance_factor * units_per_hour

    @property
    def quality_level(self) -> QualityLevel:
        excellent, good, fair = self.thresholds
        factor = self.performance_factor
        if factor >= excellent:
            return QualityLevel.EXCELLENT
        elif factor >= good:
            return QualityLevel.GOOD
        elif factor >= fair:
            return QualityLevel.FAIR
        return QualityLevel.POOR

    def __str__(self) -> str:
        return (
            f"PerformanceMetrics(concentration={self.concentration}, "
            f"difficulty={self.difficulty}, duration={self.duration_minutes}min, "
            f"units={self.units_completed}, factor={self.performance_factor:.3f})"
        )


@dataclass(frozen=True)
class Progress:
    completed: int
    total: int

    def __post_init__(self):
        if self.completed < 0:
            raise ValidationError("Completed must be non-negative")
        if self.total <= 0:
            raise ValidationError("Total must be positive")
        if self.completed > self.total:
            raise ValidationError("Completed cannot exceed total")

    @property
    def percentage(self) -> float:
        return self.completed / self.total

    @property
    def remaining(self) -> int:
        return self.total - self.completed

    @property
    def is_complete(self) -> bool:
        return self.completed >= self.total

    @property
    def is_not_started(self) -> bool:
        return self.completed == 0

    @property
    def is_in_progress(self) -> bool:
        return 0 < self.completed < self.total

    def advance(self, amount: int) -> "Progress":
        """Return a new Progress moved by ``amount``, clamped to [0, total]."""
        return replace(self, completed=max(0, min(self.total, self.completed + amount)))

    def reset(self) -> "Progress":
        return replace(self, completed=0)

    def with_total(self, new_total: int) -> "Progress":
        """Return a new Progress over ``new_total``; completed is clamped to it."""
        return Progress(max(0, min(new_total, self.completed)), new_total)

    def __str__(self) -> str:
        return f"Progress({self.completed}/{self.total} = {self.percentage * 100:.1f}%)"


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self):
        object.__setattr__(self, "start", to_date(self.start))
        object.__setattr__(self, "end", to_date(self.end))
        if self.start > self.end:
            raise ValidationError("Start date must be before or equal to end date")

    @property
    def days_count(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= to_date(day) <= self.end

    def contains_today(self, today: date) -> bool:
        return self.contains(today)

    def remaining_days(self, today: date) -> int:
        today = to_date(today)
        if today > self.end:
            return 0
        return (self.end - today).days + 1

    def elapsed_days(self, today: date) -> int:
        today = to_date(today)
        if today < self.start:
            return 0
        if today > self.end:
            return self.days_count
        return (today - self.start).days + 1

    def progress_ratio(self, today: date) -> float:
        return self.elapsed_days(today) / self.days_count
