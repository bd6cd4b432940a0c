"""Tests for the performance, progress and date range value objects."""
from datetime import date, datetime

import pytest

from study_rounds.errors import ValidationError
from study_rounds.models import QualityLevel
from study_rounds.values import DateRange, PerformanceMetrics, Progress


def test_progress_flags():
    assert Progress(100, 100).is_complete
    assert Progress(0, 100).is_not_started
    assert Progress(40, 100).is_in_progress
    assert not Progress(0, 100).is_in_progress


def test_progress_derived_values():
    progress = Progress(25, 100)
    assert progress.percentage == 0.25
    assert progress.remaining == 75
    assert str(progress) == "Progress(25/100 = 25.0%)"


@pytest.mark.parametrize("completed,total", [(-1, 100), (0, 0), (101, 100)])
def test_progress_rejects_invalid_values(completed, total):
    with pytest.raises(ValidationError):
        Progress(completed, total)


@pytest.mark.parametrize("amount,expected", [(10, 60), (80, 100), (-70, 0), (0, 50)])
def test_progress_advance_clamps(amount, expected):
    progress = Progress(50, 100)
    advanced = progress.advance(amount)
    assert advanced.completed == expected
    assert 0.0 <= advanced.percentage <= 1.0
    assert progress.completed == 50


def test_progress_with_total_and_reset():
    progress = Progress(80, 100)
    assert progress.with_total(50) == Progress(50, 50)
    assert progress.with_total(200) == Progress(80, 200)
    assert progress.reset() == Progress(0, 100)


def test_performance_factor():
    assert PerformanceMetrics(1.0, 5, 60, 10).performance_factor == 1.0
    assert PerformanceMetrics(1.0, 3, 60, 10).performance_factor == pytest.approx(0.6)
    assert PerformanceMetrics(0.5, 1, 60, 10).performance_factor == pytest.approx(0.1)


@pytest.mark.parametrize("concentration", [0.0, 0.3, 0.77, 1.0])
@pytest.mark.parametrize("difficulty", [1, 2, 3, 4, 5])
def test_performance_factor_within_bounds(concentration, difficulty):
    factor = PerformanceMetrics(concentration, difficulty, 30, 3).performance_factor
    assert 0.0 <= factor <= 1.0


@pytest.mark.parametrize("args", [
    (-0.1, 3, 10, 1),
    (1.1, 3, 10, 1),
    (0.5, 0, 10, 1),
    (0.5, 6, 10, 1),
    (0.5, 3, -1, 1),
    (0.5, 3, 10, -1),
])
def test_performance_metrics_rejects_invalid_values(args):
    with pytest.raises(ValidationError):
        PerformanceMetrics(*args)


def test_average_time_and_efficiency():
    metrics = PerformanceMetrics(1.0, 5, 30, 10)
    assert metrics.average_time_per_unit == 3.0
    assert metrics.efficiency_score == pytest.approx(20.0)


def test_zero_guards():
    metrics = PerformanceMetrics(0.5, 3, 0, 0)
    assert metrics.average_time_per_unit == 0.0
    assert metrics.efficiency_score == 0.0


@pytest.mark.parametrize("concentration,difficulty,level", [
    (1.0, 5, QualityLevel.EXCELLENT),
    (0.9, 4, QualityLevel.GOOD),
    (1.0, 2, QualityLevel.FAIR),
    (0.5, 3, QualityLevel.POOR),
])
def test_quality_level(concentration, difficulty, level):
    assert PerformanceMetrics(concentration, difficulty, 30, 5).quality_level is level


def test_quality_thresholds_can_be_injected():
    metrics = PerformanceMetrics(0.5, 3, 30, 5, thresholds=(0.9, 0.5, 0.1))
    assert metrics.quality_level is QualityLevel.FAIR


def test_date_range_truncates_and_counts():
    rng = DateRange(datetime(2026, 10, 1, 15, 30), datetime(2026, 10, 10, 8, 0))
    assert rng.start == date(2026, 10, 1)
    assert rng.days_count == 10
    assert rng.contains(datetime(2026, 10, 10, 23, 59))
    assert not rng.contains(date(2026, 10, 11))


def test_date_range_rejects_reversed():
    with pytest.raises(ValidationError):
        DateRange(date(2026, 10, 2), date(2026, 10, 1))


def test_date_range_relative_to_today():
    rng = DateRange(date(2026, 10, 1), date(2026, 10, 10))
    assert rng.contains_today(date(2026, 10, 5))
    assert rng.elapsed_days(date(2026, 9, 30)) == 0
    assert rng.elapsed_days(date(2026, 10, 5)) == 5
    assert rng.elapsed_days(date(2026, 10, 20)) == 10
    assert rng.remaining_days(date(2026, 10, 5)) == 6
    assert rng.remaining_days(date(2026, 10, 11)) == 0
    assert rng.progress_ratio(date(2026, 10, 5)) == 0.5


def test_difficulty_checked_against_max_difficulty():
    assert PerformanceMetrics(1.0, 3, 10, 1, max_difficulty=3).performance_factor == 1.0
    with pytest.raises(ValidationError):
        PerformanceMetrics(0.5, 4, 10, 1, max_difficulty=3)
    with pytest.raises(ValidationError):
        PerformanceMetrics(0.5, 1, 10, 1, max_difficulty=0)
