"""Per-unit difficulty profile derived from first-round session history."""
from typing import Iterable, Optional

from study_rounds.config import get_settings
from study_rounds.models import StudySession


def extract_difficulties(
    total_units: int,
    sessions: Iterable[StudySession],
    default: Optional[float] = None,
) -> list[float]:
    """Return one difficulty value per unit (0-based index) of a plan.

    Only round-1 sessions count. They are replayed in date order, each one
    covering the next ``units_completed`` units after the previous session,
    so the profile assumes sessions never overlap and were logged in unit
    order. Coverage past ``total_units`` is dropped. Units no session
    reached get ``default`` (normal difficulty, 3).
    """
    if default is None:
        default = get_settings().default_difficulty
    if total_units <= 0:
        return []

    sums = [0.0] * total_units
    counts = [0] * total_units
    first_round = sorted((s for s in sessions if s.round == 1), key=lambda s: s.date)

    cursor = 0
    for session in first_round:
        end = cursor + session.units_completed
        for i in range(cursor, min(end, total_units)):
            sums[i] += session.difficulty
            counts[i] += 1
        cursor = end

    return [sums[i] / counts[i] if counts[i] else default for i in range(total_units)]
