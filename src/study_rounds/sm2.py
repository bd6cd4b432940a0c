"""SM-2 spaced repetition algorithm."""
from study_rounds.errors import ValidationError

MIN_EASE_FACTOR = 1.3


def sm2_update(
    quality: int,
    repetitions: int,
    ease_factor: float,
    interval: int,
) -> dict:
    """Calculate next review parameters using SM-2.

    Args:
        quality: Recall rating 0-5 (0=complete blackout, 5=perfect)
        repetitions: Number of consecutive successful reviews
        ease_factor: Current ease factor (minimum 1.3)
        interval: Current interval in days

    Returns:
        Dict with updated interval, repetitions, ease_factor.
    """
    if not 0 <= quality <= 5:
        raise ValidationError("Quality must be between 0 and 5")

    if quality < 3:
        # Failed recall: start over tomorrow, ease factor untouched
        return {"interval": 1, "repetitions": 0, "ease_factor": ease_factor}

    new_ef = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    new_ef = round(max(MIN_EASE_FACTOR, new_ef), 2)

    new_repetitions = repetitions + 1
    if new_repetitions == 1:
        new_interval = 1
    elif new_repetitions == 2:
        new_interval = 6
    else:
        new_interval = round(interval * new_ef)

    return {
        "interval": new_interval,
        "repetitions": new_repetitions,
        "ease_factor": new_ef,
    }
