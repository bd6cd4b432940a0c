"""Multi-round task planning.

Round 1 walks the whole unit range once. Later rounds revisit the range
chunk by chunk, hard chunks first, using the difficulty profile recorded
during round 1.
"""
from typing import Iterable, Optional, Sequence

from loguru import logger

from study_rounds.chunks import find_hard_chunks, partition
from study_rounds.config import get_settings
from study_rounds.difficulty import extract_difficulties
from study_rounds.models import DifficultyChunk, RoundTask, StudyPlan, StudySession
from study_rounds.plans import unit_bounds


def flat_profile(total_units: int, value: Optional[float] = None) -> list[float]:
    """A profile with every unit at ``value`` (default difficulty 3).

    With the default threshold of 3.5 no chunk of a flat profile is hard, so
    later rounds keep unit order.
    """
    if value is None:
        value = get_settings().default_difficulty
    return [value] * max(total_units, 0)


def order_hard_first(
    chunks: Sequence[DifficultyChunk],
    threshold: Optional[float] = None,
) -> list[DifficultyChunk]:
    """Hard chunks then the rest, each group keeping its original order."""
    hard = find_hard_chunks(chunks, threshold)
    hard_indexes = {c.chunk_index for c in hard}
    return hard + [c for c in chunks if c.chunk_index not in hard_indexes]


def round_advice(round_number: int, is_hard: bool) -> str:
    if is_hard:
        return f"Round {round_number}: hard chunk first"
    return f"Round {round_number}: review"


def generate_round_tasks(
    total_units: int,
    target_rounds: int,
    difficulties: Sequence[float],
    chunk_size: Optional[int] = None,
    threshold: Optional[float] = None,
) -> list[RoundTask]:
    """Build the ordered task list for every round of a plan.

    ``difficulties`` is required: pass ``extract_difficulties`` output, or
    ``flat_profile`` when there is no history and no prioritisation is wanted.
    """
    if total_units <= 0:
        return []
    threshold = get_settings().hard_threshold if threshold is None else threshold

    tasks = [RoundTask(round=1, start_unit=1, end_unit=total_units, units=total_units)]
    if target_rounds > 1:
        chunks = partition(total_units, difficulties, chunk_size, threshold)
        ordered = order_hard_first(chunks, threshold)
        for round_number in range(2, target_rounds + 1):
            for chunk in ordered:
                tasks.append(RoundTask(
                    round=round_number,
                    start_unit=chunk.start_unit,
                    end_unit=chunk.end_unit,
                    units=chunk.units,
                    advice=round_advice(round_number, chunk.is_hard),
                ))
        logger.debug(
            "{} of {} chunks hard for {} units", sum(c.is_hard for c in chunks), len(chunks), total_units,
        )
    logger.debug("Generated {} round tasks for {} rounds", len(tasks), target_rounds)
    return tasks


def plan_round_tasks(plan: StudyPlan, sessions: Iterable[StudySession]) -> list[RoundTask]:
    """Round tasks for a stored plan, in its absolute unit numbering.

    Later rounds are only planned once round 1 has covered the whole range;
    until then the plan has a single round-1 task.
    """
    sessions = list(sessions)
    start, end = unit_bounds(plan)
    range_total = end - start + 1
    first_round_done = sum(s.units_completed for s in sessions if s.round == 1)

    if first_round_done >= range_total and plan.target_rounds > 1:
        profile = extract_difficulties(range_total, sessions)
        tasks = generate_round_tasks(range_total, plan.target_rounds, profile)
        return [t.shifted(start - 1) for t in tasks]
    return [RoundTask(round=1, start_unit=start, end_unit=end, units=range_total)]
