"""Split a unit range into fixed-size chunks scored by difficulty."""
import math
from typing import Optional, Sequence

from study_rounds.config import get_settings
from study_rounds.errors import ValidationError
from study_rounds.models import DifficultyChunk


def partition(
    total_units: int,
    difficulties: Sequence[float],
    chunk_size: Optional[int] = None,
    threshold: Optional[float] = None,
) -> list[DifficultyChunk]:
    """Tile units 1..total_units with chunks of ``chunk_size``.

    The last chunk may be shorter. A chunk is hard when the mean of its
    slice of ``difficulties`` reaches ``threshold``.
    """
    settings = get_settings()
    chunk_size = settings.chunk_size if chunk_size is None else chunk_size
    threshold = settings.hard_threshold if threshold is None else threshold
    if chunk_size <= 0:
        raise ValidationError("Chunk size must be positive")

    chunks = []
    for i in range(math.ceil(max(total_units, 0) / chunk_size)):
        start = i * chunk_size + 1
        end = min(total_units, (i + 1) * chunk_size)
        piece = difficulties[i * chunk_size:end]
        avg = sum(piece) / len(piece) if piece else 0.0
        chunks.append(DifficultyChunk(
            chunk_index=i,
            start_unit=start,
            end_unit=end,
            average_difficulty=avg,
            is_hard=avg >= threshold,
        ))
    return chunks


def find_hard_chunks(
    chunks: Sequence[DifficultyChunk],
    threshold: Optional[float] = None,
) -> list[DifficultyChunk]:
    """Chunks whose average difficulty reaches ``threshold``.

    Pass the same threshold that was used for ``partition``.
    """
    if threshold is None:
        threshold = get_settings().hard_threshold
    return [c for c in chunks if c.average_difficulty >= threshold]
