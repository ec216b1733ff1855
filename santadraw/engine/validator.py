from __future__ import annotations

from typing import Hashable, Optional, Sequence

from .arrangement import assignments_from
from .constraints import ExclusionSet


def first_violation(arrangement: Sequence[Hashable], exclusions: ExclusionSet) -> Optional[int]:
    """Index of the first giver whose successor is blocked, or None."""
    n = len(arrangement)
    for i in range(n):
        if exclusions.is_excluded(arrangement[i], arrangement[(i + 1) % n]):
            return i
    return None


def validate(arrangement: Sequence[Hashable], exclusions: ExclusionSet) -> Optional[list[tuple]]:
    if first_violation(arrangement, exclusions) is not None:
        return None
    return assignments_from(arrangement)
