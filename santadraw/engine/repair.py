from __future__ import annotations

import logging
from typing import Hashable, Optional, Sequence

from .constraints import ExclusionSet
from .validator import first_violation

logger = logging.getLogger(__name__)


def repair(arrangement: Sequence[Hashable], exclusions: ExclusionSet) -> Optional[list]:
    """
    Local search over single swaps, at most n^2 rounds.

    Each round takes the first blocked pair (i, i+1) and tries moving every
    other participant j (j not in {i, i+1}) into the receiver slot, keeping
    the first swap that makes the whole cycle valid. A round that finds
    nothing leaves the arrangement as it was, so the next round repeats the
    same search.

    Returns a new valid arrangement, or None.
    """
    current = list(arrangement)
    n = len(current)

    for _ in range(n * n):
        i = first_violation(current, exclusions)
        if i is None:
            return current

        slot = (i + 1) % n
        for j in range(n):
            if j == i or j == slot:
                continue
            current[slot], current[j] = current[j], current[slot]
            if first_violation(current, exclusions) is None:
                logger.debug("Repair swapped positions %s and %s", slot, j)
                return current
            current[slot], current[j] = current[j], current[slot]

    return None
