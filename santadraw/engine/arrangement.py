from __future__ import annotations

import random
from typing import Hashable, Sequence


def shuffle(participants: Sequence[Hashable], rng: random.Random) -> list:
    """Fisher-Yates over a copy; every one of the n! orders is equally likely."""
    arrangement = list(participants)
    for i in range(len(arrangement) - 1, 0, -1):
        j = rng.randrange(i + 1)
        arrangement[i], arrangement[j] = arrangement[j], arrangement[i]
    return arrangement


def assignments_from(arrangement: Sequence[Hashable]) -> list[tuple]:
    n = len(arrangement)
    return [(arrangement[i], arrangement[(i + 1) % n]) for i in range(n)]
