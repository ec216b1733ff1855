from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Hashable, Iterable, Optional

from .arrangement import assignments_from, shuffle
from .constraints import ExclusionSet, Pair, check_pairs
from .errors import DrawInfeasible, InvalidInput, PreconditionFailed
from .repair import repair
from .validator import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DrawConfig:
    max_attempts: int = 1000
    min_participants: int = 3
    # every Nth failed attempt also tries the swap repair; 0 turns it off
    repair_interval: int = 100


class Strategy(enum.Enum):
    RESHUFFLE = "reshuffle"
    REPAIR = "repair"


def select_strategy(attempt: int, config: DrawConfig) -> Strategy:
    """What to do after the given (1-based) attempt was rejected."""
    if config.repair_interval > 0 and attempt % config.repair_interval == 0:
        return Strategy.REPAIR
    return Strategy.RESHUFFLE


@dataclass(frozen=True)
class DrawResult:
    assignments: tuple[tuple, ...]
    attempts: int
    repaired: bool = False

    def as_mapping(self) -> dict:
        return dict(self.assignments)


def run_draw(
    participants: Iterable[Hashable],
    exclusions: Iterable[Pair] = (),
    config: Optional[DrawConfig] = None,
    rng: Optional[random.Random] = None,
) -> DrawResult:
    """
    Draw a single cycle over all participants that avoids every blocked pair.

    Raises PreconditionFailed for too few participants, InvalidInput for
    malformed blocks, and DrawInfeasible once the attempt budget is spent.
    """
    config = config or DrawConfig()
    rng = rng or random.Random()

    people = list(participants)
    if len(set(people)) != len(people):
        raise InvalidInput("Participant ids must be unique.")
    if len(people) < config.min_participants:
        raise PreconditionFailed(
            f"At least {config.min_participants} participants are required, got {len(people)}."
        )

    pairs = list(exclusions)
    check_pairs(people, pairs)
    blocks = ExclusionSet.build(pairs)
    logger.info("Draw started: %s participants, %s blocks", len(people), len(blocks))

    for attempt in range(1, config.max_attempts + 1):
        arrangement = shuffle(people, rng)
        assignments = validate(arrangement, blocks)
        if assignments is not None:
            logger.info("Valid arrangement on attempt #%s", attempt)
            return DrawResult(tuple(assignments), attempts=attempt)

        if select_strategy(attempt, config) is Strategy.REPAIR:
            logger.debug("Trying swap repair on attempt #%s", attempt)
            repaired = repair(arrangement, blocks)
            if repaired is not None:
                logger.info("Repaired arrangement on attempt #%s", attempt)
                return DrawResult(tuple(assignments_from(repaired)), attempts=attempt, repaired=True)

    logger.warning("Draw infeasible after %s attempts", config.max_attempts)
    raise DrawInfeasible(config.max_attempts)
