from __future__ import annotations

from typing import Hashable, Iterable

from .errors import InvalidInput

Pair = tuple[Hashable, Hashable]


class ExclusionSet:
    """
    Directed blocks: giver -> receivers that giver may not draw.
    Blocking A -> B says nothing about B -> A.
    """

    def __init__(self, blocked: dict[Hashable, frozenset]):
        self._blocked = blocked

    @classmethod
    def build(cls, pairs: Iterable[Pair]) -> "ExclusionSet":
        blocked: dict[Hashable, set] = {}
        for blocker, target in pairs:
            blocked.setdefault(blocker, set()).add(target)
        return cls({giver: frozenset(targets) for giver, targets in blocked.items()})

    def is_excluded(self, giver: Hashable, receiver: Hashable) -> bool:
        targets = self._blocked.get(giver)
        return targets is not None and receiver in targets

    def __len__(self) -> int:
        return sum(len(targets) for targets in self._blocked.values())


def check_pairs(participants: Iterable[Hashable], pairs: Iterable[Pair]) -> None:
    known = set(participants)
    for blocker, target in pairs:
        if blocker == target:
            raise InvalidInput(f"Participant {blocker!r} cannot block themselves.")
        if blocker not in known or target not in known:
            raise InvalidInput(f"Block ({blocker!r}, {target!r}) references an unknown participant.")
