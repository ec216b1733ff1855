from typing import Iterable

from santadraw.extensions import db
from santadraw.models import User
from santadraw.services.groups import add_member, create_group


def follow_cycle(mapping: dict, start) -> list:
    seen = [start]
    current = mapping[start]
    while current != start:
        assert current not in seen, "receiver links close a smaller cycle"
        seen.append(current)
        current = mapping[current]
    return seen


def assert_valid_draw(participants: Iterable, pairs: Iterable, assignments: Iterable) -> None:
    people = list(participants)
    blocked = set(pairs)
    assignments = list(assignments)

    assert len(assignments) == len(people)
    givers = [g for g, _ in assignments]
    receivers = [r for _, r in assignments]
    assert sorted(map(repr, givers)) == sorted(map(repr, people))
    assert sorted(map(repr, receivers)) == sorted(map(repr, people))

    for giver, receiver in assignments:
        assert giver != receiver
        assert (giver, receiver) not in blocked

    mapping = dict(assignments)
    assert len(follow_cycle(mapping, people[0])) == len(people)


def make_user(name: str):
    # Service tests never log in, so the hash is never verified.
    user = User(name=name, passkey_hash="unused")
    db.session.add(user)
    db.session.commit()
    return user


def make_group(admin, *others):
    group = create_group(admin, "Office party")
    for user in others:
        add_member(group.id, user.id, admin)
    return group
