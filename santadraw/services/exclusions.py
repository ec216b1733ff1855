from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Exclusion, Group, User
from .errors import BadRequest, Conflict, NotFound
from .groups import draw_exists, load_group, member_ids, require_member


def exclusion_pairs(group: Group) -> list[tuple[int, int]]:
    return [(e.blocker_id, e.blocked_id) for e in Exclusion.query.filter_by(group_id=group.id).all()]


def get_blocks(group_id: int, user: User) -> tuple[set[int], set[int]]:
    """
    Returns:
      outgoing = {blocked_id} that user cannot draw
      incoming = {blocker_id} that cannot draw user
    """
    group = load_group(group_id)
    require_member(group, user)
    outgoing = {e.blocked_id for e in Exclusion.query.filter_by(group_id=group.id, blocker_id=user.id).all()}
    incoming = {e.blocker_id for e in Exclusion.query.filter_by(group_id=group.id, blocked_id=user.id).all()}
    return outgoing, incoming


def _editable_group(group_id: int, user: User) -> Group:
    group = load_group(group_id)
    require_member(group, user)
    if draw_exists(group):
        raise Conflict("Blocks are read-only once the draw has run.")
    return group


def _check_target(group: Group, user: User, blocked_id: int) -> None:
    if blocked_id == user.id:
        raise BadRequest("You cannot block yourself.")
    if blocked_id not in member_ids(group):
        raise BadRequest("The user to block is not a member of this group.")


def block_member(group_id: int, user: User, blocked_id: int) -> Exclusion:
    group = _editable_group(group_id, user)
    _check_target(group, user, blocked_id)

    if Exclusion.query.filter_by(group_id=group.id, blocker_id=user.id, blocked_id=blocked_id).first():
        raise Conflict("Block already exists.")

    exclusion = Exclusion(group_id=group.id, blocker_id=user.id, blocked_id=blocked_id)
    db.session.add(exclusion)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise Conflict("Block already exists.") from e
    return exclusion


def unblock_member(group_id: int, user: User, blocked_id: int) -> None:
    group = _editable_group(group_id, user)
    exclusion = Exclusion.query.filter_by(group_id=group.id, blocker_id=user.id, blocked_id=blocked_id).first()
    if exclusion is None:
        raise NotFound("Block not found.")
    db.session.delete(exclusion)
    db.session.commit()


def set_blocks(group_id: int, user: User, dont_gift_to: set[int]) -> None:
    """
    Replaces every user -> blocked_id exclusion in the group with dont_gift_to.
    """
    group = _editable_group(group_id, user)
    for blocked_id in dont_gift_to:
        _check_target(group, user, blocked_id)

    Exclusion.query.filter_by(group_id=group.id, blocker_id=user.id).delete()
    for blocked_id in dont_gift_to:
        db.session.add(Exclusion(group_id=group.id, blocker_id=user.id, blocked_id=blocked_id))

    db.session.commit()
