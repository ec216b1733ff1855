from __future__ import annotations

import logging
from datetime import date

from ..extensions import db
from ..models import DrawRecord, Exclusion, Group, GroupMember, User
from ..policies import is_group_admin, is_member
from .errors import Conflict, Forbidden, NotFound

logger = logging.getLogger(__name__)


def load_group(group_id: int) -> Group:
    group = db.session.get(Group, group_id)
    if group is None:
        raise NotFound("Group not found.")
    return group


def load_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found.")
    return user


def require_admin(group: Group, user: User, action: str) -> None:
    if not is_group_admin(group, user):
        raise Forbidden(f"Only the group admin can {action}.")


def require_member(group: Group, user: User) -> None:
    if not is_member(group, user):
        raise Forbidden("You are not a member of this group.")


def member_ids(group: Group) -> list[int]:
    return [m.user_id for m in group.members]


def create_group(admin: User, name: str, description: str | None = None, draw_date: date | None = None) -> Group:
    group = Group(name=name, description=description, admin_id=admin.id, draw_date=draw_date)
    group.members.append(GroupMember(user_id=admin.id))
    db.session.add(group)
    db.session.commit()
    logger.info("Group %s created by %s", group.id, admin.name)
    return group


def groups_for_user(user: User) -> list[Group]:
    return (
        Group.query.join(GroupMember, GroupMember.group_id == Group.id)
        .filter(GroupMember.user_id == user.id)
        .order_by(Group.id.asc())
        .all()
    )


def get_group_for_member(group_id: int, user: User) -> Group:
    group = load_group(group_id)
    require_member(group, user)
    return group


def add_member(group_id: int, user_id: int, acting_user: User) -> GroupMember:
    group = load_group(group_id)
    require_admin(group, acting_user, "add members")
    new_member = load_user(user_id)

    if is_member(group, new_member):
        raise Conflict("User is already a member of this group.")
    if group.draw is not None:
        raise Conflict("The draw has already run. Reset it before adding members.")

    membership = GroupMember(group_id=group.id, user_id=new_member.id)
    db.session.add(membership)
    db.session.commit()
    return membership


def remove_member(group_id: int, user_id: int, acting_user: User) -> None:
    group = load_group(group_id)
    require_admin(group, acting_user, "remove members")
    member = load_user(user_id)

    if member.id == group.admin_id:
        raise Conflict("The group admin cannot be removed.")

    membership = GroupMember.query.filter_by(group_id=group.id, user_id=member.id).first()
    if membership is None:
        raise NotFound("Member not found in this group.")

    # A draw over the old roster no longer covers everyone.
    if group.draw is not None:
        db.session.delete(group.draw)
        logger.info("Draw for group %s reset because %s left", group.id, member.name)

    Exclusion.query.filter(
        Exclusion.group_id == group.id,
        (Exclusion.blocker_id == member.id) | (Exclusion.blocked_id == member.id),
    ).delete(synchronize_session=False)

    db.session.delete(membership)
    db.session.commit()


def delete_group(group_id: int, acting_user: User) -> None:
    group = load_group(group_id)
    require_admin(group, acting_user, "delete the group")
    db.session.delete(group)
    db.session.commit()
    logger.info("Group %s deleted by %s", group_id, acting_user.name)


def draw_exists(group: Group) -> bool:
    return DrawRecord.query.filter_by(group_id=group.id).first() is not None
