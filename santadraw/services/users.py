from __future__ import annotations

import logging

from ..extensions import db
from ..models import Exclusion, Group, GroupMember, Message, User
from ..policies import is_site_admin
from .errors import Conflict, Forbidden
from .groups import load_user

logger = logging.getLogger(__name__)


def _require_site_admin(user: User) -> None:
    if not is_site_admin(user):
        raise Forbidden("Only the site admin can manage users.")


def all_users(acting_user: User) -> list[User]:
    _require_site_admin(acting_user)
    return User.query.order_by(User.name.asc()).all()


def delete_user(user_id: int, acting_user: User) -> None:
    _require_site_admin(acting_user)
    user = load_user(user_id)

    if user.id == acting_user.id:
        raise Conflict("You cannot delete the admin account while logged in as it.")
    if Group.query.filter_by(admin_id=user.id).first():
        raise Conflict("This user still administers a group. Delete the group first.")

    memberships = GroupMember.query.filter_by(user_id=user.id).all()
    for membership in memberships:
        # Same rule as removing a member: the old cycle no longer covers the roster.
        if membership.group.draw is not None:
            db.session.delete(membership.group.draw)
        db.session.delete(membership)

    Exclusion.query.filter(
        (Exclusion.blocker_id == user.id) | (Exclusion.blocked_id == user.id)
    ).delete(synchronize_session=False)
    Message.query.filter_by(sender_id=user.id).delete(synchronize_session=False)

    db.session.delete(user)
    db.session.commit()
    logger.info("User %s deleted by %s", user.name, acting_user.name)
