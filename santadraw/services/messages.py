from __future__ import annotations

from ..extensions import db
from ..models import Message, User
from ..policies import is_group_admin
from .errors import BadRequest, Forbidden, NotFound
from .groups import load_group, require_member

MAX_CONTENT = 1000


def _load_message(message_id: int) -> Message:
    message = db.session.get(Message, message_id)
    if message is None:
        raise NotFound("Message not found.")
    return message


def send_message(group_id: int, user: User, content: str, is_anonymous: bool = True) -> Message:
    group = load_group(group_id)
    require_member(group, user)

    content = (content or "").strip()
    if not content or len(content) > MAX_CONTENT:
        raise BadRequest(f"Message must have between 1 and {MAX_CONTENT} characters.")

    message = Message(group_id=group.id, sender_id=user.id, content=content, is_anonymous=is_anonymous)
    db.session.add(message)
    db.session.commit()
    return message


def group_messages(group_id: int, user: User) -> list[Message]:
    """Newest first."""
    group = load_group(group_id)
    require_member(group, user)
    return (
        Message.query.filter_by(group_id=group.id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )


def get_message(message_id: int, user: User) -> Message:
    message = _load_message(message_id)
    require_member(message.group, user)
    return message


def delete_message(message_id: int, user: User) -> None:
    message = _load_message(message_id)
    if message.sender_id != user.id and not is_group_admin(message.group, user):
        raise Forbidden("Only the sender or the group admin can delete this message.")
    db.session.delete(message)
    db.session.commit()
