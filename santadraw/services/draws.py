from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..engine import DrawConfig, run_draw
from ..extensions import db
from ..models import Assignment, DrawRecord, Group, User
from ..security import decrypt_assignment_recipient, encrypt_assignment_recipient
from .errors import Conflict, NotFound
from .exclusions import exclusion_pairs
from .groups import load_group, member_ids, require_admin, require_member

logger = logging.getLogger(__name__)


def draw_config() -> DrawConfig:
    cfg = current_app.config
    return DrawConfig(
        max_attempts=int(cfg["DRAW_MAX_ATTEMPTS"]),
        min_participants=int(cfg["DRAW_MIN_PARTICIPANTS"]),
        repair_interval=int(cfg["DRAW_REPAIR_INTERVAL"]),
    )


def _assignment_to_dict(group: Group, assignment: Assignment) -> dict:
    receiver = db.session.get(User, decrypt_assignment_recipient(assignment.receiver_ciphertext))
    return {
        "id": assignment.id,
        "group_id": group.id,
        "group_name": group.name,
        "giver": assignment.giver.name,
        "receiver": receiver.name if receiver else None,
    }


def execute_draw(group_id: int, user: User, rng: Optional[random.Random] = None) -> list[dict]:
    group = load_group(group_id)
    require_admin(group, user, "run the draw")
    if group.draw is not None:
        raise Conflict("A draw already exists for this group. Reset it first.")

    logger.info("Running draw for group %s requested by %s", group.id, user.name)
    result = run_draw(member_ids(group), exclusion_pairs(group), config=draw_config(), rng=rng)

    record = DrawRecord(
        group_id=group.id,
        run_by_id=user.id,
        run_at=datetime.utcnow(),
        attempts=result.attempts,
        repaired=result.repaired,
    )
    for giver_id, receiver_id in result.assignments:
        record.assignments.append(
            Assignment(giver_id=giver_id, receiver_ciphertext=encrypt_assignment_recipient(receiver_id))
        )

    db.session.add(record)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise Conflict("A draw already exists for this group. Reset it first.") from e

    logger.info("Draw for group %s stored: %s pairs", group.id, len(record.assignments))
    return [_assignment_to_dict(group, a) for a in record.assignments]


def my_draw(group_id: int, user: User) -> dict:
    group = load_group(group_id)
    require_member(group, user)

    assignment = None
    if group.draw is not None:
        assignment = Assignment.query.filter_by(draw_id=group.draw.id, giver_id=user.id).first()
    if assignment is None:
        raise NotFound("The draw has not been run yet.")
    return _assignment_to_dict(group, assignment)


def all_draws(group_id: int, user: User) -> list[dict]:
    group = load_group(group_id)
    require_admin(group, user, "see all draw results")
    if group.draw is None:
        return []
    return [_assignment_to_dict(group, a) for a in group.draw.assignments]


def reset_draw(group_id: int, user: User) -> None:
    group = load_group(group_id)
    require_admin(group, user, "reset the draw")
    if group.draw is not None:
        db.session.delete(group.draw)
        db.session.commit()
    logger.info("Draw reset for group %s by %s", group.id, user.name)
