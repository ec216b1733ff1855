from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify, request
from flask_login import current_user

from ..errors import error_response
from ..policies import LoginRequiredMixin
from ..services.exclusions import block_member, get_blocks, set_blocks, unblock_member
from ..services.groups import (
    add_member,
    create_group,
    delete_group,
    get_group_for_member,
    groups_for_user,
    remove_member,
)

groups_bp = Blueprint("groups", __name__, url_prefix="/api/groups")


def _int_field(data: dict, key: str):
    try:
        return int(data[key])
    except (KeyError, TypeError, ValueError):
        return None


class GroupListView(LoginRequiredMixin):
    def get(self):
        return jsonify([g.to_dict() for g in groups_for_user(current_user)])

    def post(self):
        data = request.get_json(silent=True) or {}
        name = (data.get("name") or "").strip()
        if not name:
            return error_response(400, "Group name is required.")

        draw_date = None
        if data.get("draw_date"):
            try:
                draw_date = date.fromisoformat(data["draw_date"])
            except (TypeError, ValueError):
                return error_response(400, "draw_date must be an ISO date (YYYY-MM-DD).")

        group = create_group(current_user, name, (data.get("description") or "").strip() or None, draw_date)
        return jsonify(group.to_dict()), 201


class GroupDetailView(LoginRequiredMixin):
    def get(self, group_id: int):
        return jsonify(get_group_for_member(group_id, current_user).to_dict())

    def delete(self, group_id: int):
        delete_group(group_id, current_user)
        return "", 204


class MemberListView(LoginRequiredMixin):
    def post(self, group_id: int):
        user_id = _int_field(request.get_json(silent=True) or {}, "user_id")
        if user_id is None:
            return error_response(400, "user_id is required.")
        add_member(group_id, user_id, current_user)
        return jsonify(get_group_for_member(group_id, current_user).to_dict()), 201


class MemberDetailView(LoginRequiredMixin):
    def delete(self, group_id: int, user_id: int):
        remove_member(group_id, user_id, current_user)
        return "", 204


def _blocks_payload(group_id: int) -> dict:
    outgoing, incoming = get_blocks(group_id, current_user)
    return {"dont_gift_to": sorted(outgoing), "blocked_by": sorted(incoming)}


class BlockListView(LoginRequiredMixin):
    def get(self, group_id: int):
        return jsonify(_blocks_payload(group_id))

    def post(self, group_id: int):
        user_id = _int_field(request.get_json(silent=True) or {}, "user_id")
        if user_id is None:
            return error_response(400, "user_id is required.")
        block_member(group_id, current_user, user_id)
        return jsonify(_blocks_payload(group_id)), 201

    def put(self, group_id: int):
        data = request.get_json(silent=True) or {}
        try:
            dont_gift_to = {int(x) for x in data.get("dont_gift_to") or []}
        except (TypeError, ValueError):
            return error_response(400, "dont_gift_to must be a list of user ids.")
        set_blocks(group_id, current_user, dont_gift_to)
        return jsonify(_blocks_payload(group_id))


class BlockDetailView(LoginRequiredMixin):
    def delete(self, group_id: int, user_id: int):
        unblock_member(group_id, current_user, user_id)
        return "", 204


groups_bp.add_url_rule("", view_func=GroupListView.as_view("list"), methods=["GET", "POST"])
groups_bp.add_url_rule("/<int:group_id>", view_func=GroupDetailView.as_view("detail"), methods=["GET", "DELETE"])
groups_bp.add_url_rule("/<int:group_id>/members", view_func=MemberListView.as_view("members"), methods=["POST"])
groups_bp.add_url_rule(
    "/<int:group_id>/members/<int:user_id>",
    view_func=MemberDetailView.as_view("member"),
    methods=["DELETE"],
)
groups_bp.add_url_rule("/<int:group_id>/blocks", view_func=BlockListView.as_view("blocks"), methods=["GET", "POST", "PUT"])
groups_bp.add_url_rule(
    "/<int:group_id>/blocks/<int:user_id>",
    view_func=BlockDetailView.as_view("block"),
    methods=["DELETE"],
)
