from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user

from ..errors import error_response
from ..policies import LoginRequiredMixin
from ..services.messages import delete_message, get_message, group_messages, send_message

messages_bp = Blueprint("messages", __name__, url_prefix="/api/messages")


class MessageListView(LoginRequiredMixin):
    def post(self):
        data = request.get_json(silent=True) or {}
        try:
            group_id = int(data["group_id"])
        except (KeyError, TypeError, ValueError):
            return error_response(400, "group_id is required.")

        anonymous = data.get("anonymous", True)
        if not isinstance(anonymous, bool):
            return error_response(400, "anonymous must be true or false.")

        message = send_message(group_id, current_user, data.get("content") or "", anonymous)
        return jsonify(message.to_dict()), 201


class GroupMessagesView(LoginRequiredMixin):
    def get(self, group_id: int):
        return jsonify([m.to_dict() for m in group_messages(group_id, current_user)])


class MessageDetailView(LoginRequiredMixin):
    def get(self, message_id: int):
        return jsonify(get_message(message_id, current_user).to_dict())

    def delete(self, message_id: int):
        delete_message(message_id, current_user)
        return "", 204


messages_bp.add_url_rule("", view_func=MessageListView.as_view("list"), methods=["POST"])
messages_bp.add_url_rule("/group/<int:group_id>", view_func=GroupMessagesView.as_view("group"), methods=["GET"])
messages_bp.add_url_rule(
    "/<int:message_id>",
    view_func=MessageDetailView.as_view("detail"),
    methods=["GET", "DELETE"],
)
