from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user

from ..policies import LoginRequiredMixin
from ..services.groups import load_user
from ..services.users import all_users, delete_user

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


class UserListView(LoginRequiredMixin):
    def get(self):
        return jsonify([u.to_dict() for u in all_users(current_user)])


class UserDetailView(LoginRequiredMixin):
    def get(self, user_id: int):
        return jsonify(load_user(user_id).to_dict())

    def delete(self, user_id: int):
        delete_user(user_id, current_user)
        return "", 204


users_bp.add_url_rule("", view_func=UserListView.as_view("list"), methods=["GET"])
users_bp.add_url_rule("/<int:user_id>", view_func=UserDetailView.as_view("detail"), methods=["GET", "DELETE"])
