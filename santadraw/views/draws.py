from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user

from ..policies import LoginRequiredMixin
from ..services.draws import all_draws, execute_draw, my_draw, reset_draw

draws_bp = Blueprint("draws", __name__, url_prefix="/api/groups/<int:group_id>")


class DrawView(LoginRequiredMixin):
    def post(self, group_id: int):
        return jsonify(execute_draw(group_id, current_user)), 201

    def delete(self, group_id: int):
        reset_draw(group_id, current_user)
        return "", 204


class MyDrawView(LoginRequiredMixin):
    def get(self, group_id: int):
        return jsonify(my_draw(group_id, current_user))


class AllDrawsView(LoginRequiredMixin):
    def get(self, group_id: int):
        return jsonify(all_draws(group_id, current_user))


draws_bp.add_url_rule("/draw", view_func=DrawView.as_view("draw"), methods=["POST", "DELETE"])
draws_bp.add_url_rule("/my-draw", view_func=MyDrawView.as_view("my_draw"), methods=["GET"])
draws_bp.add_url_rule("/draw/all", view_func=AllDrawsView.as_view("all_draws"), methods=["GET"])
