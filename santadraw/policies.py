from __future__ import annotations

from flask import current_app, jsonify
from flask.views import MethodView
from flask_login import current_user

from .extensions import login_manager
from .models import GroupMember


def is_site_admin(user) -> bool:
    admin_name = (current_app.config.get("SITE_ADMIN_NAME") or "").strip()
    return bool(admin_name) and user is not None and user.is_authenticated and user.name == admin_name


def is_group_admin(group, user) -> bool:
    return user is not None and user.is_authenticated and group.admin_id == user.id


def is_member(group, user) -> bool:
    if user is None or not user.is_authenticated:
        return False
    return GroupMember.query.filter_by(group_id=group.id, user_id=user.id).first() is not None


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"status": 401, "error": "Unauthorized", "message": "Login required."}), 401


class LoginRequiredMixin(MethodView):
    def dispatch_request(self, *args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        return super().dispatch_request(*args, **kwargs)
