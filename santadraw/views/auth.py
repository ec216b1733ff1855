from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask.views import MethodView
from flask_login import login_user, logout_user, current_user
from flask_wtf.csrf import generate_csrf
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import error_response
from ..models import User
from ..policies import LoginRequiredMixin
from ..security import hash_passphrase, verify_passphrase


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


class RegisterView(MethodView):
    def post(self):
        data = request.get_json(silent=True) or {}
        name = (data.get("name") or "").strip()
        email = (data.get("email") or "").strip() or None
        passphrase = data.get("passphrase") or ""

        if not name:
            return error_response(400, "Name is required.")

        if not passphrase:
            return error_response(400, "Passphrase is required.")

        if User.query.filter_by(name=name).first():
            return error_response(409, "That name is already registered.")

        if email and User.query.filter_by(email=email).first():
            return error_response(409, "That email is already registered.")

        user = User(
            name=name,
            email=email,
            passkey_hash=hash_passphrase(passphrase),
        )
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return error_response(409, "That name or email is already registered.")

        return jsonify(user.to_dict()), 201


class LoginView(MethodView):
    def post(self):
        data = request.get_json(silent=True) or {}
        name = (data.get("name") or "").strip()
        passphrase = data.get("passphrase") or ""

        if not name:
            return error_response(400, "Name is required.")

        user = User.query.filter_by(name=name).first()
        if not user or not passphrase or not verify_passphrase(passphrase, user.passkey_hash):
            return error_response(400, "Invalid name or passphrase.")

        login_user(user)
        return jsonify(user.to_dict())


class LogoutView(MethodView):
    def post(self):
        if current_user.is_authenticated:
            logout_user()
        return "", 204


class MeView(LoginRequiredMixin):
    def get(self):
        return jsonify(current_user.to_dict())


class CsrfTokenView(MethodView):
    def get(self):
        return jsonify({"csrf_token": generate_csrf()})


auth_bp.add_url_rule("/register", view_func=RegisterView.as_view("register"), methods=["POST"])
auth_bp.add_url_rule("/login", view_func=LoginView.as_view("login"), methods=["POST"])
auth_bp.add_url_rule("/logout", view_func=LogoutView.as_view("logout"), methods=["POST"])
auth_bp.add_url_rule("/me", view_func=MeView.as_view("me"), methods=["GET"])
auth_bp.add_url_rule("/csrf-token", view_func=CsrfTokenView.as_view("csrf_token"), methods=["GET"])
