from __future__ import annotations

import logging
import os
from flask import Flask

from .errors import register_error_handlers
from .extensions import db, login_manager, migrate, csrf
from .views.auth import auth_bp
from .views.draws import draws_bp
from .views.groups import groups_bp
from .views.messages import messages_bp
from .views.users import users_bp


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__)

    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///santadraw.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["CREATE_TABLES"] = os.environ.get("CREATE_TABLES", "1") == "1"
    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Site-wide admin is the user whose name matches this exactly
    app.config["SITE_ADMIN_NAME"] = os.environ.get("SITE_ADMIN_NAME", "").strip()

    # Draw engine budget
    app.config["DRAW_MAX_ATTEMPTS"] = int(os.environ.get("DRAW_MAX_ATTEMPTS", "1000"))
    app.config["DRAW_MIN_PARTICIPANTS"] = int(os.environ.get("DRAW_MIN_PARTICIPANTS", "3"))
    app.config["DRAW_REPAIR_INTERVAL"] = int(os.environ.get("DRAW_REPAIR_INTERVAL", "100"))

    if test_config:
        app.config.update(test_config)

    logging.basicConfig(level=app.config["LOG_LEVEL"])

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    # Blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(groups_bp)
    app.register_blueprint(draws_bp)
    app.register_blueprint(messages_bp)
    app.register_blueprint(users_bp)

    register_error_handlers(app)

    if app.config["CREATE_TABLES"]:
        with app.app_context():
            db.create_all()

    return app
