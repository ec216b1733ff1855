from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.http import HTTP_STATUS_CODES

from .engine import DrawError, DrawInfeasible
from .services.errors import ServiceError

logger = logging.getLogger(__name__)


def error_response(status: int, message: str):
    body = {
        "status": status,
        "error": HTTP_STATUS_CODES.get(status, "Error"),
        "message": message,
        "path": request.path,
    }
    return jsonify(body), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ServiceError)
    def handle_service_error(e: ServiceError):
        logger.warning("%s on %s: %s", type(e).__name__, request.path, e)
        return error_response(e.status_code, str(e))

    @app.errorhandler(DrawError)
    def handle_draw_error(e: DrawError):
        status = 422 if isinstance(e, DrawInfeasible) else 400
        logger.warning("%s on %s: %s", type(e).__name__, request.path, e)
        return error_response(status, str(e))

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        body = {
            "status": e.code,
            "error": e.name,
            "message": e.description,
            "path": request.path,
        }
        return jsonify(body), e.code
