import logging

from flask import jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from main import db

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base for errors raised by API handlers. Rendered as a JSON body
    with an ``error`` string and optional ``details`` mapping."""

    def __init__(self, description=None, details=None):
        super().__init__(description)
        self.details = details


class ValidationError(APIError):
    code = 400
    description = "Invalid request"


class ConflictError(APIError):
    code = 400
    description = "Record already exists"


class NotFoundError(APIError):
    code = 404
    description = "Not found"


class ForbiddenError(APIError):
    code = 403
    description = "Forbidden"


class UnauthorizedError(APIError):
    code = 401
    description = "Authentication required"


def error_body(e: HTTPException):
    body = {"error": e.description}
    details = getattr(e, "details", None)
    if details:
        body["details"] = details
    return body


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify(error_body(e)), e.code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        db.session.rollback()
        logger.warning("Integrity error: %s", e.orig)
        return jsonify(error_body(ConflictError())), ConflictError.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        db.session.rollback()
        logger.exception("Unhandled exception during request: %r", e)
        return jsonify({"error": "Internal server error"}), 500
