"""Map the service error taxonomy onto HTTP responses."""

import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from services.errors import (
    AlreadyExists,
    Forbidden,
    InternalError,
    NotFound,
    NotRegistered,
    TodoServiceError,
    Unauthenticated,
    Unauthorized,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    ValidationError: 400,
    Unauthenticated: 401,
    Unauthorized: 401,
    Forbidden: 403,
    NotRegistered: 403,
    NotFound: 404,
    AlreadyExists: 409,
    InternalError: 500,
}


def status_for(exc: TodoServiceError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def register_error_handlers(app):
    @app.errorhandler(TodoServiceError)
    def handle_service_error(exc: TodoServiceError):
        status = status_for(exc)
        if status >= 500:
            logger.error("Request failed: %s", exc.message, extra={"error_code": exc.code})
            return jsonify(InternalError().to_dict()), status
        return jsonify(exc.to_dict()), status

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description, "code": exc.name.upper().replace(" ", "_")}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error")
        return jsonify(InternalError().to_dict()), 500
